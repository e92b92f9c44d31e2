"""
Text processing utilities for scoring and display.

All matching here is literal (regex-escaped) and case-sensitive; callers
lowercase both sides when they want case-insensitive behaviour.
"""

import math
import re
from typing import List


def count_occurrences(text: str, term: str) -> int:
    """
    Count non-overlapping literal occurrences of a term in text.

    Args:
        text: Text to search
        term: Literal term (regex metacharacters like '+' in 'c++' are escaped)

    Returns:
        Number of matches (0 for an empty term)

    Example:
        >>> count_occurrences("python, python and more python", "python")
        3
        >>> count_occurrences("c++ and c++17", "c++")
        2
    """
    if not term:
        return 0
    return len(re.findall(re.escape(term), text))


def count_word_occurrences(text: str, word: str) -> int:
    """
    Count whole-word occurrences of a word in text.

    Example:
        >>> count_word_occurrences("built and rebuilt, then built again", "built")
        2
    """
    if not word:
        return 0
    return len(re.findall(r"\b" + re.escape(word) + r"\b", text))


def split_tokens(text: str) -> List[str]:
    """
    Split text on whitespace, keeping punctuation attached to tokens.

    Example:
        >>> split_tokens("Built 5 REST APIs, using Django")
        ['Built', '5', 'REST', 'APIs,', 'using', 'Django']
    """
    return text.split()


def word_tokens(text: str) -> List[str]:
    """
    Extract lowercase word tokens, keeping '+' and '#' so 'c++' and 'c#' survive.

    Example:
        >>> word_tokens("Optimized C++ pipeline (40% faster)")
        ['optimized', 'c++', 'pipeline', '40', 'faster']
    """
    return re.findall(r"[a-z0-9+#]+", text.lower())


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    Python's round() uses banker's rounding (round(2.5) == 2); scores and
    budgets here expect 2.5 -> 3.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(2.49)
        2
    """
    return int(math.floor(value + 0.5))


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length including ellipsis

    Returns:
        Original text if within max_len, otherwise truncated with "..."

    Example:
        >>> truncate_display("short", 10)
        "short"
        >>> truncate_display("this is a very long string", 10)
        "this is..."
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
