"""
Pattern matching for resume section identification.

This module provides the regex patterns and rule tables used to decide which
lines of a plain-text resume open a project/experience section, which lines
close one, and which lines mark an existing "Responsibilities:" block.

Pattern classes follow the package convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Rule tables (ordered predicates, first match wins) built from those patterns
- Helper functions that evaluate the rule tables
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

# =============================================================================
# SECTION OPENER PATTERNS
# =============================================================================


@dataclass(frozen=True)
class SectionOpenerPatterns:
    """
    Regex patterns for lines that open a candidate project section.

    All patterns are matched against the stripped line, case-insensitively.
    """

    # "Project: Billing Platform", "Experience - 2019:", "Role: Backend Developer"
    KEYWORD_COLON: re.Pattern = re.compile(
        r"^(project|experience|work|employment|position|role).*:", re.IGNORECASE
    )

    # "Capstone Project", "Relevant Work Experience"
    KEYWORD_SUFFIX: re.Pattern = re.compile(
        r"^.*\s+(project|experience|work|employment|position|role)\s*$", re.IGNORECASE
    )

    # "Software Engineer", "Data Analyst II", "Backend Platform Developer"
    ROLE_TITLE: re.Pattern = re.compile(
        r"^(software|web|mobile|data|ai|ml|backend|frontend|fullstack).*\s+"
        r"(developer|engineer|analyst|architect)",
        re.IGNORECASE,
    )

    # "Acme Widgets Inc. (Remote)", "Globex Company"
    EMPLOYER_SUFFIX: re.Pattern = re.compile(
        r"^.*\s+(inc\.|corp\.|ltd\.|llc|company|organization).*$", re.IGNORECASE
    )

    # "2019 - 2022", "2021 – Present"
    DATE_RANGE: re.Pattern = re.compile(
        r"^\d{4}\s*[-–—]\s*\d{4}|\d{4}\s*[-–—]\s*present", re.IGNORECASE
    )


# Words that make a short, period-free line look like a job title
SENIORITY_WORDS = ("developer", "engineer", "analyst", "manager", "lead", "senior")

# Bounds (exclusive) for the short job-title heuristic
TITLE_LINE_MIN_CHARS = 10
TITLE_LINE_MAX_CHARS = 100


# =============================================================================
# SECTION BOUNDARY PATTERNS
# =============================================================================

# Canonical resume headers that close an open section
CANONICAL_HEADERS = (
    "education",
    "skills",
    "experience",
    "projects",
    "work experience",
    "professional experience",
    "certifications",
    "awards",
    "publications",
    "languages",
    "interests",
    "hobbies",
    "references",
    "volunteer",
    "additional information",
    "summary",
    "objective",
    "profile",
    "technical skills",
    "core competencies",
    "achievements",
)

# Bounds (exclusive) for the all-caps header heuristic
UPPER_HEADER_MIN_CHARS = 3
UPPER_HEADER_MAX_CHARS = 50

# Max length of the text before the colon in a "Header: ..." line
COLON_HEADER_MAX_PREFIX = 30


# =============================================================================
# RESPONSIBILITY MARKER PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ResponsibilityPatterns:
    """
    Regex patterns for lines introducing an existing list of duties.

    MARKERS is the broad set recorded during segmentation.
    INSERTION_MARKERS is the narrower set used to pick an insertion line.
    """

    MARKERS: tuple = (
        re.compile(r"responsibilities\s*:", re.IGNORECASE),
        re.compile(r"key\s+responsibilities\s*:", re.IGNORECASE),
        re.compile(r"duties\s*:", re.IGNORECASE),
        re.compile(r"achievements\s*:", re.IGNORECASE),
        re.compile(r"accomplishments\s*:", re.IGNORECASE),
        re.compile(r"key\s+achievements\s*:", re.IGNORECASE),
        re.compile(r"what\s+i\s+did\s*:", re.IGNORECASE),
        re.compile(r"role\s*:", re.IGNORECASE),
        re.compile(r"tasks\s*:", re.IGNORECASE),
    )

    INSERTION_MARKERS: tuple = (
        re.compile(r"responsibilities\s*:", re.IGNORECASE),
        re.compile(r"key\s+responsibilities\s*:", re.IGNORECASE),
        re.compile(r"duties\s*:", re.IGNORECASE),
        re.compile(r"achievements\s*:", re.IGNORECASE),
    )

    # Header the rebuilder inserts (and checks for) above spliced bullets
    RESPONSIBILITIES_HEADER: re.Pattern = re.compile(r"responsibilities\s*:", re.IGNORECASE)


# =============================================================================
# RULE ENGINE
# =============================================================================


@dataclass(frozen=True)
class LineRule:
    """
    A named boolean heuristic over a single line.

    Attributes:
        name: Rule identifier reported by match_rule() (e.g., 'role_title')
        predicate: Callable receiving the stripped line and returning True on match
    """

    name: str
    predicate: Callable[[str], bool]

    def matches(self, line: str) -> bool:
        return self.predicate(line)


def _looks_like_title(line: str) -> bool:
    lower = line.lower()
    return (
        TITLE_LINE_MIN_CHARS < len(line) < TITLE_LINE_MAX_CHARS
        and "." not in line
        and any(word in lower for word in SENIORITY_WORDS)
    )


def _is_canonical_header(line: str) -> bool:
    lower = line.lower()
    return any(
        lower == header
        or lower == header + ":"
        or lower.startswith(header + " ")
        or lower.endswith(" " + header)
        for header in CANONICAL_HEADERS
    )


def _is_upper_header(line: str) -> bool:
    # Needs a cased letter, so a date line like "2019 - 2021" stays inside the open section
    return line.isupper() and UPPER_HEADER_MIN_CHARS < len(line) < UPPER_HEADER_MAX_CHARS


def _is_colon_header(line: str) -> bool:
    if ":" not in line or "," in line or "." in line:
        return False
    return len(line.split(":", 1)[0]) < COLON_HEADER_MAX_PREFIX


OPENER_RULES = (
    LineRule("keyword_colon", lambda line: bool(SectionOpenerPatterns.KEYWORD_COLON.match(line))),
    LineRule("keyword_suffix", lambda line: bool(SectionOpenerPatterns.KEYWORD_SUFFIX.match(line))),
    LineRule("role_title", lambda line: bool(SectionOpenerPatterns.ROLE_TITLE.match(line))),
    LineRule("employer_suffix", lambda line: bool(SectionOpenerPatterns.EMPLOYER_SUFFIX.match(line))),
    LineRule("date_range", lambda line: bool(SectionOpenerPatterns.DATE_RANGE.search(line))),
    LineRule("short_title", _looks_like_title),
)

BOUNDARY_RULES = (
    LineRule("canonical_header", _is_canonical_header),
    LineRule("upper_case_header", _is_upper_header),
    LineRule("colon_header", _is_colon_header),
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def match_rule(line: str, rules: tuple) -> Optional[str]:
    """
    Evaluate a rule table against a line.

    Args:
        line: Line to classify (stripped by the caller)
        rules: Ordered tuple of LineRule

    Returns:
        Name of the first matching rule, or None if no rule matches
    """
    for rule in rules:
        if rule.matches(line):
            return rule.name
    return None


def is_section_opener(line: str) -> bool:
    """
    Check whether a line opens a candidate project section.

    Args:
        line: Raw document line

    Returns:
        True if the stripped, non-empty line matches any opener rule
    """
    stripped = line.strip()
    if not stripped:
        return False
    return match_rule(stripped, OPENER_RULES) is not None


def is_responsibility_marker(line: str) -> bool:
    """Check whether a line introduces an existing duties/achievements list."""
    return any(pattern.search(line) for pattern in ResponsibilityPatterns.MARKERS)


def is_insertion_marker(line: str) -> bool:
    """Check whether a line is a marker bullets should be inserted directly below."""
    return any(pattern.search(line) for pattern in ResponsibilityPatterns.INSERTION_MARKERS)


def is_section_boundary(line: str, is_first_line: bool = False) -> bool:
    """
    Check whether a line closes the currently open section.

    The opening line of a section and blank lines are never boundaries.
    Responsibility markers ("Responsibilities:", "Duties:") belong to the
    section they appear in, so they are absorbed rather than treated as
    "Header:" lines, unless the line is nothing but a canonical header.

    Args:
        line: Raw document line
        is_first_line: True for the line that opened the section

    Returns:
        True if the line matches a boundary rule
    """
    stripped = line.strip()
    if is_first_line or not stripped:
        return False
    # A bare "ACHIEVEMENTS:" is a top-level header, not a per-role marker
    is_bare_header = stripped.lower().rstrip(":").strip() in CANONICAL_HEADERS
    if is_responsibility_marker(stripped) and not is_bare_header:
        return False
    return match_rule(stripped, BOUNDARY_RULES) is not None
