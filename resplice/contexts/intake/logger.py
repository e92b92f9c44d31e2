"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_segmentation_result(sections: list, line_count: int, used_fallback: bool) -> None:
    """Log the outcome of section segmentation."""
    if used_fallback:
        _log_debug(f"No project sections detected in {line_count} lines, using whole-document fallback")
        return

    _log_debug(f"Detected {len(sections)} project section(s) in {line_count} lines")
    for section in sections:
        _log_debug(f"  [{section.start_index}-{section.end_index}] {section.title}")
