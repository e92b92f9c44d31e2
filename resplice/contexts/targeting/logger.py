"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[target]"


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_extraction_plans(plans: list, target_points: int) -> None:
    """Log the per-technology extraction budget."""
    planned = sum(plan.planned_extract for plan in plans)
    _log_debug(f"Extraction budget: {planned} bullet(s) planned against target {target_points}")
    for plan in plans:
        _log_debug(
            f"  {plan.technology}: {plan.planned_extract}/{plan.available_bullets} "
            f"(relevance {plan.tech_relevance})"
        )


def log_distribution(distribution: dict) -> None:
    """Log the final per-section bullet assignment."""
    for title, entries in distribution.items():
        count = sum(len(entry.bullets) for entry in entries)
        _log_debug(f"  '{title}' receives {count} bullet(s)")
