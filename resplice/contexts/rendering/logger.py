"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resplice.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Setup logger for a tailoring session.

    Args:
        log_dir: Directory for this session
        extra_provenance: Additional provenance entries (e.g., config path)

    Returns:
        Path to log file

    Example:
        from resplice.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir, {"Config": "defaults"})
    """
    return _setup_logger(context_name="render", log_dir=log_dir, extra_provenance=extra_provenance)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_rebuild_result(result, line_count: int) -> None:
    """
    Log the outcome of a document rebuild.

    Args:
        result: RebuildResult from rebuild_document()
        line_count: Number of original lines
    """
    _log_debug(
        f"Rebuilt {line_count} line(s) into {len(result.paragraphs)} paragraph(s) "
        f"with {len(result.edits)} edit(s)"
    )
    if result.skipped_bullets:
        _log_debug(f"  Skipped {len(result.skipped_bullets)} bullet(s) already present in the document")
        for bullet in result.skipped_bullets[:3]:
            _log_debug(f"    {bullet}")


def log_document_result(name: str, success: bool, detail: str) -> None:
    """Log per-document outcome in a pipeline run."""
    if success:
        _log_success(f"{name}: {detail}")
    else:
        _log_error(f"{name}: {detail}")
