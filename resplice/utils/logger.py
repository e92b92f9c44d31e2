"""
Session logging for tailoring runs.

Each CLI invocation gets its own directory under LOGS_PATH holding one
DEBUG-level log file; INFO and above is echoed to stderr so that stdout
stays free for JSON output. Context-specific prefixes live in
contexts/{context}/logger.py.
"""

import os
import platform
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from resplice import __version__
from resplice.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"


def session_log_dir(command: str, logs_root: Optional[Path] = None) -> Path:
    """
    Directory for one command's log session, e.g. outs/logs/preview_20251114_123456.

    Args:
        command: CLI command name
        logs_root: Parent directory (LOGS_PATH if None)
    """
    return Path(logs_root or LOGS_PATH) / f"{command}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    console_level: str = "INFO",
    console: bool = True,
) -> Path:
    """
    Replace loguru's sinks with a session file sink and an optional stderr sink.

    Args:
        context_name: Log file stem (e.g., "render")
        log_dir: Session directory, created if missing
        extra_provenance: Extra "key: value" lines for the session header
        console_level: Minimum level echoed to stderr
        console: Echo to stderr at all

    Returns:
        Path to the session log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    if console:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Write the session header: engine version, invocation, and environment."""
    rule = "-" * 72
    logger.debug(rule)
    logger.debug(f"resplice {__version__} on Python {platform.python_version()}")
    logger.debug(f"Invocation: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")

    config_env = os.getenv("RESPLICE_CONFIG_PATH")
    if config_env:
        logger.debug(f"RESPLICE_CONFIG_PATH: {config_env}")

    for key, value in (extra_context or {}).items():
        logger.debug(f"{key}: {value}")
    logger.debug(rule)
