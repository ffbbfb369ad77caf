"""
Logging configuration for secproto.

Provides structured logging with Rich console output and optional file logging.
This is diagnostic logging only; the execution log written for the operator
lives in secproto.reporting.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> logging.Logger:
    """
    Set up logging configuration for secproto.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write logs to
        verbose: Enable verbose output (DEBUG level)
        quiet: Suppress non-critical output (WARNING+ only)

    Returns:
        Configured logger instance
    """
    # Install rich traceback handler
    install(show_locals=verbose)

    # Determine effective log level
    if verbose:
        effective_level = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level.upper()

    logger = logging.getLogger("secproto")
    logger.setLevel(getattr(logging, effective_level))

    # Clear any existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # Console handler with Rich formatting
    console = Console(stderr=True)
    console_handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
    )
    console_handler.setLevel(getattr(logging, effective_level))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        # The console handler keeps its own level; the file gets everything
        logger.setLevel(logging.DEBUG)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always debug level for files

        file_format = (
            "%(asctime)s - %(name)s - %(levelname)s - "
            "%(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(logging.Formatter(file_format))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "secproto") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_command(command: str, estimated_duration_ms: int) -> None:
    """Log a command being executed."""
    logger = get_logger("secproto.command")
    logger.debug(f"Executing: {command} (estimate: {estimated_duration_ms}ms)")


def log_command_result(
    command: str,
    returncode: Optional[int],
    stderr: str,
    duration_ms: int,
) -> None:
    """Log the result of a command execution."""
    logger = get_logger("secproto.command")
    cmd_str = " ".join(command.split()[:2])  # Just show first two parts for brevity

    if returncode == 0:
        logger.debug(f"Command '{cmd_str}' completed in {duration_ms}ms")
    elif returncode is None:
        logger.warning(f"Command '{cmd_str}' could not be started")
    else:
        logger.warning(
            f"Command '{cmd_str}' failed (exit {returncode}) in {duration_ms}ms"
        )
        if stderr:
            logger.debug(f"stderr: {stderr[:200]}...")


def log_tool_skip(tool_name: str) -> None:
    """Log when a tool is skipped by the operator."""
    logger = get_logger("secproto.orchestrator")
    logger.info(f"Skipping {tool_name}: not selected")


def log_tool_failure(tool_name: str, error: str) -> None:
    """Log when a tool run fails."""
    logger = get_logger("secproto.orchestrator")
    logger.warning(f"{tool_name} failed: {error}")
