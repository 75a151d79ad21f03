"""Shared logging utilities.

Analysis output (CLI JSON, API responses) owns stdout, so diagnostic logging
goes to stderr through a SafeStreamHandler that tolerates the stream being
closed underneath it (piped into `head`, detached terminal, uvicorn reload).
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that ignores broken pipe and closed file errors.

    Defaults to sys.stderr so that log lines never interleave with JSON
    written to stdout.
    """

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stderr)

    def emit(self, record):
        try:
            super().emit(record)
        except BrokenPipeError:
            pass  # reader went away
        except ValueError:
            pass  # I/O operation on closed file


def resolve_level(level) -> int:
    """Accept a logging level as an int or a name like "debug"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_safe_logging(level=logging.INFO, logger_name: str = "pm_copilot"):
    """Attach a SafeStreamHandler to the package logger.

    Safe to call multiple times (guards against duplicate handlers).

    Args:
        level: Logging level as int or name (default: INFO)
        logger_name: Logger to configure (default: the package logger)

    Returns:
        The configured logger
    """
    level = resolve_level(level)
    logger = logging.getLogger(logger_name)
    if not any(isinstance(h, SafeStreamHandler) for h in logger.handlers):
        handler = SafeStreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        if isinstance(handler, SafeStreamHandler):
            handler.setLevel(level)
    logger.setLevel(level)
    return logger
