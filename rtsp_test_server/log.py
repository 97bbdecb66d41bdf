"""Logging setup for the RTSP test server (stdout only, no rotation)."""

import logging
import sys

LOG_FORMAT = '[%(asctime)s] [RTSP-TEST] %(levelname)s: %(message)s'
LOG_DATEFMT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, stream=None) -> logging.Logger:
    """Configure the root logger to write leveled lines to stdout.

    Returns the root logger. Calling it again replaces the previous handler,
    so the stream can be swapped (tests pass their own).
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=stream or sys.stdout,
        force=True,
    )
    return logging.getLogger()


def flush_logging():
    for handler in logging.getLogger().handlers:
        try:
            handler.flush()
        except (OSError, ValueError):
            # closed stream
            continue
