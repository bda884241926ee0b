"""Logging setup for the termnotify CLI.

Escape sequences and log records must never share a stream: a record
written between the halves of an OSC 99 pair, or inside a tmux passthrough
block, corrupts what the terminal sees.  :func:`setup_logging` therefore
takes the name of the stream the notifier writes to and refuses to log
there.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_LOG_FILE = "~/.termnotify/termnotify.log"
_MAX_LOG_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def stderr_logging_allowed(output: str, stderr: bool = True) -> bool:
    """Whether records may go to stderr while sequences go to *output*."""
    return stderr and output != "stderr"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    stderr: bool = True,
    output: str = "stdout",
) -> logging.Logger:
    """Configure and return the ``termnotify`` logger.

    Library code only calls :func:`get_logger`; hosts embedding
    :class:`~termnotify.notifier.Notifier` configure logging themselves.

    Parameters
    ----------
    level:
        DEBUG, INFO, WARNING or ERROR.  Anything else means WARNING.
    log_file:
        Rotating log file.  Defaults to ``~/.termnotify/termnotify.log``.
    stderr:
        Also log to stderr, unless *output* is ``"stderr"``.
    output:
        Stream carrying the escape sequences (``"stdout"`` or ``"stderr"``).
    """
    logger = logging.getLogger("termnotify")

    for h in logger.handlers[:]:
        h.close()
    logger.handlers.clear()

    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    fmt = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if stderr_logging_allowed(output, stderr):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(fmt)
        logger.addHandler(stderr_handler)

    file_path = Path(log_file or _DEFAULT_LOG_FILE).expanduser()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        str(file_path),
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_BACKUP_COUNT,
    )
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``termnotify.<name>``."""
    return logging.getLogger(f"termnotify.{name}")
