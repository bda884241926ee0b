"""Abstract base class for external notification providers."""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod

from termnotify.logging import get_logger

_log = get_logger("fallback")

DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_TITLE = "Notification"


class FallbackProvider(ABC):
    """A platform notifier invoked as an external command.

    The availability check (OS family + tool on ``PATH``) runs at most once
    per instance until :meth:`reset` is called.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._available: bool | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for this provider (e.g. 'linux')."""

    @abstractmethod
    def _check_available(self) -> bool:
        """Uncached availability check."""

    @abstractmethod
    def send(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        """Show a notification.  True when the tool exited with status 0."""

    def is_available(self) -> bool:
        if self._available is None:
            self._available = self._check_available()
            _log.debug("fallback %s available: %s", self.name, self._available)
        return self._available

    def reset(self) -> None:
        self._available = None

    # --- Shared helpers for subclasses ---

    def _run(self, cmd: list[str]) -> bool:
        """Run *cmd* to completion, bounded by ``self.timeout``."""
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            _log.warning("%s notifier timed out after %.1fs", self.name, self.timeout)
            return False
        except (OSError, subprocess.SubprocessError):
            _log.debug("%s notifier failed to run", self.name, exc_info=True)
            return False
        if result.returncode != 0:
            _log.debug("%s notifier exited with %d", self.name, result.returncode)
        return result.returncode == 0
