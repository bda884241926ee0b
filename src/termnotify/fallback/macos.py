"""macOS notifications via osascript (AppleScript)."""

from __future__ import annotations

import platform
import shutil

from termnotify.fallback.base import DEFAULT_TITLE, FallbackProvider
from termnotify.osc.sanitize import strip_controls


def _applescript_escape(s: str) -> str:
    """Escape a string for embedding in an AppleScript double-quoted literal."""
    return s.replace("\\", "\\\\").replace('"', '\\"')


class MacOSFallback(FallbackProvider):
    """Notification Center has no urgency levels; *urgency* is ignored."""

    @property
    def name(self) -> str:
        return "macos"

    def _check_available(self) -> bool:
        if platform.system() != "Darwin":
            return False
        return shutil.which("osascript") is not None

    def send(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        if not self.is_available():
            return False
        osascript = shutil.which("osascript")
        if not osascript:
            return False
        safe_title = _applescript_escape(strip_controls(title or DEFAULT_TITLE))
        safe_message = _applescript_escape(strip_controls(message))
        script = f'display notification "{safe_message}" with title "{safe_title}"'
        return self._run([osascript, "-e", script])
