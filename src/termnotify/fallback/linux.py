"""Linux desktop notifications via notify-send (libnotify)."""

from __future__ import annotations

import platform
import shutil

from termnotify.fallback.base import DEFAULT_TITLE, FallbackProvider
from termnotify.osc.encode import Urgency
from termnotify.osc.sanitize import strip_controls

_URGENCY_NAMES = {
    Urgency.LOW: "low",
    Urgency.NORMAL: "normal",
    Urgency.CRITICAL: "critical",
}


class LinuxFallback(FallbackProvider):
    app_name = "termnotify"

    @property
    def name(self) -> str:
        return "linux"

    def _check_available(self) -> bool:
        if platform.system() != "Linux":
            return False
        return shutil.which("notify-send") is not None

    def send(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        if not self.is_available():
            return False
        ns = shutil.which("notify-send")
        if not ns:
            return False
        level = _URGENCY_NAMES[Urgency.clamp(Urgency.NORMAL if urgency is None else urgency)]
        cmd = [
            ns,
            f"--urgency={level}",
            f"--app-name={self.app_name}",
            strip_controls(title or DEFAULT_TITLE),
            strip_controls(message),
        ]
        return self._run(cmd)
