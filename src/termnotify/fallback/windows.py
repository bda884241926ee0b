"""Windows balloon notifications via PowerShell (native Windows or WSL)."""

from __future__ import annotations

import base64
import platform
import shutil

from termnotify.fallback.base import DEFAULT_TITLE, FallbackProvider
from termnotify.logging import get_logger
from termnotify.osc.sanitize import strip_controls

_log = get_logger("fallback.windows")

_BALLOON_TIMEOUT_MS = 5000

# System.Windows.Forms balloon tip; works without extra modules such as BurntToast.
_SCRIPT_TEMPLATE = """\
$ErrorActionPreference = 'SilentlyContinue'
Add-Type -AssemblyName System.Windows.Forms
$balloon = New-Object System.Windows.Forms.NotifyIcon
$balloon.Icon = [System.Drawing.SystemIcons]::Information
$balloon.BalloonTipTitle = '{title}'
$balloon.BalloonTipText = '{message}'
$balloon.Visible = $true
$balloon.ShowBalloonTip({timeout})
Start-Sleep -Milliseconds 100
$balloon.Dispose()
"""


def _is_wsl() -> bool:
    try:
        with open("/proc/version") as f:
            return "microsoft" in f.read().lower()
    except OSError:
        return False


def _ps_escape(s: str) -> str:
    """Escape a string for embedding in a PowerShell single-quoted literal."""
    return s.replace("'", "''")


def _powershell() -> str | None:
    return shutil.which("powershell") or shutil.which("powershell.exe")


def build_script(message: str, title: str | None = None) -> str:
    return _SCRIPT_TEMPLATE.format(
        title=_ps_escape(strip_controls(title or DEFAULT_TITLE)),
        message=_ps_escape(strip_controls(message)),
        timeout=_BALLOON_TIMEOUT_MS,
    )


class WindowsFallback(FallbackProvider):
    """Balloon tips have no urgency levels; *urgency* is ignored."""

    @property
    def name(self) -> str:
        return "windows"

    def _check_available(self) -> bool:
        system = platform.system()
        if system == "Windows":
            return _powershell() is not None
        # WSL reports Linux but can reach the Windows host's PowerShell
        if system == "Linux" and _is_wsl():
            return shutil.which("powershell.exe") is not None
        return False

    def send(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        if not self.is_available():
            return False
        ps = _powershell()
        if not ps:
            return False
        script = build_script(message, title)
        # -EncodedCommand takes base64 of UTF-16LE and sidesteps shell quoting
        encoded = base64.b64encode(script.encode("utf-16-le")).decode("ascii")
        _log.debug("sending balloon notification via %s", ps)
        return self._run([ps, "-NoProfile", "-NonInteractive", "-EncodedCommand", encoded])
