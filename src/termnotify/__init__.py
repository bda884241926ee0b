"""termnotify — terminal-native desktop notifications via OSC escape sequences."""

from __future__ import annotations

__version__ = "0.3.0"

from termnotify.detect import Terminal, supported_terminals  # noqa: E402
from termnotify.notifier import Capabilities, Notifier  # noqa: E402
from termnotify.osc.encode import ProgressState, Protocol, Urgency, hyperlink  # noqa: E402

__all__ = [
    "Capabilities",
    "Notifier",
    "ProgressState",
    "Protocol",
    "Terminal",
    "Urgency",
    "__version__",
    "hyperlink",
    "supported_terminals",
]
