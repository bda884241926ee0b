"""OSC escape sequence building blocks: sanitizing, encoding, passthrough."""

from __future__ import annotations

from termnotify.osc.encode import (
    ProgressState,
    Protocol,
    Urgency,
    encode_close,
    encode_notification,
    encode_progress,
    hyperlink,
)
from termnotify.osc.mux import Multiplexer, detect_multiplexer, wrap
from termnotify.osc.sanitize import sanitize, sanitize_id

__all__ = [
    "Multiplexer",
    "ProgressState",
    "Protocol",
    "Urgency",
    "detect_multiplexer",
    "encode_close",
    "encode_notification",
    "encode_progress",
    "hyperlink",
    "sanitize",
    "sanitize_id",
    "wrap",
]
