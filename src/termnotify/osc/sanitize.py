"""Text cleanup for values embedded in OSC sequences."""

from __future__ import annotations

import re

# C0 controls plus DEL; anything here could terminate or corrupt a sequence.
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_ID_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9_+.\-]")


def sanitize(text: str) -> str:
    """Strip control characters and turn ``;`` into ``:``.

    Semicolons delimit fields in OSC 777 and OSC 99; colons are never a
    field delimiter, so the substitution cannot introduce ambiguity.
    Non-ASCII text passes through unchanged.
    """
    return _CONTROL_RE.sub("", text).replace(";", ":")


def strip_controls(text: str) -> str:
    """Remove control characters but keep semicolons."""
    return _CONTROL_RE.sub("", text)


def sanitize_id(notification_id: str) -> str:
    """Keep only ``[A-Za-z0-9_+.-]``.  An empty result means "no id"."""
    return _ID_DISALLOWED_RE.sub("", notification_id)
