"""OSC sequence encoders.

Every function here is pure: it builds the escape sequence as a ``str`` and
leaves writing (and multiplexer wrapping) to the caller.

Dialects:

* OSC 9   -- iTerm2 style, message only.
* OSC 777 -- rxvt-unicode style, title + body.
* OSC 99  -- kitty style, title/body parts, urgency and notification ids.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from termnotify.osc.sanitize import sanitize, sanitize_id

ESC = "\x1b"
BEL = "\x07"
ST = "\x1b\\"

_DEFAULT_TITLE = "Notification"


class Protocol(str, Enum):
    """OSC notification dialect."""

    OSC9 = "osc9"
    OSC777 = "osc777"
    OSC99 = "osc99"

    @classmethod
    def parse(cls, value: Protocol | str) -> Protocol:
        """Resolve a dialect from a member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown protocol {value!r} — valid: {valid}") from None


class Urgency(IntEnum):
    """Notification urgency (only OSC 99 transmits it)."""

    LOW = 0
    NORMAL = 1
    CRITICAL = 2

    @classmethod
    def clamp(cls, value: int) -> Urgency:
        return cls(max(cls.LOW, min(cls.CRITICAL, int(value))))

    @classmethod
    def parse(cls, value: int | str) -> Urgency:
        """Resolve ``"critical"``, ``"2"`` or ``2``; numbers are clamped."""
        if isinstance(value, int):
            return cls.clamp(value)
        text = str(value).strip()
        try:
            return cls.clamp(int(text))
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError:
            valid = ", ".join(u.name.lower() for u in cls)
            raise ValueError(f"Unknown urgency {value!r} — valid: {valid}") from None


class ProgressState(IntEnum):
    """OSC 9;4 progress bar state."""

    HIDDEN = 0
    NORMAL = 1
    ERROR = 2
    INDETERMINATE = 3
    PAUSED = 4

    @classmethod
    def clamp(cls, value: int) -> ProgressState:
        return cls(max(cls.HIDDEN, min(cls.PAUSED, int(value))))


def encode_osc9(message: str) -> str:
    """``ESC ] 9 ; message BEL``.  No title, urgency or id."""
    return f"{ESC}]9;{sanitize(message)}{BEL}"


def encode_osc777(message: str, title: str | None = None) -> str:
    """``ESC ] 777 ; notify ; title ; message BEL``."""
    safe_title = sanitize(_DEFAULT_TITLE if title is None else title)
    return f"{ESC}]777;notify;{safe_title};{sanitize(message)}{BEL}"


def encode_osc99(
    message: str,
    title: str | None = None,
    urgency: int = Urgency.NORMAL,
    notification_id: str | None = None,
) -> str:
    """Kitty notification protocol.

    Without a title this is a single sequence whose metadata holds the id
    and the urgency.  With a title it is two chained parts: ``d=0`` (more
    follows) carrying the title plus metadata, then ``d=1`` carrying the
    body.  Normal urgency is implicit and never emitted.
    """
    level = Urgency.clamp(urgency)
    meta: list[str] = []
    if notification_id is not None:
        safe_id = sanitize_id(notification_id)
        if safe_id:
            meta.append(f"i={safe_id}")
    if level != Urgency.NORMAL:
        meta.append(f"u={int(level)}")

    if title is None:
        return f"{ESC}]99;{':'.join(meta)};{sanitize(message)}{ST}"

    title_meta = ":".join(["d=0", "p=title", *meta])
    return (
        f"{ESC}]99;{title_meta};{sanitize(title)}{ST}"
        f"{ESC}]99;d=1:p=body;{sanitize(message)}{ST}"
    )


def encode_close(notification_id: str) -> str | None:
    """OSC 99 dismiss sequence, or *None* when the id sanitizes to empty."""
    safe_id = sanitize_id(notification_id)
    if not safe_id:
        return None
    return f"{ESC}]99;i={safe_id}:p=close;{ST}"


def encode_notification(
    protocol: Protocol,
    message: str,
    title: str | None = None,
    urgency: int = Urgency.NORMAL,
    notification_id: str | None = None,
) -> str:
    """Dispatch to the encoder for *protocol*.

    Fields a dialect cannot carry are dropped silently.
    """
    protocol = Protocol.parse(protocol)
    if protocol is Protocol.OSC9:
        return encode_osc9(message)
    if protocol is Protocol.OSC777:
        return encode_osc777(message, title)
    return encode_osc99(message, title, urgency, notification_id)


def encode_progress(percent: int, state: int = ProgressState.NORMAL) -> str:
    """``ESC ] 9 ; 4 ; state ; percent BEL`` with both values clamped."""
    percent = max(0, min(100, int(percent)))
    return f"{ESC}]9;4;{int(ProgressState.clamp(state))};{percent}{BEL}"


def encode_request_attention(fireworks: bool = False) -> str:
    value = "fireworks" if fireworks else "yes"
    return f"{ESC}]1337;RequestAttention={value}{BEL}"


def encode_steal_focus() -> str:
    return f"{ESC}]1337;StealFocus{BEL}"


def hyperlink(url: str, text: str | None = None, link_id: str | None = None) -> str:
    """OSC 8 hyperlink wrapped around *text* (defaults to the URL).

    An empty URL yields the plain text.  *link_id* groups several links
    (e.g. one URL wrapped across lines) so terminals highlight them together.
    """
    if not url:
        return text or ""
    if text is None:
        text = url
    params = f"id={link_id}" if link_id is not None else ""
    return f"{ESC}]8;{params};{url}{BEL}{text}{ESC}]8;;{BEL}"


# Shell integration (OSC 133)


def encode_prompt_start() -> str:
    return f"{ESC}]133;A{BEL}"


def encode_command_start() -> str:
    return f"{ESC}]133;B{BEL}"


def encode_command_executed() -> str:
    return f"{ESC}]133;C{BEL}"


def encode_command_finished(exit_code: int = 0) -> str:
    return f"{ESC}]133;D;{int(exit_code)}{BEL}"
