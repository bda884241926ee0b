"""Terminal emulator detection and notification dialect selection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum

from termnotify.logging import get_logger
from termnotify.osc.encode import Protocol

_log = get_logger("detect")


class Terminal(str, Enum):
    KITTY = "kitty"
    ITERM2 = "iterm2"
    WEZTERM = "wezterm"
    GHOSTTY = "ghostty"
    FOOT = "foot"
    VTE = "vte"
    KONSOLE = "konsole"
    ALACRITTY = "alacritty"
    APPLE_TERMINAL = "apple-terminal"
    VSCODE = "vscode"
    WINDOWS_TERMINAL = "windows-terminal"
    HYPER = "hyper"


# A known Terminal, an unrecognised TERM_PROGRAM (lower-cased), or None.
TerminalId = Terminal | str | None

# Session markers, checked in order.  Some terminals export several
# variables (e.g. tmux inside kitty keeps KITTY_WINDOW_ID), so order matters.
_SESSION_MARKERS: tuple[tuple[str, Terminal], ...] = (
    ("KITTY_WINDOW_ID", Terminal.KITTY),
    ("ITERM_SESSION_ID", Terminal.ITERM2),
    ("WEZTERM_PANE", Terminal.WEZTERM),
    ("WT_SESSION", Terminal.WINDOWS_TERMINAL),
    ("ALACRITTY_WINDOW_ID", Terminal.ALACRITTY),
    ("KONSOLE_VERSION", Terminal.KONSOLE),
)

_TERM_PROGRAM_NAMES: dict[str, Terminal] = {
    "iTerm.app": Terminal.ITERM2,
    "WezTerm": Terminal.WEZTERM,
    "Apple_Terminal": Terminal.APPLE_TERMINAL,
    "vscode": Terminal.VSCODE,
    "Hyper": Terminal.HYPER,
    "ghostty": Terminal.GHOSTTY,
}

_PROTOCOLS: dict[Terminal, Protocol | None] = {
    Terminal.KITTY: Protocol.OSC99,
    Terminal.ITERM2: Protocol.OSC9,
    Terminal.WEZTERM: Protocol.OSC777,
    Terminal.GHOSTTY: Protocol.OSC777,
    Terminal.VTE: Protocol.OSC777,  # may need a patched VTE
    Terminal.ALACRITTY: None,
    Terminal.KONSOLE: None,
    Terminal.APPLE_TERMINAL: None,
    Terminal.VSCODE: None,
    # Windows Terminal uses OSC 9 for progress bars, not notifications
    Terminal.WINDOWS_TERMINAL: None,
}

# foot is listed with OSC 777, but a detected foot session keeps the OSC 9 default
_SUPPORTED: dict[Terminal, Protocol | None] = {**_PROTOCOLS, Terminal.FOOT: Protocol.OSC777}

_PROGRESS_TERMINALS = frozenset((Terminal.WINDOWS_TERMINAL, Terminal.GHOSTTY))
ITERM2_PROGRESS_VERSION = "3.6.6"

_LEADING_INT_RE = re.compile(r"\d+")


def _as_known(terminal: TerminalId) -> Terminal | None:
    if terminal is None:
        return None
    try:
        return Terminal(terminal)
    except ValueError:
        return None


def detect_terminal(env: Mapping[str, str]) -> TerminalId:
    """Classify the terminal emulator from an environment snapshot."""
    for var, terminal in _SESSION_MARKERS:
        if var in env:
            _log.debug("detected %s via %s", terminal.value, var)
            return terminal

    term_program = env.get("TERM_PROGRAM")
    if term_program:
        known = _TERM_PROGRAM_NAMES.get(term_program)
        if known is not None:
            _log.debug("detected %s via TERM_PROGRAM", known.value)
            return known
        name = term_program.lower()
        _log.debug("TERM_PROGRAM %r taken as terminal %r", term_program, name)
        return _as_known(name) or name

    # GNOME Terminal, Tilix and other VTE-based terminals
    if "VTE_VERSION" in env:
        return Terminal.VTE

    if "GHOSTTY_RESOURCES_DIR" in env:
        return Terminal.GHOSTTY

    return None


def select_protocol(terminal: TerminalId) -> Protocol | None:
    """Map a terminal to its notification dialect.

    Known terminals without notification support map to *None*; unknown
    but named terminals get OSC 9, the most widely understood dialect.
    """
    if terminal is None:
        return None
    known = _as_known(terminal)
    if known is None:
        return Protocol.OSC9
    return _PROTOCOLS.get(known, Protocol.OSC9)


def supported_terminals() -> dict[str, str | None]:
    """Terminal name -> dialect name for every terminal with a fixed mapping."""
    return {t.value: (p.value if p is not None else None) for t, p in _SUPPORTED.items()}


def _version_parts(v: str) -> list[int]:
    parts: list[int] = []
    for segment in v.split("-", 1)[0].split("."):
        m = _LEADING_INT_RE.match(segment)
        parts.append(int(m.group()) if m else 0)
    return parts


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 comparing dotted versions.

    A ``-suffix`` is ignored (``3.6.6-beta`` == ``3.6.6``) and missing
    trailing components count as zero.
    """
    pa, pb = _version_parts(a), _version_parts(b)
    width = max(len(pa), len(pb))
    pa += [0] * (width - len(pa))
    pb += [0] * (width - len(pb))
    if pa < pb:
        return -1
    if pa > pb:
        return 1
    return 0


def supports_progress(terminal: TerminalId, version: str | None = None) -> bool:
    """Whether *terminal* renders OSC 9;4 progress bars.

    iTerm2 gained support in 3.6.6, so *version* (``TERM_PROGRAM_VERSION``)
    must be reported and at least that.
    """
    known = _as_known(terminal)
    if known in _PROGRESS_TERMINALS:
        return True
    if known is Terminal.ITERM2:
        if not version:
            return False
        return compare_versions(version, ITERM2_PROGRESS_VERSION) >= 0
    return False
