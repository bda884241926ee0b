"""Terminal multiplexer passthrough (tmux / GNU Screen).

A multiplexer consumes escape sequences it does not understand.  Wrapping
a sequence in a DCS envelope asks it to forward the payload to the outer
terminal instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from termnotify.osc.encode import ESC, ST


class Multiplexer(Enum):
    TMUX = "tmux"
    SCREEN = "screen"
    NONE = "none"


def detect_multiplexer(env: Mapping[str, str]) -> Multiplexer:
    """tmux wins when both ``TMUX`` and ``STY`` are set; nesting is unsupported."""
    if env.get("TMUX"):
        return Multiplexer.TMUX
    if env.get("STY"):
        return Multiplexer.SCREEN
    return Multiplexer.NONE


def wrap_for_tmux(sequence: str) -> str:
    """``DCS tmux ; payload ST`` with every ESC in the payload doubled.

    tmux un-doubles the payload itself; the envelope's own ESC bytes are
    left single.
    """
    doubled = sequence.replace(ESC, ESC + ESC)
    return f"{ESC}Ptmux;{doubled}{ST}"


def wrap_for_screen(sequence: str) -> str:
    """``DCS payload ST``.  Screen does not un-double, so nothing is doubled."""
    return f"{ESC}P{sequence}{ST}"


def wrap(sequence: str, mux: Multiplexer) -> str:
    if mux is Multiplexer.TMUX:
        return wrap_for_tmux(sequence)
    if mux is Multiplexer.SCREEN:
        return wrap_for_screen(sequence)
    return sequence
