"""Tests for osc/mux.py — tmux and GNU Screen passthrough."""

from termnotify.osc.mux import (
    Multiplexer,
    detect_multiplexer,
    wrap,
    wrap_for_screen,
    wrap_for_tmux,
)

_OSC9 = "\x1b]9;Hello\x07"
_OSC99_TITLED = "\x1b]99;d=0:p=title;T\x1b\\\x1b]99;d=1:p=body;B\x1b\\"


class TestDetectMultiplexer:
    def test_neither(self):
        assert detect_multiplexer({}) is Multiplexer.NONE

    def test_tmux(self):
        assert detect_multiplexer({"TMUX": "/tmp/tmux-1000/default,123,0"}) is Multiplexer.TMUX

    def test_screen(self):
        assert detect_multiplexer({"STY": "1234.pts-0.host"}) is Multiplexer.SCREEN

    def test_empty_values_ignored(self):
        assert detect_multiplexer({"TMUX": "", "STY": ""}) is Multiplexer.NONE

    def test_tmux_wins_over_screen(self):
        assert detect_multiplexer({"TMUX": "x", "STY": "y"}) is Multiplexer.TMUX


class TestWrapForTmux:
    def test_osc9(self):
        assert wrap_for_tmux(_OSC9) == "\x1bPtmux;\x1b\x1b]9;Hello\x07\x1b\\"

    def test_doubles_every_inner_esc(self):
        wrapped = wrap_for_tmux(_OSC99_TITLED)
        inner = wrapped[len("\x1bPtmux;"):-len("\x1b\\")]
        assert inner == _OSC99_TITLED.replace("\x1b", "\x1b\x1b")
        assert inner.count("\x1b") == 2 * _OSC99_TITLED.count("\x1b")

    def test_envelope_esc_not_doubled(self):
        wrapped = wrap_for_tmux(_OSC9)
        assert wrapped.startswith("\x1bPtmux;")
        assert not wrapped.startswith("\x1b\x1bP")
        assert wrapped.endswith("\x07\x1b\\")


class TestWrapForScreen:
    def test_osc9(self):
        assert wrap_for_screen(_OSC9) == "\x1bP\x1b]9;Hello\x07\x1b\\"

    def test_never_doubles(self):
        wrapped = wrap_for_screen(_OSC99_TITLED)
        assert "\x1b\x1b" not in wrapped
        assert wrapped == f"\x1bP{_OSC99_TITLED}\x1b\\"


class TestWrap:
    def test_none_is_identity(self):
        assert wrap(_OSC9, Multiplexer.NONE) == _OSC9

    def test_dispatch(self):
        assert wrap(_OSC9, Multiplexer.TMUX) == wrap_for_tmux(_OSC9)
        assert wrap(_OSC9, Multiplexer.SCREEN) == wrap_for_screen(_OSC9)
