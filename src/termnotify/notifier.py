"""Desktop notifications, progress bars and attention requests via OSC sequences.

:class:`Notifier` ties the pieces together: detect the terminal, pick a
dialect, encode, wrap for tmux/Screen, write.  When the terminal has no
notification dialect it can hand off to an external notifier
(notify-send, osascript, PowerShell) or ring the bell.

Failures never raise: every operation returns ``False`` and logs at debug
level.  ``True`` means the bytes reached the stream, not that the terminal
displayed anything; the protocol has no acknowledgement channel.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any, TextIO

from termnotify import detect
from termnotify.config import NotifyConfig
from termnotify.detect import TerminalId
from termnotify.fallback.chain import FallbackChain
from termnotify.logging import get_logger
from termnotify.osc import encode
from termnotify.osc.encode import ProgressState, Protocol, Urgency
from termnotify.osc.mux import Multiplexer, detect_multiplexer, wrap

_log = get_logger("notifier")


@dataclass(frozen=True)
class Capabilities:
    """Snapshot of what the current environment supports."""

    terminal: TerminalId
    protocol: Protocol | None
    supports_title: bool
    supports_urgency: bool
    supports_id: bool
    supports_progress: bool
    in_multiplexer: bool
    fallback_available: bool

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        terminal = self.terminal
        if isinstance(terminal, detect.Terminal):
            terminal = terminal.value
        data["terminal"] = terminal
        data["protocol"] = self.protocol.value if self.protocol is not None else None
        return data


class Notifier:
    """Per-host notification state.

    Terminal detection runs at most once until :meth:`reset`; the result
    does not follow later changes to *env*.  The multiplexer check, by
    contrast, runs on every write.

    Instances are not thread-safe.  Create one per thread, or guard shared
    use with a lock.

    Parameters
    ----------
    env:
        Environment lookup.  Defaults to ``os.environ``.
    stream:
        Text stream to write sequences to.  *None* writes to ``sys.stdout``
        (or ``sys.stderr`` when the config says ``output: stderr``) and
        requires it to be a TTY.
    fallback:
        External notifier chain.  Defaults to Linux, macOS, Windows.
    config:
        Initial forced protocol, default urgency and fallback settings.
        :meth:`reset` returns to these values.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
        fallback: FallbackChain | None = None,
        config: NotifyConfig | None = None,
    ) -> None:
        self.config = config or NotifyConfig()
        self._env: Mapping[str, str] = env if env is not None else os.environ
        self._initial_stream = stream
        self.fallback_chain = (
            fallback if fallback is not None
            else FallbackChain(timeout=self.config.fallback_timeout)
        )
        self._load_defaults()

    @classmethod
    def from_config(
        cls,
        config: NotifyConfig,
        env: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> Notifier:
        return cls(env=env, stream=stream, config=config)

    def _load_defaults(self) -> None:
        self._detected = False
        self._terminal: TerminalId = None
        self._protocol: Protocol | None = None
        self._forced_protocol = self.config.forced_protocol
        self._default_urgency = Urgency.clamp(self.config.default_urgency)
        self._fallback_enabled = self.config.fallback
        self._stream = self._initial_stream

    def reset(self) -> None:
        """Drop detection results and fallback caches; restore configured settings."""
        self._load_defaults()
        self.fallback_chain.reset()

    # --- Configuration ---

    def force_protocol(self, protocol: Protocol | str | None) -> None:
        """Override detection with *protocol*, or clear the override with *None*."""
        self._forced_protocol = Protocol.parse(protocol) if protocol is not None else None

    def set_default_urgency(self, urgency: int | str) -> None:
        self._default_urgency = Urgency.parse(urgency)

    @property
    def default_urgency(self) -> Urgency:
        return self._default_urgency

    def set_output(self, stream: TextIO | None) -> None:
        self._stream = stream

    def enable_fallback(self, enabled: bool = True) -> None:
        self._fallback_enabled = enabled

    def disable_fallback(self) -> None:
        self._fallback_enabled = False

    @property
    def fallback_enabled(self) -> bool:
        return self._fallback_enabled

    # --- Detection ---

    def _detect_once(self) -> None:
        if self._detected:
            return
        self._detected = True
        self._terminal = detect.detect_terminal(self._env)
        self._protocol = detect.select_protocol(self._terminal)
        _log.debug(
            "terminal=%s protocol=%s",
            getattr(self._terminal, "value", self._terminal),
            self._protocol.value if self._protocol is not None else None,
        )

    def get_terminal(self) -> TerminalId:
        self._detect_once()
        return self._terminal

    def get_protocol(self) -> Protocol | None:
        if self._forced_protocol is not None:
            return self._forced_protocol
        self._detect_once()
        return self._protocol

    terminal = property(get_terminal)
    protocol = property(get_protocol)

    def in_tmux(self) -> bool:
        return detect_multiplexer(self._env) is Multiplexer.TMUX

    def in_screen(self) -> bool:
        return detect_multiplexer(self._env) is Multiplexer.SCREEN

    def supports_progress(self) -> bool:
        return detect.supports_progress(self.terminal, self._env.get("TERM_PROGRAM_VERSION"))

    def can_fallback(self) -> bool:
        return self._fallback_enabled and self.fallback_chain.can_fallback()

    def can_notify(self) -> bool:
        """Whether an OSC notification would be written.

        Needs a stream (a custom one, or a default stream that is a TTY)
        and a resolved dialect.
        """
        if self._stream is None:
            out = self._default_stream()
            if out is None:
                return False
            try:
                if not out.isatty():
                    return False
            except (AttributeError, ValueError):
                return False
        return self.get_protocol() is not None

    def capabilities(self) -> Capabilities:
        protocol = self.get_protocol()
        return Capabilities(
            terminal=self.get_terminal(),
            protocol=protocol,
            supports_title=protocol in (Protocol.OSC777, Protocol.OSC99),
            supports_urgency=protocol is Protocol.OSC99,
            supports_id=protocol is Protocol.OSC99,
            supports_progress=self.supports_progress(),
            in_multiplexer=detect_multiplexer(self._env) is not Multiplexer.NONE,
            fallback_available=self.can_fallback(),
        )

    # --- Notifications ---

    def send(
        self,
        message: str,
        title: str | None = None,
        urgency: int | None = None,
        id: str | None = None,  # noqa: A002
    ) -> bool:
        """Send a desktop notification in the current dialect.

        *title* is dropped by OSC 9; *urgency* and *id* only reach OSC 99.
        """
        if not self.can_notify():
            _log.debug("send refused: no notification dialect available")
            return False
        protocol = self.get_protocol()
        level = self._default_urgency if urgency is None else urgency
        sequence = encode.encode_notification(protocol, message, title, level, id)
        return self._write(self._wrap(sequence))

    def send_low(self, message: str, title: str | None = None) -> bool:
        return self.send(message, title, Urgency.LOW)

    def send_critical(self, message: str, title: str | None = None) -> bool:
        return self.send(message, title, Urgency.CRITICAL)

    def close(self, id: str) -> bool:  # noqa: A002
        """Dismiss a notification previously sent with *id* (OSC 99 only)."""
        if not self.can_notify():
            return False
        if self.get_protocol() is not Protocol.OSC99:
            _log.debug("close refused: protocol %s has no notification ids", self.get_protocol())
            return False
        sequence = encode.encode_close(id)
        if sequence is None:
            _log.debug("close refused: id %r is empty after sanitizing", id)
            return False
        return self._write(self._wrap(sequence))

    def send_external(
        self, message: str, title: str | None = None, urgency: int | None = None
    ) -> bool:
        """Bypass OSC and use the platform notifier directly."""
        if not self._fallback_enabled:
            return False
        return self.fallback_chain.send(message, title, urgency)

    def send_any(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        """OSC notification, else external notifier.  Never rings the bell."""
        if self.can_notify():
            return self.send(message, title, urgency)
        if self._fallback_enabled:
            return self.send_external(message, title, urgency)
        return False

    def send_or_bell(self, message: str, title: str | None = None) -> bool:
        """OSC notification, else external notifier, else the terminal bell."""
        if self.can_notify():
            return self.send(message, title)
        if self._fallback_enabled and self.send_external(message, title):
            return True
        return self.bell()

    def bell(self) -> bool:
        return self._write(encode.BEL)

    # --- Progress (OSC 9;4) ---

    def progress(self, percent: int, state: int = ProgressState.NORMAL) -> bool:
        """Show a tab/taskbar progress bar.  False when unsupported."""
        if not self.supports_progress():
            return False
        return self._write(self._wrap(encode.encode_progress(percent, state)))

    def progress_clear(self) -> bool:
        if not self.supports_progress():
            return False
        return self._write(self._wrap(encode.encode_progress(0, ProgressState.HIDDEN)))

    def progress_error(self, percent: int = 100) -> bool:
        return self.progress(percent, ProgressState.ERROR)

    def progress_paused(self, percent: int) -> bool:
        return self.progress(percent, ProgressState.PAUSED)

    def progress_indeterminate(self) -> bool:
        return self.progress(0, ProgressState.INDETERMINATE)

    # --- Attention (iTerm2 OSC 1337) ---

    def request_attention(self, fireworks: bool = False) -> bool:
        """Bounce the dock icon, or show fireworks at the cursor."""
        return self._write(self._wrap(encode.encode_request_attention(fireworks)))

    def fireworks(self) -> bool:
        return self.request_attention(fireworks=True)

    def steal_focus(self) -> bool:
        return self._write(self._wrap(encode.encode_steal_focus()))

    # --- Hyperlinks (OSC 8) ---

    def hyperlink(self, url: str, text: str | None = None, id: str | None = None) -> str:  # noqa: A002
        return encode.hyperlink(url, text, id)

    # --- Shell integration (OSC 133) ---
    # Written without multiplexer wrapping: these marks are meant for
    # whichever terminal parses them, including tmux itself.

    def shell_prompt_start(self) -> bool:
        return self._write(encode.encode_prompt_start())

    def shell_command_start(self) -> bool:
        return self._write(encode.encode_command_start())

    def shell_command_executed(self) -> bool:
        return self._write(encode.encode_command_executed())

    def shell_command_finished(self, exit_code: int = 0) -> bool:
        return self._write(encode.encode_command_finished(exit_code))

    # --- Output ---

    def _default_stream(self) -> TextIO | None:
        if self.config.output == "stderr":
            return sys.stderr
        return sys.stdout

    def _wrap(self, sequence: str) -> str:
        mux = detect_multiplexer(self._env)
        if mux is not Multiplexer.NONE:
            _log.debug("wrapping sequence for %s passthrough", mux.value)
        return wrap(sequence, mux)

    def _write(self, sequence: str) -> bool:
        out = self._stream if self._stream is not None else self._default_stream()
        if out is None:
            return False
        try:
            out.write(sequence)
            out.flush()
        except (OSError, ValueError):
            _log.debug("write to output stream failed", exc_info=True)
            return False
        return True
