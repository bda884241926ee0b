"""Shared test fixtures and helpers."""

from __future__ import annotations

import io
import logging
from unittest.mock import patch

import pytest

from termnotify.fallback.chain import FallbackChain
from termnotify.notifier import Notifier
from tests.fakes.fallback import FakeFallback


@pytest.fixture(autouse=True, scope="session")
def _isolate_logging():
    """Prevent tests from writing to ``~/.termnotify/termnotify.log``.

    CLI tests invoke click commands that call ``setup_logging()`` which
    attaches a ``RotatingFileHandler`` under the home directory.  Redirect
    file output to ``/dev/null`` for the whole session.
    """
    import termnotify.cli as _cli
    import termnotify.logging as _tn_logging

    _real_setup = _tn_logging.setup_logging

    def _test_setup(level="WARNING", log_file=None, stderr=False, output="stdout"):
        return _real_setup(level=level, log_file="/dev/null", stderr=False, output=output)

    with (
        patch.object(_tn_logging, "setup_logging", _test_setup),
        patch.object(_cli, "setup_logging", _test_setup),
    ):
        logger = logging.getLogger("termnotify")
        logger.handlers.clear()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.WARNING)
        yield


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


def make_notifier(
    env: dict[str, str] | None = None,
    out: io.StringIO | None = None,
    protocol: str | None = None,
    fallback: FakeFallback | None = None,
) -> Notifier:
    """Create a Notifier wired to an in-memory stream and a fake fallback.

    Parameters
    ----------
    env:
        Environment snapshot; defaults to an empty dict (no terminal markers).
    out:
        Output stream.  Defaults to a fresh ``StringIO``.
    protocol:
        Forced dialect, if any.
    fallback:
        Fake provider for the chain.  Defaults to an unavailable one so no
        test ever reaches a real platform notifier.
    """
    n = Notifier(
        env=env if env is not None else {},
        stream=out if out is not None else io.StringIO(),
        fallback=FallbackChain([fallback or FakeFallback(available=False)]),
    )
    if protocol is not None:
        n.force_protocol(protocol)
    return n
