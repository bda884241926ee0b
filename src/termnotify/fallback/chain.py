"""Ordered chain of external notifiers; the first available one wins."""

from __future__ import annotations

from collections.abc import Iterable

from termnotify.fallback.base import DEFAULT_TIMEOUT, FallbackProvider
from termnotify.logging import get_logger

_log = get_logger("fallback.chain")


class FallbackChain:
    """Providers in registration order.

    At most one OS-family check passes on a real host, so order only
    matters when tests register doubles.
    """

    def __init__(
        self,
        providers: Iterable[FallbackProvider] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._providers: list[FallbackProvider] = []
        if providers is None:
            self.register_defaults(timeout)
        else:
            for p in providers:
                self.register(p)

    @property
    def providers(self) -> list[FallbackProvider]:
        return list(self._providers)

    def register_defaults(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        from termnotify.fallback.linux import LinuxFallback
        from termnotify.fallback.macos import MacOSFallback
        from termnotify.fallback.windows import WindowsFallback

        self.register(LinuxFallback(timeout=timeout))
        self.register(MacOSFallback(timeout=timeout))
        self.register(WindowsFallback(timeout=timeout))

    def register(self, provider: FallbackProvider) -> None:
        self._providers.append(provider)

    def get_available(self) -> FallbackProvider | None:
        for provider in self._providers:
            if provider.is_available():
                return provider
        return None

    def can_fallback(self) -> bool:
        return self.get_available() is not None

    def send(self, message: str, title: str | None = None, urgency: int | None = None) -> bool:
        provider = self.get_available()
        if provider is None:
            _log.debug("no external notifier available")
            return False
        _log.debug("sending via %s notifier", provider.name)
        return provider.send(message, title, urgency)

    def reset(self) -> None:
        """Forget every provider's cached availability."""
        for provider in self._providers:
            provider.reset()
