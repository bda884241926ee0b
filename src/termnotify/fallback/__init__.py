"""External notifier fallbacks for terminals without OSC notification support."""

from __future__ import annotations

from termnotify.fallback.base import FallbackProvider
from termnotify.fallback.chain import FallbackChain
from termnotify.fallback.linux import LinuxFallback
from termnotify.fallback.macos import MacOSFallback
from termnotify.fallback.windows import WindowsFallback

__all__ = [
    "FallbackChain",
    "FallbackProvider",
    "LinuxFallback",
    "MacOSFallback",
    "WindowsFallback",
]
