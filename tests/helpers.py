"""Constants and doubles shared by the test modules."""

from __future__ import annotations

import re

# 2025-03-03 09:00:00 UTC, a Monday
T0 = 1_740_992_400_000
MINUTE = 60_000
HOUR = 60 * MINUTE
DAY = 24 * HOUR


class FakeClock:
    """Callable clock returning a settable epoch-ms instant."""

    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


_ANSI = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return _ANSI.sub("", text)
