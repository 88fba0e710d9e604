from __future__ import annotations

"""Rate source abstraction.

A source answers a single question: the live rate for one currency pair, or
`None` when it has none.
"""
from typing import Optional, Protocol


class RateSource(Protocol):
    def lookup_live_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        """Return units of `to_currency` per 1 `from_currency`, or None if unavailable."""
        ...


class SupportsRate(Protocol):
    def rate(self, from_currency: str, to_currency: str): ...
