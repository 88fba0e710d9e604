from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List

from budget_engine.models.rates import FxRate
from .base import RateSource
from .providers import default_rate, pair_key

"""FX rate cache keyed by currency pair.

Lookup order for a pair:
    1. same currency -> identity rate (never cached)
    2. cached entry younger than the TTL
    3. one live lookup on the injected RateSource
    4. static default-rate table
    5. identity rate (fail open: allocation never raises on missing FX data)

Results of steps 3-5 are cached so a failing source is asked at most once per
pair per TTL window. Each pair has its own lock: a slow lookup for one pair
never blocks others.
"""

logger = logging.getLogger("budget_engine.rates")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _CacheEntry:
    rate: FxRate
    fetched_at: datetime


class FxRateCache:
    def __init__(
        self,
        source: RateSource,
        ttl_seconds: int = 3600,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._source = source
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._cache: Dict[str, _CacheEntry] = {}
        self._pair_locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    # Internal --------------------------------------------------
    def _lock_for(self, key: str) -> threading.Lock:
        # Pair locks live as long as the cache; clear() drops entries, not locks.
        with self._guard:
            lock = self._pair_locks.get(key)
            if lock is None:
                lock = self._pair_locks[key] = threading.Lock()
            return lock

    def _is_entry_valid(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def _store(self, from_currency: str, to_currency: str, rate: float, source: str) -> FxRate:
        now = self._clock()
        record = FxRate(
            id=f"fx_{from_currency}_{to_currency}_{uuid.uuid4().hex[:8]}",
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            timestamp=now,
            source=source,
        )
        self._cache[record.pair] = _CacheEntry(rate=record, fetched_at=now)
        return record

    # Public API -----------------------------------------------
    def rate(self, from_currency: str, to_currency: str) -> FxRate:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if from_currency == to_currency:
            return FxRate(
                id=f"fx_{from_currency}_{to_currency}",
                from_currency=from_currency,
                to_currency=to_currency,
                rate=1.0,
                timestamp=self._clock(),
                source="identity",
            )

        key = pair_key(from_currency, to_currency)
        with self._lock_for(key):
            entry = self._cache.get(key)
            if entry and self._is_entry_valid(entry):
                return entry.rate

            live = self._source.lookup_live_rate(from_currency, to_currency)
            if live is not None:
                return self._store(from_currency, to_currency, live, "live")

            fallback = default_rate(from_currency, to_currency)
            if fallback is None:
                logger.warning(
                    "no rate available, using identity", extra={"pair": key}
                )
                fallback = 1.0
            else:
                logger.info("using default rate %s", fallback, extra={"pair": key})
            return self._store(from_currency, to_currency, fallback, "default")

    def set_rate(self, from_currency: str, to_currency: str, rate: float) -> FxRate:
        """Manually pin a rate; it ages out like any other cached entry."""
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()
        if rate <= 0:
            raise ValueError("rate must be positive")
        if from_currency == to_currency:
            raise ValueError("cannot override a same-currency rate")
        with self._lock_for(pair_key(from_currency, to_currency)):
            return self._store(from_currency, to_currency, rate, "manual")

    def snapshot(self) -> List[FxRate]:
        with self._guard:
            entries = list(self._cache.values())
        return [e.rate for e in entries]

    def clear(self) -> None:
        with self._guard:
            self._cache.clear()

