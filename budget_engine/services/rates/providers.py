from __future__ import annotations

"""Concrete rate sources, the default-rate table and the source factory.

'static' serves only the built-in default table; 'external-http' asks a public
exchange-rate API (exchangerate-api.com v4 layout: GET {base_url}/{FROM} ->
{"rates": {"TO": rate, ...}}).
"""
import logging
import math
from typing import Dict, Optional

from budget_engine.core.config import Settings
from budget_engine.services.http_client import get_json, HttpError

logger = logging.getLogger("budget_engine.rates")

# Fallback rates keyed "FROM_TO" (units of TO per 1 FROM).
DEFAULT_RATES: Dict[str, float] = {
    "USD_AED": 3.67,
    "INR_AED": 0.044,
    "EUR_AED": 3.98,
    "GBP_AED": 4.64,
    "AED_USD": 0.27,
    "AED_INR": 22.73,
    "AED_EUR": 0.25,
    "AED_GBP": 0.22,
    "USD_INR": 83.5,
    "INR_USD": 0.012,
}


def pair_key(from_currency: str, to_currency: str) -> str:
    return f"{from_currency.upper()}_{to_currency.upper()}"


def default_rate(from_currency: str, to_currency: str) -> Optional[float]:
    return DEFAULT_RATES.get(pair_key(from_currency, to_currency))


class StaticRateSource:
    def lookup_live_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        return default_rate(from_currency, to_currency)


class ExternalHTTPRateSource:
    def __init__(self, base_url: str, timeout: float = 5.0, retries: int = 0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retries = retries

    def lookup_live_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        url = f"{self._base_url}/{from_currency.upper()}"
        try:
            data = get_json(url, timeout=self._timeout, retries=self._retries)
        except HttpError as e:
            logger.warning(
                "live rate lookup failed: %s",
                e,
                extra={"pair": pair_key(from_currency, to_currency)},
            )
            return None
        rates = data.get("rates")
        if not isinstance(rates, dict):
            return None
        value = rates.get(to_currency.upper())
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return float(value)


_SOURCE_REGISTRY = {
    "static": lambda settings: StaticRateSource(),
    "external-http": lambda settings: ExternalHTTPRateSource(
        settings.exchange_api_base_url,
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
    ),
}


def make_rate_source(kind: str, settings: Settings):
    factory = _SOURCE_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return factory(settings)
