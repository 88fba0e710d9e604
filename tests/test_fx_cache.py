"""Tests for the FX rate cache, rate sources and money normalization."""

import http.client
import json
import urllib.request
from datetime import date

import pytest

from budget_engine.services.http_client import HttpError
from budget_engine.services.rates import providers
from budget_engine.services.rates.cache_service import FxRateCache
from budget_engine.services.rates.conversion import create_money
from budget_engine.services.rates.providers import (
    ExternalHTTPRateSource,
    StaticRateSource,
    make_rate_source,
)
from budget_engine.core.config import Settings
from budget_engine.services.engine import BudgetEngine

from conftest import FakeRateSource, income


class TestRateLookup:
    def test_same_currency_is_identity_and_not_cached(self, rate_cache, rate_source):
        fx = rate_cache.rate("aed", "AED")
        assert fx.rate == 1.0
        assert fx.source == "identity"
        assert rate_source.calls == []
        assert rate_cache.snapshot() == []

    def test_live_rate_is_cached_within_ttl(self, rate_cache, rate_source, clock):
        first = rate_cache.rate("USD", "AED")
        clock.advance(minutes=59)
        second = rate_cache.rate("USD", "AED")
        assert first.rate == 3.6725
        assert first.source == "live"
        assert second.id == first.id
        assert rate_source.calls == [("USD", "AED")]

    def test_expired_entry_is_refreshed(self, rate_cache, rate_source, clock):
        rate_cache.rate("USD", "AED")
        clock.advance(hours=1)
        rate_source.rates["USD_AED"] = 3.7
        fx = rate_cache.rate("USD", "AED")
        assert fx.rate == 3.7
        assert len(rate_source.calls) == 2

    def test_unavailable_source_falls_back_to_default_table(self, clock):
        source = FakeRateSource(available=False)
        cache = FxRateCache(source, clock=clock)
        fx = cache.rate("USD", "AED")
        assert fx.rate == 3.67
        assert fx.source == "default"
        # fallback is cached: no second outbound call inside the window
        cache.rate("USD", "AED")
        assert len(source.calls) == 1

    def test_unlisted_pair_fails_open_to_identity(self, clock):
        source = FakeRateSource(available=False)
        cache = FxRateCache(source, clock=clock)
        fx = cache.rate("JPY", "CHF")
        assert fx.rate == 1.0
        assert [r.pair for r in cache.snapshot()] == ["JPY_CHF"]

    def test_missing_live_quote_uses_default(self, clock):
        source = FakeRateSource({"USD_AED": 3.6725})
        cache = FxRateCache(source, clock=clock)
        assert cache.rate("INR", "AED").rate == 0.044

    def test_manual_rate_is_served_from_cache(self, rate_cache, rate_source):
        rate_cache.set_rate("usd", "aed", 3.5)
        fx = rate_cache.rate("USD", "AED")
        assert fx.rate == 3.5
        assert fx.source == "manual"
        assert rate_source.calls == []

    @pytest.mark.parametrize("value", [0, -1.5])
    def test_manual_rate_must_be_positive(self, rate_cache, value):
        with pytest.raises(ValueError):
            rate_cache.set_rate("USD", "AED", value)

    def test_clear_drops_all_entries(self, rate_cache):
        rate_cache.rate("USD", "AED")
        rate_cache.rate("AED", "USD")
        assert len(rate_cache.snapshot()) == 2
        rate_cache.clear()
        assert rate_cache.snapshot() == []


class TestCreateMoney:
    def test_same_currency_round_trip(self, rate_cache):
        money = create_money(1234.56, "AED", "AED", rate_cache)
        assert money.base_amount == 1234.56
        assert money.fx_rate == 1.0

    def test_foreign_amount_records_rate_provenance(self, rate_cache, clock):
        money = create_money(100, "USD", "AED", rate_cache)
        assert money.currency == "USD"
        assert money.fx_rate == 3.6725
        assert money.base_amount == pytest.approx(367.25)
        assert money.fx_timestamp == clock.now

    def test_negative_amounts_keep_sign(self, rate_cache):
        money = create_money(-50, "USD", "AED", rate_cache)
        assert money.base_amount == pytest.approx(-183.625)


class TestSources:
    def test_static_source_serves_table_only(self):
        source = StaticRateSource()
        assert source.lookup_live_rate("USD", "INR") == 83.5
        assert source.lookup_live_rate("JPY", "AED") is None

    def test_external_source_reads_quote(self, monkeypatch):
        seen = {}

        def fake_get_json(url, timeout, retries):
            seen["url"] = url
            return {"base": "USD", "rates": {"AED": 3.6725, "INR": 83.1}}

        monkeypatch.setattr(providers, "get_json", fake_get_json)
        source = ExternalHTTPRateSource("https://rates.example/v4/latest/")
        assert source.lookup_live_rate("usd", "aed") == 3.6725
        assert seen["url"] == "https://rates.example/v4/latest/USD"

    @pytest.mark.parametrize(
        "payload",
        [
            {"rates": {}},
            {"rates": {"AED": 0}},
            {"rates": {"AED": "3.67"}},
            {"oops": 1},
            json.loads('{"rates": {"AED": NaN}}'),
            json.loads('{"rates": {"AED": Infinity}}'),
            json.loads('{"rates": {"AED": -Infinity}}'),
        ],
    )
    def test_external_source_rejects_malformed_payload(self, monkeypatch, payload):
        monkeypatch.setattr(providers, "get_json", lambda url, timeout, retries: payload)
        source = ExternalHTTPRateSource("https://rates.example")
        assert source.lookup_live_rate("USD", "AED") is None

    def test_external_source_network_failure_is_unavailable(self, monkeypatch):
        def boom(url, timeout, retries):
            raise HttpError("connection refused")

        monkeypatch.setattr(providers, "get_json", boom)
        source = ExternalHTTPRateSource("https://rates.example")
        assert source.lookup_live_rate("USD", "AED") is None

    def test_factory_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            make_rate_source("carrier-pigeon", Settings())

    def test_factory_builds_configured_source(self):
        settings = Settings(exchange_rate_provider="static")
        assert isinstance(make_rate_source("static", settings), StaticRateSource)


def _disconnect():
    raise http.client.RemoteDisconnected("Remote end closed connection")


def _reset():
    raise ConnectionResetError(104, "Connection reset by peer")


class _TruncatedResponse:
    status = 200

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def read(self):
        raise http.client.IncompleteRead(b'{"rates": {"AE')


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Replace urlopen with `behaviour()`; returns the list of requested URLs."""
    calls = []

    def install(behaviour):
        def urlopen(request, timeout=None):
            calls.append(request.full_url)
            return behaviour()

        monkeypatch.setattr(urllib.request, "urlopen", urlopen)
        return calls

    return install


class TestNetworkFailures:
    @pytest.mark.parametrize("behaviour", [_disconnect, _reset, _TruncatedResponse])
    def test_transport_error_falls_back_to_default(self, fake_urlopen, clock, behaviour):
        fake_urlopen(behaviour)
        cache = FxRateCache(ExternalHTTPRateSource("https://rates.example"), clock=clock)
        fx = cache.rate("USD", "AED")
        assert fx.rate == 3.67
        assert fx.source == "default"

    def test_failing_provider_makes_one_request_per_pair(self, fake_urlopen, clock):
        calls = fake_urlopen(_disconnect)
        cache = FxRateCache(make_rate_source("external-http", Settings()), clock=clock)
        cache.rate("USD", "AED")
        cache.rate("USD", "AED")
        assert calls == ["https://api.exchangerate-api.com/v4/latest/USD"]

    def test_transaction_survives_dropped_connection(self, fake_urlopen, clock, store):
        fake_urlopen(_disconnect)
        cache = FxRateCache(ExternalHTTPRateSource("https://rates.example"), clock=clock)
        engine = BudgetEngine(store, cache)
        engine.generate_plan("u1", "2026-03", "AED", [income(10000)])
        result = engine.log_transaction(
            "u1", "2026-03", 100, "USD", "dining_out", "WANTS", date=date(2026, 3, 4)
        )
        assert result.transaction.money.fx_rate == 3.67
        assert result.transaction.money.base_amount == pytest.approx(367)
