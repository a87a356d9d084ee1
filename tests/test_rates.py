import json
from decimal import Decimal
from types import SimpleNamespace
import pytest
import requests
from splitledger.services import rates
from splitledger.services.money import round2, to_base, normalize_currency, to_decimal
from conftest import RATES

class FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.exceptions.HTTPError(f"{self.status} error")

    def json(self, **kwargs):
        return json.loads(json.dumps(self.body), **kwargs)

def test_currency_total_uses_multiplication():
    total = to_base("USD", Decimal("10.00"), RATES) + to_base("JPY", Decimal("1000"), RATES) + to_base("THB", Decimal("50.00"), RATES)
    assert to_base("USD", Decimal("10.00"), RATES) == Decimal("362.50")
    assert to_base("JPY", Decimal("1000"), RATES) == Decimal("245.00")
    assert total == Decimal("657.50")

def test_unknown_currency_is_treated_as_base():
    assert to_base("XYZ", Decimal("12.345"), RATES) == Decimal("12.35")
    assert to_base(None, Decimal("1"), {}) == Decimal("1.00")

def test_round_half_up():
    assert round2(Decimal("0.125")) == Decimal("0.13")
    assert round2(Decimal("2.675")) == Decimal("2.68")
    assert round2(None) == Decimal("0.00")
    assert to_decimal(0.1) == Decimal("0.1")

def test_normalize_currency():
    assert normalize_currency(" usd ") == "USD"
    assert normalize_currency("") == "THB"
    assert normalize_currency("EURO") == "THB"

def test_parse_snapshot_variants():
    assert rates.parse_snapshot('{"usd": 36.25}') == {"USD": Decimal("36.25"), "THB": Decimal(1)}
    assert rates.parse_snapshot({"JPY": "0.245"})["JPY"] == Decimal("0.245")
    assert rates.parse_snapshot("") is None
    assert rates.parse_snapshot("not json") is None
    assert rates.parse_snapshot('{"USD": "abc"}') is None
    assert rates.parse_snapshot('{"USD": -1}') is None
    assert rates.parse_snapshot("[]") is None

def test_rates_for_prefers_frozen_snapshot():
    expense = SimpleNamespace(id=1, exchange_rates_json=rates.dump_rates(RATES))
    def live():
        raise AssertionError("live rates must not be fetched")
    assert rates.rates_for(expense, fetch_live=live) == RATES

def test_rates_for_falls_back_to_live_when_snapshot_unusable():
    expense = SimpleNamespace(id=1, exchange_rates_json="{broken")
    assert rates.rates_for(expense, fetch_live=lambda: {"THB": Decimal(1), "USD": Decimal(30)})["USD"] == Decimal(30)

def test_live_rates_are_inverted(monkeypatch):
    seen = {}
    def fake_get(url, timeout):
        seen["timeout"] = timeout
        return FakeResponse({"result": "success", "rates": {"THB": 1, "USD": 0.025, "JPY": 4, "BAD": 0}})
    monkeypatch.setattr(rates.requests, "get", fake_get)
    live = rates.fetch_live_rates(timeout=2)
    assert seen["timeout"] == 2
    assert live["THB"] == Decimal(1)
    assert live["USD"] == Decimal(40)
    assert live["JPY"] == Decimal("0.25")
    assert "BAD" not in live

def test_live_rates_fall_back_on_network_error(caplog):
    with caplog.at_level("WARNING"):
        assert rates.fetch_live_rates() == {"THB": Decimal(1)}
    assert "falling back" in caplog.text

@pytest.mark.parametrize("response", [
    FakeResponse({"result": "error"}),
    FakeResponse({"result": "success", "rates": []}),
    FakeResponse({}, status=503),
])
def test_live_rates_fall_back_on_bad_payload(monkeypatch, response):
    monkeypatch.setattr(rates.requests, "get", lambda url, timeout: response)
    assert rates.fetch_live_rates() == {"THB": Decimal(1)}

def test_lock_rates_serializes_snapshot():
    raw = rates.lock_rates(lambda: RATES)
    assert rates.parse_snapshot(raw) == RATES
