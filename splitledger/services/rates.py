"""Exchange-rate snapshots.

An expense freezes the rates it was created with in ``exchange_rates_json``;
every later conversion of that expense's items reads the snapshot so that
historical settlements never move. The live provider is only consulted when
locking a new expense or when a snapshot is missing or unreadable, and a
failed lookup degrades to ``{BASE: 1}`` instead of raising.
"""
import json
import logging
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Callable, Dict, Mapping, Optional, Union
import requests
from ..config import config

logger = logging.getLogger(__name__)

Rates = Dict[str, Decimal]

def default_rates() -> Rates:
    return {config.BASE_CURRENCY: Decimal(1)}

def parse_snapshot(raw: Union[str, Mapping[str, Any], None]) -> Optional[Rates]:
    if raw is None:
        return None
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            raw = json.loads(raw, parse_float=Decimal, parse_int=Decimal)
        except ValueError:
            return None
    if not isinstance(raw, Mapping) or not raw:
        return None
    rates: Rates = {}
    try:
        for ccy, value in raw.items():
            rate = Decimal(str(value)) if not isinstance(value, Decimal) else value
            if not rate.is_finite() or rate <= 0:
                return None
            rates[str(ccy).strip().upper()] = rate
    except (InvalidOperation, TypeError, ValueError):
        return None
    rates.setdefault(config.BASE_CURRENCY, Decimal(1))
    return rates

def fetch_live_rates(timeout: Optional[float] = None) -> Rates:
    """Fetch base-units-per-currency rates from the live provider.

    The provider quotes ``1 BASE = x CCY``; each quote is inverted. Never raises.
    """
    timeout = config.FX_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        response = requests.get(config.FX_API_URL, timeout=timeout)
        response.raise_for_status()
        body = response.json(parse_float=Decimal, parse_int=Decimal)
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning("Live FX lookup failed (%s); falling back to %s=1", e, config.BASE_CURRENCY)
        return default_rates()

    if not isinstance(body, dict) or str(body.get("result", "")).lower() != "success" or not isinstance(body.get("rates"), dict):
        logger.warning("Live FX provider returned an unusable payload; falling back to %s=1", config.BASE_CURRENCY)
        return default_rates()

    rates = default_rates()
    with localcontext() as ctx:
        ctx.prec = 18
        for ccy, quote in body["rates"].items():
            try:
                base_to_ccy = Decimal(str(quote))
            except InvalidOperation:
                continue
            if base_to_ccy > 0:
                rates[str(ccy).upper()] = Decimal(1) / base_to_ccy
    rates[config.BASE_CURRENCY] = Decimal(1)
    return rates

def rates_for(expense, fetch_live: Optional[Callable[[], Rates]] = None) -> Rates:
    snapshot = parse_snapshot(getattr(expense, "exchange_rates_json", None))
    if snapshot is not None:
        return snapshot
    logger.warning("Expense %s has no usable rate snapshot; using live rates", getattr(expense, "id", None))
    return (fetch_live or fetch_live_rates)()

def dump_rates(rates: Mapping[str, Decimal]) -> str:
    return json.dumps({ccy: str(rate) for ccy, rate in sorted(rates.items())})

def lock_rates(fetch_live: Optional[Callable[[], Rates]] = None) -> str:
    rates = (fetch_live or fetch_live_rates)()
    logger.info("Locked %d exchange rates", len(rates))
    return dump_rates(rates)
