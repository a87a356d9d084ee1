"""Decimal money helpers shared by every stage of the ledger.

Rates are quoted as base-currency units per 1 unit of the foreign currency,
so converting is always ``amount * rate``.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Mapping, Optional
from ..config import config

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

def to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Cannot convert bool to Decimal")
    if isinstance(value, (int, str)):
        try:
            return Decimal(value)
        except InvalidOperation as exc:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from exc
    if isinstance(value, float):
        # str() keeps the shortest repr, Decimal(float) would keep binary noise
        return Decimal(str(value))
    raise ValueError("Cannot convert value to Decimal")

def round2(value: Any) -> Decimal:
    d = to_decimal(value)
    if d is None:
        return ZERO
    return d.quantize(CENT, rounding=ROUND_HALF_UP)

def normalize_currency(code: Optional[str]) -> str:
    v = (code or "").strip().upper()
    if len(v) != 3:
        return config.BASE_CURRENCY
    return v

def rate_of(currency: Optional[str], rates: Mapping[str, Decimal]) -> Decimal:
    rate = rates.get(normalize_currency(currency))
    return Decimal(1) if rate is None else rate

def to_base(currency: Optional[str], amount: Any, rates: Mapping[str, Decimal]) -> Optional[Decimal]:
    """Convert ``amount`` of ``currency`` into base units, rounded half-up to cents.

    A currency missing from ``rates`` is treated as already being base.
    """
    d = to_decimal(amount)
    if d is None:
        return None
    return round2(d * rate_of(currency, rates))
