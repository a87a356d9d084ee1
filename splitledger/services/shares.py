"""Share allocation: turn a participant's fixed value or percentage of an
expense item into a concrete base-currency amount.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union
from sqlalchemy.orm import Session
from .. import models
from ..errors import InvalidInput, NotFound
from .ledger import get_expense, get_item_in_expense, get_share_in_item, get_user, ensure_member
from .money import ZERO, rate_of, round2, to_base, to_decimal
from .rates import rates_for

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)

@dataclass(frozen=True)
class Fixed:
    value: Decimal

@dataclass(frozen=True)
class Percentage:
    percent: Decimal

ShareInput = Union[Fixed, Percentage]

def _coerce(value: Any, field: str) -> Optional[Decimal]:
    try:
        d = to_decimal(value)
    except ValueError:
        raise InvalidInput(f"{field} must be a number")
    if d is not None and not d.is_finite():
        raise InvalidInput(f"{field} must be a finite number")
    return d

def resolve_share_input(value: Any = None, percent: Any = None) -> ShareInput:
    """Pick the authoritative input. Percent wins when both are supplied."""
    value = _coerce(value, "value")
    percent = _coerce(percent, "percent")
    if percent is not None:
        if percent < 0 or percent > HUNDRED:
            raise InvalidInput("percent must be between 0 and 100")
        return Percentage(percent)
    if value is not None:
        if value < 0:
            raise InvalidInput("value must not be negative")
        return Fixed(value)
    raise InvalidInput("Either value or percent is required")

def compute_share(item: models.ExpenseItem, share_input: ShareInput, rates: Mapping[str, Decimal]) -> Decimal:
    if isinstance(share_input, Percentage):
        # rounded once, on the final figure
        amount = to_decimal(item.amount) or ZERO
        return round2(amount * rate_of(item.currency, rates) * share_input.percent / HUNDRED)
    return to_base(item.currency, share_input.value, rates)

def stored_input(share: models.Share) -> Optional[ShareInput]:
    if share.percent is not None:
        return Percentage(share.percent)
    if share.value is not None:
        return Fixed(share.value)
    return None

def _apply(share: models.Share, share_input: ShareInput, value: Optional[Decimal], percent: Optional[Decimal], rates):
    # A stored percent always drives computed_value, so a value-only write drops it
    if value is not None:
        share.value = round2(value)
    share.percent = percent if isinstance(share_input, Percentage) else None
    share.computed_value = compute_share(share.item, share_input, rates)

def rederive_item_shares(item: models.ExpenseItem, rates: Mapping[str, Decimal]):
    """Recompute every share of ``item`` from its stored input after the item changed."""
    for share in item.shares:
        share_input = stored_input(share)
        if share_input is not None:
            share.computed_value = compute_share(item, share_input, rates)

def allocate_share(db: Session, expense_id: int, item_id: int, participant_id: int, value=None, percent=None) -> models.Share:
    share_input = resolve_share_input(value, percent)
    item = get_item_in_expense(db, expense_id, item_id)
    get_user(db, participant_id)
    expense = item.expense
    ensure_member(db, expense.group_id, participant_id)

    share = models.Share(item=item, participant_id=participant_id)
    _apply(share, share_input, _coerce(value, "value"), _coerce(percent, "percent"), rates_for(expense))
    db.add(share)
    db.commit()
    db.refresh(share)
    logger.info("Allocated share %s on item %s to user %s: %s", share.id, item.id, participant_id, share.computed_value)
    return share

def update_share(db: Session, expense_id: int, item_id: int, share_id: int, value=None, percent=None) -> models.Share:
    share_input = resolve_share_input(value, percent)
    share = get_share_in_item(db, expense_id, item_id, share_id)
    _apply(share, share_input, _coerce(value, "value"), _coerce(percent, "percent"), rates_for(share.item.expense))
    db.commit()
    db.refresh(share)
    return share

def delete_share(db: Session, expense_id: int, item_id: int, share_id: int):
    share = get_share_in_item(db, expense_id, item_id, share_id)
    db.delete(share)
    db.commit()

def list_item_shares(db: Session, expense_id: int, item_id: int) -> List[models.Share]:
    get_item_in_expense(db, expense_id, item_id)
    return db.query(models.Share).filter_by(item_id=item_id).order_by(models.Share.id).all()

def list_expense_shares(db: Session, expense_id: int) -> List[models.Share]:
    get_expense(db, expense_id)
    return (
        db.query(models.Share)
        .join(models.ExpenseItem, models.Share.item_id == models.ExpenseItem.id)
        .filter(models.ExpenseItem.expense_id == expense_id)
        .order_by(models.Share.id)
        .all()
    )

def list_user_shares_in_expense(db: Session, expense_id: int, user_id: int) -> List[models.Share]:
    return [s for s in list_expense_shares(db, expense_id) if s.participant_id == user_id]

# Global-ID entry points, resolved through the canonical parent

def allocate_share_by_item(db: Session, item_id: int, participant_id: int, value=None, percent=None) -> models.Share:
    item = db.get(models.ExpenseItem, item_id)
    if not item:
        raise NotFound("Expense item not found")
    return allocate_share(db, item.expense_id, item.id, participant_id, value=value, percent=percent)

def update_share_by_id(db: Session, share_id: int, value=None, percent=None) -> models.Share:
    share = db.get(models.Share, share_id)
    if not share:
        raise NotFound("Share not found")
    return update_share(db, share.item.expense_id, share.item_id, share.id, value=value, percent=percent)
