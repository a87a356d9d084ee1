"""Per-user settlement for one expense.

Always re-derived from share and payment rows; nothing here is stored.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List
from sqlalchemy.orm import Session
from .. import models
from .ledger import get_expense, get_user
from .money import ZERO, round2

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SettlementLine:
    expense_id: int
    user_id: int
    owed_amount: Decimal
    paid_amount: Decimal
    remaining: Decimal
    settled: bool

def owed_for(user_id: int, shares: Iterable[models.Share]) -> Decimal:
    total = ZERO
    for s in shares:
        if s.participant_id == user_id and s.computed_value is not None:
            total += s.computed_value
    return total

def paid_for(user_id: int, payments: Iterable[models.Payment]) -> Decimal:
    total = ZERO
    for p in payments:
        if p.from_user_id == user_id and p.status == models.PaymentStatus.VERIFIED and p.amount is not None:
            total += p.amount
    return total

def compute_settlement(expense_id: int, user_id: int, shares: Iterable[models.Share], payments: Iterable[models.Payment]) -> SettlementLine:
    """``shares`` and ``payments`` are the rows of one expense."""
    owed = round2(owed_for(user_id, shares))
    paid = round2(paid_for(user_id, payments))
    remaining = max(ZERO, owed - paid)
    return SettlementLine(
        expense_id=expense_id,
        user_id=user_id,
        owed_amount=owed,
        paid_amount=paid,
        remaining=round2(remaining),
        settled=paid >= owed,
    )

def expense_rows(db: Session, expense_id: int):
    shares = (
        db.query(models.Share)
        .join(models.ExpenseItem, models.Share.item_id == models.ExpenseItem.id)
        .filter(models.ExpenseItem.expense_id == expense_id)
        .all()
    )
    payments = db.query(models.Payment).filter_by(expense_id=expense_id).all()
    return shares, payments

def participants_of(shares: Iterable[models.Share], payments: Iterable[models.Payment]) -> List[int]:
    ids = {s.participant_id for s in shares}
    ids.update(p.from_user_id for p in payments if p.status == models.PaymentStatus.VERIFIED)
    return sorted(ids)

def settlement(db: Session, expense_id: int, user_id: int) -> SettlementLine:
    get_expense(db, expense_id)
    get_user(db, user_id)
    shares, payments = expense_rows(db, expense_id)
    line = compute_settlement(expense_id, user_id, shares, payments)
    logger.debug("Settlement expense=%s user=%s: %s", expense_id, user_id, line)
    return line

def all_settlements(db: Session, expense_id: int) -> List[SettlementLine]:
    get_expense(db, expense_id)
    shares, payments = expense_rows(db, expense_id)
    return [compute_settlement(expense_id, uid, shares, payments) for uid in participants_of(shares, payments)]
