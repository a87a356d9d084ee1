"""Dashboard balances: who owes the user and whom the user owes, per expense.

Lines are keyed on the expense payer. A participant who is not the payer owes
the payer their remaining settlement; the payer is owed every other
participant's remaining settlement.
"""
import enum
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from .. import models
from .ledger import get_user
from .money import ZERO, round2
from .settlement import compute_settlement

logger = logging.getLogger(__name__)

class Direction(str, enum.Enum):
    YOU_OWE = "YOU_OWE"
    OWES_YOU = "OWES_YOU"

@dataclass(frozen=True)
class BalanceLine:
    direction: str
    counterparty_user_id: int
    group_id: int
    expense_id: int
    remaining: Decimal
    counterparty_name: Optional[str] = None
    group_name: Optional[str] = None
    expense_title: Optional[str] = None

@dataclass(frozen=True)
class BalanceSummary:
    you_owe_total: Decimal = ZERO
    you_are_owed_total: Decimal = ZERO

def _name(obj) -> Optional[str]:
    return getattr(obj, "name", None) if obj is not None else None

def counterparties(user_id: int, expense: models.Expense, shares: Iterable[models.Share], payments: Iterable[models.Payment]) -> List[int]:
    ids = {s.participant_id for s in shares}
    ids.update(p.from_user_id for p in payments if p.status == models.PaymentStatus.VERIFIED)
    ids.add(expense.payer_id)
    ids.discard(user_id)
    return sorted(ids)

def build_balance_lines(
    user_id: int,
    expenses: Iterable[models.Expense],
    shares_by_expense: Dict[int, List[models.Share]],
    payments_by_expense: Dict[int, List[models.Payment]],
    names: Optional[Dict[int, str]] = None,
) -> List[BalanceLine]:
    """Every (user, counterparty, expense) line, zero remainders included."""
    names = names or {}
    lines: List[BalanceLine] = []
    for e in expenses:
        shares = shares_by_expense.get(e.id, [])
        payments = payments_by_expense.get(e.id, [])
        common = dict(group_id=e.group_id, expense_id=e.id, group_name=_name(getattr(e, "group", None)), expense_title=e.title)
        if e.payer_id != user_id:
            mine = compute_settlement(e.id, user_id, shares, payments)
            lines.append(BalanceLine(direction=Direction.YOU_OWE.value, counterparty_user_id=e.payer_id,
                                     remaining=mine.remaining, counterparty_name=names.get(e.payer_id), **common))
            continue
        for other in counterparties(user_id, e, shares, payments):
            theirs = compute_settlement(e.id, other, shares, payments)
            lines.append(BalanceLine(direction=Direction.OWES_YOU.value, counterparty_user_id=other,
                                     remaining=theirs.remaining, counterparty_name=names.get(other), **common))
    return lines

def visible(lines: Iterable[BalanceLine]) -> List[BalanceLine]:
    return [line for line in lines if line.remaining > 0]

def summarize(lines: Iterable[BalanceLine]) -> BalanceSummary:
    owe = ZERO
    owed = ZERO
    for line in lines:
        if line.direction == Direction.YOU_OWE.value:
            owe += line.remaining
        elif line.direction == Direction.OWES_YOU.value:
            owed += line.remaining
        else:
            logger.warning("Ignoring balance line with unknown direction %r (expense %s, counterparty %s)",
                           line.direction, line.expense_id, line.counterparty_user_id)
    return BalanceSummary(you_owe_total=round2(owe), you_are_owed_total=round2(owed))

def _relevant_rows(db: Session, user_id: int):
    share_expense_ids = (
        select(models.ExpenseItem.expense_id)
        .join(models.Share, models.Share.item_id == models.ExpenseItem.id)
        .where(models.Share.participant_id == user_id)
    )
    paid_expense_ids = (
        select(models.Payment.expense_id)
        .where(models.Payment.from_user_id == user_id, models.Payment.status == models.PaymentStatus.VERIFIED)
    )
    expenses = (
        db.query(models.Expense)
        .filter(or_(
            models.Expense.id.in_(share_expense_ids),
            models.Expense.id.in_(paid_expense_ids),
            models.Expense.payer_id == user_id,
        ))
        .order_by(models.Expense.id)
        .all()
    )
    ids = [e.id for e in expenses]
    shares_by_expense: Dict[int, List[models.Share]] = defaultdict(list)
    payments_by_expense: Dict[int, List[models.Payment]] = defaultdict(list)
    if ids:
        rows = (
            db.query(models.Share, models.ExpenseItem.expense_id)
            .join(models.ExpenseItem, models.Share.item_id == models.ExpenseItem.id)
            .filter(models.ExpenseItem.expense_id.in_(ids))
            .all()
        )
        for share, expense_id in rows:
            shares_by_expense[expense_id].append(share)
        for p in db.query(models.Payment).filter(models.Payment.expense_id.in_(ids)).all():
            payments_by_expense[p.expense_id].append(p)
    user_ids = {e.payer_id for e in expenses}
    for rows in shares_by_expense.values():
        user_ids.update(s.participant_id for s in rows)
    for rows in payments_by_expense.values():
        user_ids.update(p.from_user_id for p in rows)
    names = {u.id: u.name for u in db.query(models.User).filter(models.User.id.in_(user_ids)).all()} if user_ids else {}
    return expenses, shares_by_expense, payments_by_expense, names

def all_lines(db: Session, user_id: int) -> List[BalanceLine]:
    get_user(db, user_id)
    expenses, shares, payments, names = _relevant_rows(db, user_id)
    return build_balance_lines(user_id, expenses, shares, payments, names)

def balances(db: Session, user_id: int) -> List[BalanceLine]:
    return visible(all_lines(db, user_id))

def summary(db: Session, user_id: int) -> BalanceSummary:
    return summarize(all_lines(db, user_id))
