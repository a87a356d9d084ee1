import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from .. import models
from ..errors import InvalidInput
from .ledger import get_expense, get_group, get_item_in_expense, get_user, ensure_member
from .money import ZERO, normalize_currency, round2, to_base, to_decimal
from .rates import Rates, lock_rates, rates_for
from .shares import rederive_item_shares

logger = logging.getLogger(__name__)

def create_expense(db: Session, group_id: int, payer_id: int, title: str, amount=None,
                   status: models.ExpenseStatus = models.ExpenseStatus.OPEN,
                   fetch_live: Optional[Callable[[], Rates]] = None) -> models.Expense:
    group = get_group(db, group_id)
    get_user(db, payer_id)
    ensure_member(db, group.id, payer_id)
    exp = models.Expense(
        group_id=group.id,
        payer_id=payer_id,
        title=title,
        amount=round2(amount),
        status=status,
        exchange_rates_json=lock_rates(fetch_live),
    )
    db.add(exp)
    db.commit()
    db.refresh(exp)
    logger.info("Created expense %s in group %s", exp.id, group.id)
    return exp

def update_expense(db: Session, expense_id: int, payer_id: Optional[int] = None, title: Optional[str] = None,
                   amount=None, status: Optional[models.ExpenseStatus] = None) -> models.Expense:
    # exchange_rates_json is never rewritten after creation
    exp = get_expense(db, expense_id)
    if payer_id is not None:
        get_user(db, payer_id)
        ensure_member(db, exp.group_id, payer_id)
        exp.payer_id = payer_id
    if title is not None:
        exp.title = title
    if amount is not None:
        exp.amount = round2(amount)
    if status is not None:
        exp.status = status
    db.commit()
    db.refresh(exp)
    return exp

def delete_expense(db: Session, expense_id: int):
    exp = get_expense(db, expense_id)
    db.delete(exp)
    db.commit()

def list_group_expenses(db: Session, group_id: int) -> List[models.Expense]:
    get_group(db, group_id)
    return db.query(models.Expense).filter_by(group_id=group_id).order_by(models.Expense.id).all()

def _item_amount(amount) -> Decimal:
    try:
        d = to_decimal(amount)
    except ValueError:
        raise InvalidInput("amount must be a number")
    if d is None or not d.is_finite() or d < 0:
        raise InvalidInput("amount must be >= 0")
    return round2(d)

def create_item(db: Session, expense_id: int, name: str, amount, currency: Optional[str] = None) -> models.ExpenseItem:
    exp = get_expense(db, expense_id)
    item = models.ExpenseItem(expense_id=exp.id, name=name, amount=_item_amount(amount), currency=normalize_currency(currency))
    db.add(item)
    db.commit()
    db.refresh(item)
    return item

def update_item(db: Session, expense_id: int, item_id: int, name: Optional[str] = None, amount=None,
                currency: Optional[str] = None) -> models.ExpenseItem:
    item = get_item_in_expense(db, expense_id, item_id)
    if name is not None:
        item.name = name
    if amount is not None:
        item.amount = _item_amount(amount)
    if currency is not None and currency.strip():
        item.currency = normalize_currency(currency)
    if amount is not None or currency is not None:
        rederive_item_shares(item, rates_for(item.expense))
        logger.info("Re-derived %d share(s) of item %s", len(item.shares), item.id)
    db.commit()
    db.refresh(item)
    return item

def delete_item(db: Session, expense_id: int, item_id: int):
    item = get_item_in_expense(db, expense_id, item_id)
    db.delete(item)
    db.commit()

def list_items(db: Session, expense_id: int) -> List[models.ExpenseItem]:
    get_expense(db, expense_id)
    return db.query(models.ExpenseItem).filter_by(expense_id=expense_id).order_by(models.ExpenseItem.id).all()

def items_total(items: List[models.ExpenseItem], rates: Rates) -> Decimal:
    total = ZERO
    for it in items:
        total += to_base(it.currency, it.amount, rates) or ZERO
    return round2(total)

def verified_total(db: Session, expense_id: int) -> Decimal:
    total = ZERO
    for p in db.query(models.Payment).filter_by(expense_id=expense_id, status=models.PaymentStatus.VERIFIED).all():
        total += p.amount
    return round2(total)

def expense_summary(db: Session, expense_id: int) -> Dict[str, Decimal]:
    exp = get_expense(db, expense_id)
    return {
        "items_total": items_total(list_items(db, exp.id), rates_for(exp)),
        "verified_total": verified_total(db, exp.id),
    }

def list_participating_expenses(db: Session, user_id: int) -> List[models.Expense]:
    """Expenses in which ``user_id`` holds at least one share."""
    get_user(db, user_id)
    share_expense_ids = (
        select(models.ExpenseItem.expense_id)
        .join(models.Share, models.Share.item_id == models.ExpenseItem.id)
        .where(models.Share.participant_id == user_id)
    )
    return db.query(models.Expense).filter(models.Expense.id.in_(share_expense_ids)).order_by(models.Expense.id).all()
