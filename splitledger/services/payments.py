import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm import Session
from .. import models
from ..errors import Conflict, InvalidInput, NotFound
from .ledger import get_expense, get_payment_in_expense, get_user
from .money import round2, to_decimal

logger = logging.getLogger(__name__)

def create_payment(db: Session, expense_id: int, from_user_id: int, amount) -> models.Payment:
    try:
        amount = to_decimal(amount)
    except ValueError:
        raise InvalidInput("Amount must be > 0")
    if amount is None or not amount.is_finite() or amount <= 0:
        raise InvalidInput("Amount must be > 0")
    exp = get_expense(db, expense_id)
    get_user(db, from_user_id)
    p = models.Payment(expense_id=exp.id, from_user_id=from_user_id, amount=round2(amount), status=models.PaymentStatus.PENDING)
    db.add(p)
    db.commit()
    db.refresh(p)
    logger.info("Recorded payment %s of %s from user %s on expense %s", p.id, p.amount, from_user_id, exp.id)
    return p

def list_payments(db: Session, expense_id: int) -> List[models.Payment]:
    get_expense(db, expense_id)
    return db.query(models.Payment).filter_by(expense_id=expense_id).order_by(models.Payment.id).all()

def set_status(db: Session, expense_id: int, payment_id: int, status: models.PaymentStatus) -> models.Payment:
    p = get_payment_in_expense(db, expense_id, payment_id)
    p.status = status
    p.verified_at = datetime.now(timezone.utc) if status == models.PaymentStatus.VERIFIED else None
    db.commit()
    db.refresh(p)
    logger.info("Payment %s on expense %s is now %s", p.id, expense_id, status.value)
    return p

def delete_payment(db: Session, expense_id: int, payment_id: int):
    p = get_payment_in_expense(db, expense_id, payment_id)
    db.delete(p)
    db.commit()

def attach_receipt(db: Session, expense_id: int, payment_id: int, file_url: str) -> models.Receipt:
    if file_url is None or not file_url.strip():
        raise InvalidInput("file_url is required")
    p = get_payment_in_expense(db, expense_id, payment_id)
    if p.receipt is not None:
        raise Conflict("Payment already has a receipt")
    r = models.Receipt(payment=p, file_url=file_url.strip())
    db.add(r)
    db.commit()
    db.refresh(r)
    return r

def get_receipt(db: Session, expense_id: int, payment_id: int) -> models.Receipt:
    p = get_payment_in_expense(db, expense_id, payment_id)
    if p.receipt is None:
        raise NotFound("Receipt not found")
    return p.receipt

def delete_receipt(db: Session, expense_id: int, payment_id: int):
    r = get_receipt(db, expense_id, payment_id)
    db.delete(r)
    db.commit()
