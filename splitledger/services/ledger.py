from sqlalchemy.orm import Session
from .. import models
from ..errors import InvalidInput, NotFound

def get_user(db: Session, user_id: int) -> models.User:
    u = db.get(models.User, user_id)
    if not u:
        raise NotFound("User not found")
    return u

def get_group(db: Session, group_id: int) -> models.Group:
    g = db.get(models.Group, group_id)
    if not g:
        raise NotFound("Group not found")
    return g

def get_expense(db: Session, expense_id: int) -> models.Expense:
    e = db.get(models.Expense, expense_id)
    if not e:
        raise NotFound("Expense not found")
    return e

def get_item_in_expense(db: Session, expense_id: int, item_id: int) -> models.ExpenseItem:
    item = db.query(models.ExpenseItem).filter_by(id=item_id, expense_id=expense_id).first()
    if not item:
        raise NotFound("Item not found in this expense")
    return item

def get_share_in_item(db: Session, expense_id: int, item_id: int, share_id: int) -> models.Share:
    share = (
        db.query(models.Share)
        .join(models.ExpenseItem, models.Share.item_id == models.ExpenseItem.id)
        .filter(models.Share.id == share_id, models.Share.item_id == item_id, models.ExpenseItem.expense_id == expense_id)
        .first()
    )
    if not share:
        raise NotFound("Share not found in this expense/item")
    return share

def get_payment_in_expense(db: Session, expense_id: int, payment_id: int) -> models.Payment:
    p = db.query(models.Payment).filter_by(id=payment_id, expense_id=expense_id).first()
    if not p:
        raise NotFound("Payment not found in this expense")
    return p

def is_member(db: Session, group_id: int, user_id: int) -> bool:
    return db.query(models.GroupMember).filter_by(group_id=group_id, user_id=user_id).first() is not None

def ensure_member(db: Session, group_id: int, user_id: int):
    if not is_member(db, group_id, user_id):
        raise InvalidInput(f"User {user_id} is not a member of group {group_id}")
