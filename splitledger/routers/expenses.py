from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services import expenses as svc
from ..services.ledger import get_expense, get_item_in_expense

router = APIRouter()

@router.post("", response_model=schemas.ExpenseOut, status_code=201)
def create_expense(data: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    return svc.create_expense(db, data.group_id, data.payer_id, data.title, amount=data.amount, status=data.status)

@router.get("/{expense_id}", response_model=schemas.ExpenseOut)
def read_expense(expense_id: int, db: Session = Depends(get_db)):
    return get_expense(db, expense_id)

@router.patch("/{expense_id}", response_model=schemas.ExpenseOut)
def update_expense(expense_id: int, data: schemas.ExpenseUpdate, db: Session = Depends(get_db)):
    return svc.update_expense(db, expense_id, payer_id=data.payer_id, title=data.title, amount=data.amount, status=data.status)

@router.delete("/{expense_id}", status_code=204)
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    svc.delete_expense(db, expense_id)
    return Response(status_code=204)

@router.get("/{expense_id}/summary", response_model=schemas.ExpenseSummaryOut)
def expense_summary(expense_id: int, db: Session = Depends(get_db)):
    return svc.expense_summary(db, expense_id)

@router.get("/{expense_id}/items", response_model=list[schemas.ItemOut])
def list_items(expense_id: int, db: Session = Depends(get_db)):
    return svc.list_items(db, expense_id)

@router.post("/{expense_id}/items", response_model=schemas.ItemOut, status_code=201)
def create_item(expense_id: int, data: schemas.ItemCreate, db: Session = Depends(get_db)):
    return svc.create_item(db, expense_id, data.name, data.amount, data.currency)

@router.get("/{expense_id}/items/{item_id}", response_model=schemas.ItemOut)
def read_item(expense_id: int, item_id: int, db: Session = Depends(get_db)):
    return get_item_in_expense(db, expense_id, item_id)

@router.patch("/{expense_id}/items/{item_id}", response_model=schemas.ItemOut)
def update_item(expense_id: int, item_id: int, data: schemas.ItemUpdate, db: Session = Depends(get_db)):
    return svc.update_item(db, expense_id, item_id, name=data.name, amount=data.amount, currency=data.currency)

@router.delete("/{expense_id}/items/{item_id}", status_code=204)
def delete_item(expense_id: int, item_id: int, db: Session = Depends(get_db)):
    svc.delete_item(db, expense_id, item_id)
    return Response(status_code=204)
