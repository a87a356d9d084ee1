from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services import payments as svc
from ..services.expenses import verified_total
from ..services.ledger import get_expense, get_payment_in_expense

router = APIRouter()

@router.get("", response_model=list[schemas.PaymentOut])
def list_payments(expense_id: int, db: Session = Depends(get_db)):
    return svc.list_payments(db, expense_id)

@router.post("", response_model=schemas.PaymentOut, status_code=201)
def create_payment(expense_id: int, data: schemas.PaymentCreate, db: Session = Depends(get_db)):
    return svc.create_payment(db, expense_id, data.from_user_id, data.amount)

@router.get("/total-verified")
def total_verified(expense_id: int, db: Session = Depends(get_db)):
    get_expense(db, expense_id)
    return {"expense_id": expense_id, "verified_total": verified_total(db, expense_id)}

@router.get("/{payment_id}", response_model=schemas.PaymentOut)
def read_payment(expense_id: int, payment_id: int, db: Session = Depends(get_db)):
    return get_payment_in_expense(db, expense_id, payment_id)

@router.put("/{payment_id}/status", response_model=schemas.PaymentOut)
def set_status(expense_id: int, payment_id: int, data: schemas.PaymentStatusIn, db: Session = Depends(get_db)):
    return svc.set_status(db, expense_id, payment_id, data.status)

@router.delete("/{payment_id}", status_code=204)
def delete_payment(expense_id: int, payment_id: int, db: Session = Depends(get_db)):
    svc.delete_payment(db, expense_id, payment_id)
    return Response(status_code=204)

@router.post("/{payment_id}/receipt", response_model=schemas.ReceiptOut, status_code=201)
def attach_receipt(expense_id: int, payment_id: int, data: schemas.ReceiptIn, db: Session = Depends(get_db)):
    return svc.attach_receipt(db, expense_id, payment_id, data.file_url)

@router.get("/{payment_id}/receipt", response_model=schemas.ReceiptOut)
def read_receipt(expense_id: int, payment_id: int, db: Session = Depends(get_db)):
    return svc.get_receipt(db, expense_id, payment_id)

@router.delete("/{payment_id}/receipt", status_code=204)
def delete_receipt(expense_id: int, payment_id: int, db: Session = Depends(get_db)):
    svc.delete_receipt(db, expense_id, payment_id)
    return Response(status_code=204)
