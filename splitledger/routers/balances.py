from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services import balances as svc

router = APIRouter()

@router.get("", response_model=list[schemas.BalanceLineOut])
def get_balances(user_id: int, db: Session = Depends(get_db)):
    return svc.balances(db, user_id)

@router.get("/summary", response_model=schemas.BalanceSummaryOut)
def get_balance_summary(user_id: int, db: Session = Depends(get_db)):
    return svc.summary(db, user_id)
