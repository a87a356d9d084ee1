from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services.settlement import all_settlements, settlement

router = APIRouter()

@router.get("", response_model=list[schemas.SettlementOut])
def expense_settlements(expense_id: int, db: Session = Depends(get_db)):
    return all_settlements(db, expense_id)

@router.get("/{user_id}", response_model=schemas.SettlementOut)
def user_settlement(expense_id: int, user_id: int, db: Session = Depends(get_db)):
    return settlement(db, expense_id, user_id)
