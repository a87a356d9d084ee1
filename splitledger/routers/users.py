from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..errors import Conflict
from ..services.expenses import list_participating_expenses
from ..services.ledger import get_user

router = APIRouter()

@router.post("", response_model=schemas.UserOut)
def create_user(user: schemas.UserCreate, db: Session = Depends(get_db)):
    if db.query(models.User).filter_by(email=user.email).first():
        raise Conflict("Email already exists")
    u = models.User(name=user.name, email=user.email)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u

@router.get("/{user_id}", response_model=schemas.UserOut)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return get_user(db, user_id)

@router.get("/{user_id}/expenses", response_model=list[schemas.ExpenseOut])
def participating_expenses(user_id: int, db: Session = Depends(get_db)):
    return list_participating_expenses(db, user_id)
