from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..database import get_db
from .. import models, schemas
from ..services.expenses import list_group_expenses
from ..services.ledger import get_group, get_user, is_member

router = APIRouter()

@router.post("", response_model=schemas.GroupOut)
def create_group(group: schemas.GroupCreate, db: Session = Depends(get_db)):
    g = models.Group(name=group.name)
    db.add(g)
    db.commit()
    db.refresh(g)
    return g

@router.post("/{group_id}/members")
def add_member(group_id: int, member: schemas.AddMember, db: Session = Depends(get_db)):
    get_group(db, group_id)
    get_user(db, member.user_id)
    if is_member(db, group_id, member.user_id):
        return {"message": "Already a member"}
    db.add(models.GroupMember(group_id=group_id, user_id=member.user_id))
    db.commit()
    return {"message": "Member added"}

@router.get("/{group_id}/expenses", response_model=list[schemas.ExpenseOut])
def group_expenses(group_id: int, db: Session = Depends(get_db)):
    return list_group_expenses(db, group_id)
