from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..services import shares as svc

router = APIRouter()

@router.get("/expenses/{expense_id}/items/{item_id}/shares", response_model=list[schemas.ShareOut])
def list_item_shares(expense_id: int, item_id: int, db: Session = Depends(get_db)):
    return svc.list_item_shares(db, expense_id, item_id)

@router.post("/expenses/{expense_id}/items/{item_id}/shares", response_model=schemas.ShareOut, status_code=201)
def add_share(expense_id: int, item_id: int, data: schemas.ShareCreate, db: Session = Depends(get_db)):
    return svc.allocate_share(db, expense_id, item_id, data.participant_id, value=data.value, percent=data.percent)

@router.patch("/expenses/{expense_id}/items/{item_id}/shares/{share_id}", response_model=schemas.ShareOut)
def update_share(expense_id: int, item_id: int, share_id: int, data: schemas.ShareUpdate, db: Session = Depends(get_db)):
    return svc.update_share(db, expense_id, item_id, share_id, value=data.value, percent=data.percent)

@router.delete("/expenses/{expense_id}/items/{item_id}/shares/{share_id}", status_code=204)
def delete_share(expense_id: int, item_id: int, share_id: int, db: Session = Depends(get_db)):
    svc.delete_share(db, expense_id, item_id, share_id)
    return Response(status_code=204)

@router.get("/expenses/{expense_id}/shares", response_model=list[schemas.ShareOut])
def list_expense_shares(expense_id: int, db: Session = Depends(get_db)):
    return svc.list_expense_shares(db, expense_id)

@router.get("/expenses/{expense_id}/shares/users/{user_id}", response_model=list[schemas.ShareOut])
def list_user_shares(expense_id: int, user_id: int, db: Session = Depends(get_db)):
    return svc.list_user_shares_in_expense(db, expense_id, user_id)

# Legacy global-ID routes

@router.post("/items/{item_id}/shares", response_model=schemas.ShareOut, status_code=201)
def add_share_by_item(item_id: int, data: schemas.ShareCreate, db: Session = Depends(get_db)):
    return svc.allocate_share_by_item(db, item_id, data.participant_id, value=data.value, percent=data.percent)

@router.patch("/shares/{share_id}", response_model=schemas.ShareOut)
def update_share_by_id(share_id: int, data: schemas.ShareUpdate, db: Session = Depends(get_db)):
    return svc.update_share_by_id(db, share_id, value=data.value, percent=data.percent)
