from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Dict, Optional
from datetime import datetime
from decimal import Decimal
from .models import ExpenseStatus, PaymentStatus

class UserCreate(BaseModel):
    name: str
    email: EmailStr

class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    model_config = ConfigDict(from_attributes=True)

class GroupCreate(BaseModel):
    name: str

class GroupOut(BaseModel):
    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)

class AddMember(BaseModel):
    user_id: int

class ExpenseCreate(BaseModel):
    group_id: int
    payer_id: int
    title: str
    amount: Decimal = Decimal("0.00")
    status: ExpenseStatus = ExpenseStatus.OPEN

class ExpenseUpdate(BaseModel):
    payer_id: Optional[int] = None
    title: Optional[str] = None
    amount: Optional[Decimal] = None
    status: Optional[ExpenseStatus] = None

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    payer_id: int
    title: str
    amount: Decimal
    status: ExpenseStatus
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

class ExpenseSummaryOut(BaseModel):
    items_total: Decimal
    verified_total: Decimal

class ItemCreate(BaseModel):
    name: str
    amount: Decimal = Field(ge=0)
    currency: Optional[str] = "THB"

class ItemUpdate(BaseModel):
    name: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[str] = None

class ItemOut(BaseModel):
    id: int
    expense_id: int
    name: str
    amount: Decimal
    currency: str
    model_config = ConfigDict(from_attributes=True)

class ShareCreate(BaseModel):
    participant_id: int
    value: Optional[Decimal] = None
    percent: Optional[Decimal] = None

class ShareUpdate(BaseModel):
    value: Optional[Decimal] = None
    percent: Optional[Decimal] = None

class ShareOut(BaseModel):
    id: int
    item_id: int
    participant_id: int
    value: Optional[Decimal]
    percent: Optional[Decimal]
    computed_value: Optional[Decimal]
    model_config = ConfigDict(from_attributes=True)

class PaymentCreate(BaseModel):
    from_user_id: int
    amount: Decimal

class PaymentStatusIn(BaseModel):
    status: PaymentStatus

class PaymentOut(BaseModel):
    id: int
    expense_id: int
    from_user_id: int
    amount: Decimal
    status: PaymentStatus
    created_at: datetime
    verified_at: Optional[datetime]
    model_config = ConfigDict(from_attributes=True)

class ReceiptIn(BaseModel):
    file_url: str

class ReceiptOut(BaseModel):
    id: int
    payment_id: int
    file_url: str
    model_config = ConfigDict(from_attributes=True)

class SettlementOut(BaseModel):
    expense_id: int
    user_id: int
    owed_amount: Decimal
    paid_amount: Decimal
    remaining: Decimal
    settled: bool
    model_config = ConfigDict(from_attributes=True)

class BalanceLineOut(BaseModel):
    direction: str
    counterparty_user_id: int
    counterparty_name: Optional[str] = None
    group_id: int
    group_name: Optional[str] = None
    expense_id: int
    expense_title: Optional[str] = None
    remaining: Decimal
    model_config = ConfigDict(from_attributes=True)

class BalanceSummaryOut(BaseModel):
    you_owe_total: Decimal
    you_are_owed_total: Decimal
    model_config = ConfigDict(from_attributes=True)

class RatesOut(BaseModel):
    base: str
    rates: Dict[str, Decimal]
