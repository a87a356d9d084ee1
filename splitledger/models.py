import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from sqlalchemy import Integer, String, ForeignKey, Numeric, DateTime, Text, Enum, UniqueConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .database import Base

def _now() -> datetime:
    return datetime.now(timezone.utc)

class ExpenseStatus(str, enum.Enum):
    OPEN = "OPEN"
    SETTLED = "SETTLED"
    CANCELLED = "CANCELLED"

class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"

class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

class Group(Base):
    __tablename__ = "groups"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

class GroupMember(Base):
    __tablename__ = "group_members"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_member"),)

class Expense(Base):
    __tablename__ = "expenses"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id", ondelete="CASCADE"), index=True)
    payer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    status: Mapped[ExpenseStatus] = mapped_column(Enum(ExpenseStatus, native_enum=False, length=20), default=ExpenseStatus.OPEN)
    # Frozen at creation, never rewritten
    exchange_rates_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    group: Mapped[Group] = relationship()
    payer: Mapped[User] = relationship()
    items: Mapped[list["ExpenseItem"]] = relationship(back_populates="expense", cascade="all, delete-orphan")
    payments: Mapped[list["Payment"]] = relationship(back_populates="expense", cascade="all, delete-orphan")

class ExpenseItem(Base):
    __tablename__ = "expense_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    expense_id: Mapped[int] = mapped_column(ForeignKey("expenses.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="THB")

    expense: Mapped[Expense] = relationship(back_populates="items")
    shares: Mapped[list["Share"]] = relationship(back_populates="item", cascade="all, delete-orphan")

class Share(Base):
    __tablename__ = "expense_item_shares"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("expense_items.id", ondelete="CASCADE"), index=True)
    participant_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    value: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)           # item currency
    percent: Mapped[Optional[Decimal]] = mapped_column(Numeric(9, 6), nullable=True)
    computed_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)  # base currency

    item: Mapped[ExpenseItem] = relationship(back_populates="shares")
    participant: Mapped[User] = relationship()

class Payment(Base):
    __tablename__ = "expense_payments"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    expense_id: Mapped[int] = mapped_column(ForeignKey("expenses.id", ondelete="CASCADE"), index=True)
    from_user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(Enum(PaymentStatus, native_enum=False, length=20), default=PaymentStatus.PENDING, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    expense: Mapped[Expense] = relationship(back_populates="payments")
    from_user: Mapped[User] = relationship()
    receipt: Mapped[Optional["Receipt"]] = relationship(back_populates="payment", uselist=False, cascade="all, delete-orphan")

class Receipt(Base):
    __tablename__ = "payment_receipts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    payment_id: Mapped[int] = mapped_column(ForeignKey("expense_payments.id", ondelete="CASCADE"), unique=True, index=True)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)

    payment: Mapped[Payment] = relationship(back_populates="receipt")
