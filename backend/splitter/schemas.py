"""Pydantic schemas for request/response."""
import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, EmailStr, Field, PlainSerializer

# Decimal inside the engine, plain JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ----- User -----
class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


class MemberInfo(BaseModel):
    id: int
    name: str
    email: EmailStr


# ----- Group -----
class GroupBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class GroupCreate(GroupBase):
    member_ids: list[int] = []


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class GroupResponse(GroupBase):
    id: int
    created_at: Optional[datetime.datetime] = None
    member_ids: list[int] = []
    members: list[MemberInfo] = []

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


# ----- Expense -----
class SplitType(str, Enum):
    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENT = "PERCENT"


class ShareIn(BaseModel):
    user_id: int
    value: Decimal = Field(max_digits=16, decimal_places=4)


class ExpenseCreate(BaseModel):
    group_id: int
    description: Optional[str] = None
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    paid_by_user_id: int
    date: datetime.date
    split_type: SplitType = SplitType.EQUAL
    shares: Optional[list[ShareIn]] = None
    # EQUAL only: restrict the split to these members instead of the whole group
    participant_ids: Optional[list[int]] = None


class ShareResponse(BaseModel):
    user_id: int
    value: Money
    owed_amount: Money

    class Config:
        from_attributes = True


class ExpenseResponse(BaseModel):
    id: int
    group_id: int
    description: Optional[str] = None
    amount: Money
    paid_by_user_id: int
    date: datetime.date
    split_type: SplitType
    shares: list[ShareResponse] = []
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


# ----- Settlement (recorded repayment) -----
class SettlementCreate(BaseModel):
    group_id: int
    from_user_id: int
    to_user_id: int
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    date: datetime.date
    note: Optional[str] = None


class SettlementResponse(BaseModel):
    id: int
    group_id: int
    from_user_id: int
    to_user_id: int
    amount: Money
    date: datetime.date
    note: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


# ----- Reports -----
class BalanceEntry(BaseModel):
    group_id: int
    user_id: int
    user_name: str
    net_balance: Money


class SettlementSuggestion(BaseModel):
    from_user_id: int
    to_user_id: int
    amount: Money


class SettlementPlan(BaseModel):
    group_id: int
    suggestions: list[SettlementSuggestion] = []
    transaction_count: int = 0
