import datetime as dt
import re

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def _required_text(value, label):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def _not_bool(value, label):
    # pydantic would coerce true/false to 1.0/0.0
    if isinstance(value, bool):
        raise ValueError(f"{label} must be a number")
    return value


def _positive(value, label):
    if value is not None and value <= 0:
        raise ValueError(f"{label} must be a positive number")
    return value


def _non_negative(value, label):
    if value is not None and value < 0:
        raise ValueError(f"{label} cannot be negative")
    return value


# ----------------------------------------------------------------------------
# Auth
# ----------------------------------------------------------------------------
class UserRegister(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        return _required_text(value, "Name")

    @field_validator("email")
    @classmethod
    def email_shape(cls, value):
        if not re.fullmatch(EMAIL_PATTERN, value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value):
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    user: UserOut


class VerifyResponse(BaseModel):
    valid: bool = True
    user: UserOut


# ----------------------------------------------------------------------------
# Expenses
# ----------------------------------------------------------------------------
class ExpenseFields(BaseModel):
    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def amount_is_number(cls, value):
        return _not_bool(value, "Amount")

    @field_validator("amount", check_fields=False)
    @classmethod
    def amount_positive(cls, value):
        return _positive(value, "Amount")

    @field_validator("description", "category", check_fields=False)
    @classmethod
    def text_required(cls, value, info):
        return _required_text(value, info.field_name.capitalize())


class ExpenseCreate(ExpenseFields):
    amount: float = Field(..., allow_inf_nan=False)
    description: str
    category: str
    date: dt.date


class ExpenseUpdate(ExpenseFields):
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[dt.date] = None


class ExpenseOut(BaseModel):
    id: int
    owner_id: int
    amount: float
    description: str
    category: str
    date: dt.date
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseDeleted(BaseModel):
    message: str
    expense: ExpenseOut


class WeeklySummary(BaseModel):
    week_start: datetime
    week_end: datetime
    total: float
    count: int
    daily_average: float
    top_category: Optional[str] = None


# ----------------------------------------------------------------------------
# Budget tables
# ----------------------------------------------------------------------------
class BudgetFields(BaseModel):
    @field_validator("budget", "cost", mode="before", check_fields=False)
    @classmethod
    def amount_is_number(cls, value, info):
        return _not_bool(value, info.field_name.capitalize())

    @field_validator("name", check_fields=False)
    @classmethod
    def name_required(cls, value):
        return _required_text(value, "Name")

    @field_validator("budget", "cost", check_fields=False)
    @classmethod
    def not_negative(cls, value, info):
        return _non_negative(value, info.field_name.capitalize())


class BudgetCreate(BudgetFields):
    name: str
    budget: float = Field(..., allow_inf_nan=False)
    description: Optional[str] = None


class BudgetUpdate(BudgetFields):
    name: Optional[str] = None
    budget: Optional[float] = Field(None, allow_inf_nan=False)
    description: Optional[str] = None


class BudgetItemCreate(BudgetFields):
    name: str
    cost: float = Field(..., allow_inf_nan=False)
    description: Optional[str] = None


class BudgetItemOut(BaseModel):
    id: int
    name: str
    cost: float
    description: Optional[str] = None

    class Config:
        from_attributes = True


class BudgetOut(BaseModel):
    id: int
    owner_id: int
    name: str
    budget: float
    description: Optional[str] = None
    spent: float
    remaining: float
    items: list[BudgetItemOut] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BudgetDeleted(BaseModel):
    message: str
    budget: BudgetOut
