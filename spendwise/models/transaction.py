from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from spendwise.db.core import Category, TransactionType

# ===== TRANSACTION PYDANTIC MODELS =====

MAX_AMOUNT = Decimal("9999999999.99")  # DECIMAL(12, 2)
CENT = Decimal("0.01")


def round_money(v: Optional[Decimal]) -> Optional[Decimal]:
    """Round to whole cents, halves away from zero (12.345 -> 12.35)"""
    if v is None:
        return v
    return v.quantize(CENT, rounding=ROUND_HALF_UP)


def positive_money(v: Optional[Decimal], message: str = 'Amount must be at least 0.01') -> Optional[Decimal]:
    """round_money, then reject anything that rounded down to zero"""
    v = round_money(v)
    if v is not None and v <= 0:
        raise ValueError(message)
    return v


class TransactionCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="Transaction amount")
    description: str = Field(..., min_length=1, max_length=500, description="Transaction description")
    category: Category = Field(..., description="Spending or income category")
    transaction_type: TransactionType = Field(..., description="income or expense")
    transaction_date: datetime = Field(..., description="When the transaction happened")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return positive_money(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Description cannot be blank')
        return v


class TransactionUpdate(BaseModel):
    """Update transaction - all fields optional"""
    amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[Category] = None
    transaction_type: Optional[TransactionType] = None
    transaction_date: Optional[datetime] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return positive_money(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Description cannot be blank')
        return v


class TransactionFilter(BaseModel):
    transaction_type: Optional[TransactionType] = None
    category: Optional[Category] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class TransactionResponse(BaseModel):
    """Transaction data returned to client"""
    id: int
    amount: Decimal
    description: str
    category: Category
    transaction_type: TransactionType
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
