from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from spendwise.models.transaction import MAX_AMOUNT, positive_money, round_money

# ===== GOAL PYDANTIC MODELS =====


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="What the user is saving for")
    target_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="Amount to reach")
    target_date: Optional[datetime] = Field(None, description="Optional deadline")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Title cannot be blank')
        return v

    @field_validator('target_amount')
    @classmethod
    def validate_target_amount(cls, v: Decimal) -> Decimal:
        return positive_money(v, 'Target amount must be greater than zero')


class GoalUpdate(BaseModel):
    """Progress is entered by hand; nothing derives it from transactions"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    target_amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT)
    current_amount: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    target_date: Optional[datetime] = None
    is_completed: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v

    @field_validator('target_amount')
    @classmethod
    def validate_target_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return positive_money(v, 'Target amount must be greater than zero')

    @field_validator('current_amount')
    @classmethod
    def validate_current_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return round_money(v)


class GoalResponse(BaseModel):
    id: int
    title: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[datetime]
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
