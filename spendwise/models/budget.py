from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from spendwise.db.core import Category
from spendwise.models.transaction import MAX_AMOUNT, positive_money

BUDGET_AMOUNT_MESSAGE = 'Budget amount must be greater than zero'

# ===== BUDGET PYDANTIC MODELS =====


class BudgetCreate(BaseModel):
    category: Category = Field(..., description="Category this budget limits")
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="Monthly spending limit")
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")
    year: int = Field(..., ge=2000, le=2100, description="Calendar year")

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        return positive_money(v, BUDGET_AMOUNT_MESSAGE)


class BudgetUpdate(BaseModel):
    category: Optional[Category] = None
    amount: Optional[Decimal] = Field(None, gt=0, le=MAX_AMOUNT)
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return positive_money(v, BUDGET_AMOUNT_MESSAGE)


class BudgetResponse(BaseModel):
    id: int
    category: Category
    amount: Decimal
    month: int
    year: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BudgetProgress(BaseModel):
    """Spending against one budget for its month"""
    budget_id: int
    category: Category
    month: int
    year: int
    budget_amount: Decimal
    spent_amount: Decimal
    remaining_amount: Decimal
    percentage_used: Decimal
    status: str  # "over_budget", "warning", "under_budget"
