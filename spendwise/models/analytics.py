from pydantic import BaseModel
from decimal import Decimal


class MonthlyTrend(BaseModel):
    """Income and expense totals for one calendar month"""
    month: str  # YYYY-MM
    income: Decimal
    expenses: Decimal
