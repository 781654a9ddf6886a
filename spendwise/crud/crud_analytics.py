from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Optional, Tuple
from datetime import datetime
from decimal import Decimal
import calendar

from spendwise.db.core import TransactionDB, TransactionType, Category
from spendwise.models.analytics import MonthlyTrend

ZERO = Decimal("0.00")


# ===== DATE HELPERS =====

def month_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """First and last second of a calendar month, both inclusive."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day, 23, 59, 59)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by delta months, either direction."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


# ===== AGGREGATION QUERIES =====

def get_category_spending(db: Session, user_id: int, category: Category, month: int, year: int) -> Decimal:
    """Total expense amount for one category in a calendar month"""

    start, end = month_bounds(month, year)
    amounts = db.query(TransactionDB.amount).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.category == category,
        TransactionDB.transaction_type == TransactionType.EXPENSE,
        TransactionDB.transaction_date >= start,
        TransactionDB.transaction_date <= end,
    ).all()

    return sum((amount for (amount,) in amounts), ZERO)


def get_spending_by_category(db: Session, user_id: int, month: int, year: int) -> Dict[str, Decimal]:
    """
    Expense totals grouped by category for one calendar month.

    Categories without spending are left out of the result.
    """
    start, end = month_bounds(month, year)
    rows = db.query(
        TransactionDB.category,
        func.sum(TransactionDB.amount).label("total"),
    ).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.transaction_type == TransactionType.EXPENSE,
        TransactionDB.transaction_date >= start,
        TransactionDB.transaction_date <= end,
    ).group_by(TransactionDB.category).all()

    return {Category(category).value: Decimal(total).quantize(ZERO) for category, total in rows if total is not None}


def get_monthly_trends(db: Session, user_id: int, months_back: int, fill_empty: bool = False,
                       now: Optional[datetime] = None) -> List[MonthlyTrend]:
    """
    Income and expense totals per month for the last `months_back` months.

    The window runs from `now` minus `months_back` months (same day and time,
    the day clamped to the shorter month) up to `now`, so it touches
    `months_back + 1` calendar months. Months without any transaction are
    omitted unless `fill_empty` is set, in which case every month the window
    touches is reported, with zero totals where nothing happened.
    """
    if months_back < 1:
        raise ValueError("months_back must be at least 1")

    now = now or datetime.now()
    start_year, start_month = shift_month(now.year, now.month, -months_back)
    start_day = min(now.day, calendar.monthrange(start_year, start_month)[1])
    start = now.replace(year=start_year, month=start_month, day=start_day)

    rows = db.query(
        TransactionDB.transaction_date,
        TransactionDB.transaction_type,
        TransactionDB.amount,
    ).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.transaction_date >= start,
        TransactionDB.transaction_date <= now,
    ).all()

    totals: Dict[str, Dict[str, Decimal]] = {}
    if fill_empty:
        for offset in range(months_back + 1):
            year, month = shift_month(start_year, start_month, offset)
            totals[f"{year:04d}-{month:02d}"] = {"income": ZERO, "expenses": ZERO}

    for transaction_date, transaction_type, amount in rows:
        bucket = totals.setdefault(month_key(transaction_date), {"income": ZERO, "expenses": ZERO})
        if transaction_type == TransactionType.INCOME:
            bucket["income"] += amount
        else:
            bucket["expenses"] += amount

    return [
        MonthlyTrend(month=key, income=values["income"], expenses=values["expenses"])
        for key, values in sorted(totals.items())
    ]
