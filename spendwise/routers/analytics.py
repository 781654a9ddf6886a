from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import date
from decimal import Decimal

from spendwise.auth import CurrentUser, get_current_user
from spendwise.crud import crud_analytics
from spendwise.db.core import get_db
from spendwise.models.analytics import MonthlyTrend

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
)


@router.get("/spending", response_model=Dict[str, Decimal])
def read_spending_by_category(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Expense totals per category for a month (default: the current month).
    Categories without spending are omitted.
    """
    today = date.today()
    return crud_analytics.get_spending_by_category(
        db, user_id=current_user.user_id, month=month or today.month, year=year or today.year
    )


@router.get("/trends", response_model=List[MonthlyTrend])
def read_monthly_trends(
    months: int = Query(6, ge=1, le=60),
    fill_empty: bool = False,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Income and expense totals per month, oldest month first. Months with no
    transactions are omitted unless fill_empty is set.
    """
    return crud_analytics.get_monthly_trends(
        db, user_id=current_user.user_id, months_back=months, fill_empty=fill_empty
    )
