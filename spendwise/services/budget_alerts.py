"""
Budget alerts raised after an expense is recorded.

The evaluator compares a category's spending for one calendar month against
the user's budget for that month and inserts a warning notification once
spending reaches 80% of the limit, and another kind once it reaches 100%.
Every run evaluates from scratch, so repeated qualifying expenses each add a
new notification. Alerting is best-effort: `run_budget_alerts` never lets a
failure reach the request that recorded the expense.
"""
import os
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from spendwise.crud import crud_budget, crud_notification
from spendwise.crud.crud_analytics import get_category_spending
from spendwise.db.core import Category, NotificationDB, NotificationType
from spendwise.logging_config import get_logger

logger = get_logger(__name__)

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")

WARNING_THRESHOLD = Decimal("80")
EXCEEDED_THRESHOLD = Decimal("100")


def format_amount(amount: Decimal) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def check_budget_alerts(db: Session, user_id: int, category: Category, month: int, year: int) -> Optional[NotificationDB]:
    """
    Evaluate the (category, month, year) budget for a user and create a
    notification when a threshold is crossed.

    Returns the created notification, or None when there is no budget or
    spending is below 80%.
    """
    budget = crud_budget.read_db_budget_for_period(db, user_id=user_id, category=category, month=month, year=year)
    if not budget:
        return None

    category_name = Category(category).value
    total_spent = get_category_spending(db, user_id=user_id, category=category, month=month, year=year)
    budget_amount = budget.amount
    percentage = total_spent / budget_amount * 100

    if WARNING_THRESHOLD <= percentage < EXCEEDED_THRESHOLD:
        title = f"Budget Alert - {category_name}"
        message = (
            f"You've spent {percentage:.1f}% of your {category_name} budget this month "
            f"({format_amount(total_spent)} of {format_amount(budget_amount)})"
        )
    elif percentage >= EXCEEDED_THRESHOLD:
        title = f"Budget Exceeded - {category_name}"
        message = (
            f"You've exceeded your {category_name} budget by "
            f"{format_amount(total_spent - budget_amount)}"
        )
    else:
        return None

    notification = crud_notification.create_db_notification(
        db,
        user_id=user_id,
        title=title,
        message=message,
        notification_type=NotificationType.WARNING,
    )
    logger.info(f"{title} for user {user_id} ({percentage:.1f}% of {month}/{year} budget)")
    return notification


def run_budget_alerts(db: Session, user_id: int, category: Category, month: int, year: int) -> Optional[NotificationDB]:
    """Run check_budget_alerts, logging and discarding any failure."""
    try:
        return check_budget_alerts(db, user_id=user_id, category=category, month=month, year=year)
    except Exception:
        logger.exception(f"Error checking budget alerts for user {user_id}, category {category}")
        db.rollback()
        return None
