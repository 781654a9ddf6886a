from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from spendwise.db.core import BudgetDB, Category, NotFoundError
from spendwise.models.budget import BudgetCreate, BudgetUpdate, BudgetProgress
from spendwise.crud.crud_analytics import get_category_spending


# ===== UTILITY FUNCTIONS =====

def duplicate_budget_message(category: Category, month: int, year: int) -> str:
    return f"Budget for {Category(category).value} in {month}/{year} already exists."


def _find_budget_for_period(db: Session, user_id: int, category: Category, month: int, year: int,
                            exclude_id: Optional[int] = None) -> Optional[BudgetDB]:
    query = db.query(BudgetDB).filter(
        BudgetDB.user_id == user_id,
        BudgetDB.category == category,
        BudgetDB.month == month,
        BudgetDB.year == year
    )
    if exclude_id is not None:
        query = query.filter(BudgetDB.id != exclude_id)
    return query.first()


# ===== DATABASE OPERATIONS =====

def create_db_budget(db: Session, user_id: int, budget_data: BudgetCreate) -> BudgetDB:
    """Create a monthly budget for one category"""

    if _find_budget_for_period(db, user_id, budget_data.category, budget_data.month, budget_data.year):
        raise ValueError(duplicate_budget_message(budget_data.category, budget_data.month, budget_data.year))

    db_budget = BudgetDB(
        user_id=user_id,
        category=budget_data.category,
        amount=budget_data.amount,
        month=budget_data.month,
        year=budget_data.year,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_budget)
        db.commit()
        db.refresh(db_budget)
        return db_budget
    except IntegrityError as e:
        db.rollback()
        raise ValueError(duplicate_budget_message(budget_data.category, budget_data.month, budget_data.year)) from e


def read_db_budget(db: Session, budget_id: int, user_id: int) -> Optional[BudgetDB]:
    """Read one of the user's budgets"""
    return db.query(BudgetDB).filter(
        BudgetDB.id == budget_id,
        BudgetDB.user_id == user_id
    ).first()


def read_db_budget_for_period(db: Session, user_id: int, category: Category, month: int, year: int) -> Optional[BudgetDB]:
    """The budget for a (category, month, year), if the user set one"""
    return _find_budget_for_period(db, user_id, category, month, year)


def read_db_budgets(db: Session, user_id: int, month: Optional[int] = None,
                    year: Optional[int] = None) -> List[BudgetDB]:
    """Read the user's budgets, optionally limited to one month"""

    query = db.query(BudgetDB).filter(BudgetDB.user_id == user_id)

    if month is not None:
        query = query.filter(BudgetDB.month == month)
    if year is not None:
        query = query.filter(BudgetDB.year == year)

    return query.order_by(BudgetDB.year.desc(), BudgetDB.month.desc(), BudgetDB.category).all()


def update_db_budget(db: Session, budget_id: int, user_id: int, budget_updates: BudgetUpdate) -> BudgetDB:
    """Update a budget the user owns"""

    db_budget = read_db_budget(db, budget_id, user_id)
    if not db_budget:
        raise NotFoundError(f"Budget with id {budget_id} not found")

    update_data = budget_updates.model_dump(exclude_unset=True)
    if not update_data:
        raise ValueError("No update fields provided.")
    null_fields = [field for field, value in update_data.items() if value is None]
    if null_fields:
        raise ValueError(f"Fields cannot be null: {', '.join(null_fields)}")

    category = update_data.get("category", db_budget.category)
    month = update_data.get("month", db_budget.month)
    year = update_data.get("year", db_budget.year)
    if _find_budget_for_period(db, user_id, category, month, year, exclude_id=db_budget.id):
        raise ValueError(duplicate_budget_message(category, month, year))

    for field, value in update_data.items():
        setattr(db_budget, field, value)

    db_budget.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(db_budget)
        return db_budget
    except IntegrityError as e:
        db.rollback()
        raise ValueError(duplicate_budget_message(category, month, year)) from e


def delete_db_budget(db: Session, budget_id: int, user_id: int) -> bool:
    """Delete a budget the user owns"""

    db_budget = read_db_budget(db, budget_id, user_id)
    if not db_budget:
        raise NotFoundError(f"Budget with id {budget_id} not found")

    db.delete(db_budget)
    db.commit()
    return True


# ===== PROGRESS =====

def get_budget_progress(db: Session, user_id: int, month: int, year: int) -> List[BudgetProgress]:
    """Spending against each of the user's budgets for one month"""

    progress = []
    for budget in read_db_budgets(db, user_id, month=month, year=year):
        spent = get_category_spending(db, user_id, budget.category, budget.month, budget.year)
        percentage_used = (spent / budget.amount * 100).quantize(Decimal("0.01"))

        if spent > budget.amount:
            status = "over_budget"
        elif percentage_used >= 80:
            status = "warning"
        else:
            status = "under_budget"

        progress.append(BudgetProgress(
            budget_id=budget.id,
            category=budget.category,
            month=budget.month,
            year=budget.year,
            budget_amount=budget.amount,
            spent_amount=spent,
            remaining_amount=budget.amount - spent,
            percentage_used=percentage_used,
            status=status
        ))

    return progress
