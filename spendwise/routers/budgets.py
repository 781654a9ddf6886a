from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from spendwise.auth import CurrentUser, get_current_user
from spendwise.crud import crud_budget
from spendwise.models import budget as budget_models
from spendwise.db.core import get_db, NotFoundError

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)


@router.post("/", response_model=budget_models.BudgetResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: budget_models.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Create a monthly budget for one category.
    """
    try:
        return crud_budget.create_db_budget(db=db, user_id=current_user.user_id, budget_data=budget)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/", response_model=List[budget_models.BudgetResponse])
def read_budgets(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Retrieve the current user's budgets, optionally for a single month.
    """
    return crud_budget.read_db_budgets(db=db, user_id=current_user.user_id, month=month, year=year)


@router.get("/progress", response_model=List[budget_models.BudgetProgress])
def read_budget_progress(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Spending against each budget of a month (default: the current month).
    """
    today = date.today()
    return crud_budget.get_budget_progress(
        db=db, user_id=current_user.user_id, month=month or today.month, year=year or today.year
    )


@router.get("/{budget_id}", response_model=budget_models.BudgetResponse)
def read_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    db_budget = crud_budget.read_db_budget(db=db, budget_id=budget_id, user_id=current_user.user_id)
    if db_budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return db_budget


@router.put("/{budget_id}", response_model=budget_models.BudgetResponse)
def update_budget(
    budget_id: int,
    budget: budget_models.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Update a budget's category, period or amount.
    """
    try:
        return crud_budget.update_db_budget(db=db, budget_id=budget_id, user_id=current_user.user_id, budget_updates=budget)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        crud_budget.delete_db_budget(db=db, budget_id=budget_id, user_id=current_user.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
