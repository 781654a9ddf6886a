from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from spendwise.auth import CurrentUser, get_current_user
from spendwise.crud import crud_transaction
from spendwise.db.core import Category, NotFoundError, TransactionType, get_db
from spendwise.models.transaction import TransactionCreate, TransactionUpdate, TransactionFilter, TransactionResponse
from spendwise.services.budget_alerts import run_budget_alerts

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
)


@router.get("/", response_model=List[TransactionResponse])
def read_transactions(
    transaction_type: Optional[TransactionType] = None,
    category: Optional[Category] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    List the current user's transactions, newest first.
    """
    filters = TransactionFilter(
        transaction_type=transaction_type,
        category=category,
        date_from=date_from,
        date_to=date_to
    )
    return crud_transaction.read_db_transactions(
        db, user_id=current_user.user_id, filters=filters, skip=skip, limit=limit
    )


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Record a transaction. Expenses are then checked against this month's
    budget for their category; alert failures never fail the request.
    """
    db_transaction = crud_transaction.create_db_transaction(db, current_user.user_id, transaction)
    response = TransactionResponse.model_validate(db_transaction)

    if transaction.transaction_type == TransactionType.EXPENSE:
        # Evaluated against the current month, whatever the transaction's own date
        today = datetime.now()
        run_budget_alerts(
            db,
            user_id=current_user.user_id,
            category=transaction.category,
            month=today.month,
            year=today.year
        )

    return response


@router.get("/{transaction_id}", response_model=TransactionResponse)
def read_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    db_transaction = crud_transaction.read_db_transaction(db, transaction_id=transaction_id, user_id=current_user.user_id)
    if not db_transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return db_transaction


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    transaction: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        return crud_transaction.update_db_transaction(
            db, transaction_id=transaction_id, user_id=current_user.user_id, transaction_updates=transaction
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found") from e
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        crud_transaction.delete_db_transaction(db, transaction_id=transaction_id, user_id=current_user.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found") from e
