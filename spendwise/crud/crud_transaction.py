from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import Optional, List
from datetime import datetime

from spendwise.db.core import TransactionDB, NotFoundError
from spendwise.models.transaction import TransactionCreate, TransactionUpdate, TransactionFilter
from spendwise.logging_config import get_logger

logger = get_logger(__name__)


# ===== DATABASE OPERATIONS =====

def create_db_transaction(db: Session, user_id: int, transaction_data: TransactionCreate) -> TransactionDB:
    """Create a new transaction and commit it"""

    db_transaction = TransactionDB(
        user_id=user_id,
        amount=transaction_data.amount,
        description=transaction_data.description,
        category=transaction_data.category,
        transaction_type=transaction_data.transaction_type,
        transaction_date=transaction_data.transaction_date,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    db.add(db_transaction)
    db.commit()
    db.refresh(db_transaction)

    logger.debug(f"Created {db_transaction.transaction_type.value} transaction {db_transaction.id} for user {user_id}")
    return db_transaction


def read_db_transaction(db: Session, transaction_id: int, user_id: int) -> Optional[TransactionDB]:
    """Read one of the user's transactions"""
    return db.query(TransactionDB).filter(
        TransactionDB.id == transaction_id,
        TransactionDB.user_id == user_id
    ).first()


def read_db_transactions(db: Session, user_id: int, filters: Optional[TransactionFilter] = None,
                         skip: int = 0, limit: int = 50) -> List[TransactionDB]:
    """Read the user's transactions, newest first, with filtering and pagination"""

    query = db.query(TransactionDB).filter(TransactionDB.user_id == user_id)

    if filters:
        if filters.transaction_type:
            query = query.filter(TransactionDB.transaction_type == filters.transaction_type)

        if filters.category:
            query = query.filter(TransactionDB.category == filters.category)

        if filters.date_from:
            query = query.filter(TransactionDB.transaction_date >= filters.date_from)

        if filters.date_to:
            query = query.filter(TransactionDB.transaction_date <= filters.date_to)

    return query.order_by(
        desc(TransactionDB.transaction_date), desc(TransactionDB.id)
    ).offset(skip).limit(limit).all()


def update_db_transaction(db: Session, transaction_id: int, user_id: int,
                          transaction_updates: TransactionUpdate) -> TransactionDB:
    """Update a transaction the user owns"""

    db_transaction = read_db_transaction(db, transaction_id, user_id)
    if not db_transaction:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")

    update_data = transaction_updates.model_dump(exclude_unset=True)
    if not update_data:
        raise ValueError("No update fields provided.")
    null_fields = [field for field, value in update_data.items() if value is None]
    if null_fields:
        raise ValueError(f"Fields cannot be null: {', '.join(null_fields)}")

    for field, value in update_data.items():
        setattr(db_transaction, field, value)

    db_transaction.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_transaction)
    return db_transaction


def delete_db_transaction(db: Session, transaction_id: int, user_id: int) -> bool:
    """
    Delete a transaction the user owns.

    Notifications raised earlier because of it are left as they are.
    """
    db_transaction = read_db_transaction(db, transaction_id, user_id)
    if not db_transaction:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")

    db.delete(db_transaction)
    db.commit()
    return True
