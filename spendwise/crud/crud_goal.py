from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from spendwise.db.core import GoalDB, NotFoundError
from spendwise.models.goal import GoalCreate, GoalUpdate


def create_db_goal(db: Session, user_id: int, goal_data: GoalCreate) -> GoalDB:
    """Create a savings goal with no progress yet"""

    db_goal = GoalDB(
        user_id=user_id,
        title=goal_data.title,
        target_amount=goal_data.target_amount,
        current_amount=Decimal("0.00"),
        target_date=goal_data.target_date,
        is_completed=False,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def read_db_goal(db: Session, goal_id: int, user_id: int) -> Optional[GoalDB]:
    return db.query(GoalDB).filter(
        GoalDB.id == goal_id,
        GoalDB.user_id == user_id
    ).first()


def read_db_goals(db: Session, user_id: int) -> List[GoalDB]:
    """Read the user's goals, newest first"""
    return db.query(GoalDB).filter(GoalDB.user_id == user_id).order_by(
        desc(GoalDB.created_at), desc(GoalDB.id)
    ).all()


def update_db_goal(db: Session, goal_id: int, user_id: int, goal_updates: GoalUpdate) -> GoalDB:
    """Update a goal the user owns"""

    db_goal = read_db_goal(db, goal_id, user_id)
    if not db_goal:
        raise NotFoundError(f"Goal with id {goal_id} not found")

    update_data = goal_updates.model_dump(exclude_unset=True)
    if not update_data:
        raise ValueError("No update fields provided.")
    # target_date is the only nullable field
    null_fields = [field for field, value in update_data.items() if value is None and field != "target_date"]
    if null_fields:
        raise ValueError(f"Fields cannot be null: {', '.join(null_fields)}")

    for field, value in update_data.items():
        setattr(db_goal, field, value)

    db_goal.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_goal)
    return db_goal


def delete_db_goal(db: Session, goal_id: int, user_id: int) -> bool:
    """Delete a goal the user owns"""

    db_goal = read_db_goal(db, goal_id, user_id)
    if not db_goal:
        raise NotFoundError(f"Goal with id {goal_id} not found")

    db.delete(db_goal)
    db.commit()
    return True
