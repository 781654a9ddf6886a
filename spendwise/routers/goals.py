from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from spendwise.auth import CurrentUser, get_current_user
from spendwise.crud import crud_goal
from spendwise.models import goal as goal_models
from spendwise.db.core import get_db, NotFoundError

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
)


@router.post("/", response_model=goal_models.GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal: goal_models.GoalCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return crud_goal.create_db_goal(db=db, user_id=current_user.user_id, goal_data=goal)


@router.get("/", response_model=List[goal_models.GoalResponse])
def read_goals(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return crud_goal.read_db_goals(db=db, user_id=current_user.user_id)


@router.get("/{goal_id}", response_model=goal_models.GoalResponse)
def read_goal(
    goal_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    db_goal = crud_goal.read_db_goal(db=db, goal_id=goal_id, user_id=current_user.user_id)
    if db_goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return db_goal


@router.put("/{goal_id}", response_model=goal_models.GoalResponse)
def update_goal(
    goal_id: int,
    goal: goal_models.GoalUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """
    Update a goal, including its manually tracked progress.
    """
    try:
        return crud_goal.update_db_goal(db=db, goal_id=goal_id, user_id=current_user.user_id, goal_updates=goal)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(
    goal_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    try:
        crud_goal.delete_db_goal(db=db, goal_id=goal_id, user_id=current_user.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
