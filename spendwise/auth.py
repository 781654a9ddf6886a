from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from spendwise.crud import crud_user
from spendwise.db.core import UserDB, get_db

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller, resolved once per request from the session."""
    user_id: int
    username: str


def login_session(request: Request, user: UserDB) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.db_id


def logout_session(request: Request) -> None:
    request.session.clear()


def get_current_user(request: Request, db: Session = Depends(get_db)) -> CurrentUser:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = crud_user.read_db_user(db, user_id=user_id)
    if user is None:
        # Session outlived its user
        request.session.clear()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    return CurrentUser(user_id=user.db_id, username=user.username)
