from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from spendwise.auth import CurrentUser, get_current_user, login_session, logout_session
from spendwise.crud import crud_user
from spendwise.models import user as user_models
from spendwise.db.core import get_db

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=user_models.UserResponse, status_code=status.HTTP_201_CREATED)
def register(request: Request, user: user_models.UserCreate, db: Session = Depends(get_db)):
    """
    Create a new user and log them in.
    """
    try:
        db_user = crud_user.create_db_user(db=db, user_data=user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    login_session(request, db_user)
    return db_user


@router.post("/login", response_model=user_models.UserResponse)
def login(request: Request, user_login: user_models.UserLogin, db: Session = Depends(get_db)):
    """
    Authenticate by username or email and start a session.
    """
    user = crud_user.authenticate_user(db, identifier=user_login.username, password=user_login.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    login_session(request, user)
    return user


@router.post("/logout")
def logout(request: Request):
    logout_session(request)
    return {"message": "Logged out"}


@router.get("/user", response_model=user_models.UserResponse)
def read_current_user(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Return the logged-in user's profile.
    """
    return crud_user.read_db_user(db, user_id=current_user.user_id)
