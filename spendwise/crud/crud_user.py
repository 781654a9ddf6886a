from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from typing import Optional
from uuid import uuid4
from datetime import datetime
import bcrypt

from spendwise.db.core import UserDB
from spendwise.models.user import UserCreate
from spendwise.logging_config import get_logger

logger = get_logger(__name__)


# ===== PASSWORD HASHING UTILITIES =====

def hash_password(password: str) -> str:
    """Hash a password with bcrypt"""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


# ===== DATABASE OPERATIONS =====

def create_db_user(db: Session, user_data: UserCreate) -> UserDB:
    """Create a new user in the database"""

    existing_username = db.query(UserDB).filter(UserDB.username == user_data.username).first()
    if existing_username:
        raise ValueError("Username already exists.")

    existing_email = db.query(UserDB).filter(UserDB.email == user_data.email).first()
    if existing_email:
        raise ValueError("Email already exists.")

    db_user = UserDB(
        id=uuid4(),
        email=user_data.email,
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError as e:
        # Lost a race against a concurrent registration
        db.rollback()
        message = str(e.orig).lower()
        if "username" in message:
            raise ValueError("Username already exists.") from e
        if "email" in message:
            raise ValueError("Email already exists.") from e
        raise ValueError("User creation failed due to database constraint") from e

    logger.info(f"Registered user {db_user.username} (id {db_user.db_id})")
    return db_user


def read_db_user(db: Session, user_id: int) -> Optional[UserDB]:
    """Read a user by primary key"""
    return db.query(UserDB).filter(UserDB.db_id == user_id).first()


def read_db_user_by_login(db: Session, identifier: str) -> Optional[UserDB]:
    """Find a user by username or email"""
    identifier = identifier.lower().strip()
    return db.query(UserDB).filter(
        or_(UserDB.username == identifier, UserDB.email == identifier)
    ).first()


def authenticate_user(db: Session, identifier: str, password: str) -> Optional[UserDB]:
    """Authenticate a user by username (or email) and password"""

    user = read_db_user_by_login(db, identifier)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    user.last_login_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    return user
