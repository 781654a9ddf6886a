from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spendwise.crud import crud_user
from spendwise.db.core import Base, Category, TransactionDB, TransactionType, get_db
from spendwise.main import app
from spendwise.models.user import UserCreate

PASSWORD = "Secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    database = TestingSession()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSession()
    yield session
    session.close()


def user_payload(username: str) -> dict:
    return {
        "email": f"{username}@example.com",
        "username": username,
        "password": PASSWORD,
        "first_name": username.title(),
        "last_name": "Tester",
    }


@pytest.fixture
def make_client():
    """Build a TestClient logged in as a freshly registered user; each one keeps its own cookies."""
    clients = []

    def _make(username: str = "alice", **kwargs) -> TestClient:
        client = TestClient(app, **kwargs)
        response = client.post("/auth/register", json=user_payload(username))
        assert response.status_code == 201, response.text
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client("alice")


def create_user(db, username: str):
    return crud_user.create_db_user(db, UserCreate(**user_payload(username)))


def add_transaction(db, user_id: int, amount: str, when: datetime,
                    category: Category = Category.FOOD,
                    transaction_type: TransactionType = TransactionType.EXPENSE) -> TransactionDB:
    transaction = TransactionDB(
        user_id=user_id,
        amount=Decimal(amount),
        description="test",
        category=category,
        transaction_type=transaction_type,
        transaction_date=when,
    )
    db.add(transaction)
    db.commit()
    return transaction


def expense(amount: str, category: str = "Food", when: datetime = None) -> dict:
    return {
        "amount": amount,
        "description": "Dinner",
        "category": category,
        "transaction_type": "expense",
        "transaction_date": (when or datetime.now()).isoformat(),
    }
