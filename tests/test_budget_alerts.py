from datetime import datetime
from decimal import Decimal

import pytest

from spendwise.db.core import Category, NotificationDB, NotificationType, TransactionType
from spendwise.models.budget import BudgetCreate
from spendwise.crud import crud_budget
from spendwise.services import budget_alerts
from conftest import add_transaction, create_user, expense


@pytest.fixture
def user(db_session):
    return create_user(db_session, "alice")


def set_budget(db, user_id: int, amount: str, category: Category = Category.FOOD, now: datetime = None):
    now = now or datetime.now()
    return crud_budget.create_db_budget(
        db, user_id, BudgetCreate(category=category, amount=Decimal(amount), month=now.month, year=now.year)
    )


def check(db, user_id: int, category: Category = Category.FOOD):
    now = datetime.now()
    return budget_alerts.check_budget_alerts(db, user_id=user_id, category=category, month=now.month, year=now.year)


def test_no_budget_means_no_alert(db_session, user):
    add_transaction(db_session, user.db_id, "5000", datetime.now())
    assert check(db_session, user.db_id) is None
    assert db_session.query(NotificationDB).count() == 0


def test_below_warning_threshold(db_session, user):
    set_budget(db_session, user.db_id, "100")
    add_transaction(db_session, user.db_id, "79.99", datetime.now())
    assert check(db_session, user.db_id) is None


def test_warning_at_exactly_eighty_percent(db_session, user):
    set_budget(db_session, user.db_id, "100")
    add_transaction(db_session, user.db_id, "80", datetime.now())
    notification = check(db_session, user.db_id)
    assert notification.title == "Budget Alert - Food"
    assert "80.0%" in notification.message
    assert notification.notification_type == NotificationType.WARNING
    assert notification.is_read is False


def test_exceeded_at_exactly_one_hundred_percent(db_session, user):
    set_budget(db_session, user.db_id, "100")
    add_transaction(db_session, user.db_id, "100", datetime.now())
    notification = check(db_session, user.db_id)
    assert notification.title == "Budget Exceeded - Food"
    assert notification.message == (
        f"You've exceeded your Food budget by {budget_alerts.format_amount(Decimal('0'))}"
    )


def test_only_expenses_of_the_month_and_category_count(db_session, user):
    now = datetime.now()
    other = create_user(db_session, "bob")
    set_budget(db_session, user.db_id, "100")
    add_transaction(db_session, user.db_id, "50", now)
    add_transaction(db_session, user.db_id, "500", now, transaction_type=TransactionType.INCOME)
    add_transaction(db_session, user.db_id, "500", now, category=Category.TRAVEL)
    add_transaction(db_session, user.db_id, "500", datetime(2000, 1, 15))
    add_transaction(db_session, other.db_id, "500", now)
    assert check(db_session, user.db_id) is None


def test_format_amount_groups_thousands():
    assert budget_alerts.format_amount(Decimal("1234567.5")).endswith("1,234,567.50")


def test_run_budget_alerts_swallows_failures(db_session, user, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(budget_alerts, "check_budget_alerts", boom)
    now = datetime.now()
    result = budget_alerts.run_budget_alerts(db_session, user.db_id, Category.FOOD, now.month, now.year)
    assert result is None


# ===== THROUGH THE API =====

def test_expense_raises_warning_then_exceeded(client):
    now = datetime.now()
    client.post("/budgets/", json={"category": "Food", "amount": "1000", "month": now.month, "year": now.year})

    assert client.post("/transactions/", json=expense("850")).status_code == 201
    notifications = client.get("/notifications/").json()
    assert len(notifications) == 1
    assert notifications[0]["title"] == "Budget Alert - Food"
    assert notifications[0]["message"] == (
        "You've spent 85.0% of your Food budget this month "
        f"({budget_alerts.format_amount(Decimal('850'))} of {budget_alerts.format_amount(Decimal('1000'))})"
    )
    assert notifications[0]["notification_type"] == "warning"

    assert client.post("/transactions/", json=expense("200")).status_code == 201
    notifications = client.get("/notifications/").json()
    assert len(notifications) == 2
    assert notifications[0]["title"] == "Budget Exceeded - Food"
    assert notifications[0]["message"].endswith(budget_alerts.format_amount(Decimal("50")))


def test_every_qualifying_expense_adds_a_notification(client):
    now = datetime.now()
    client.post("/budgets/", json={"category": "Food", "amount": "100", "month": now.month, "year": now.year})
    client.post("/transactions/", json=expense("81"))
    client.post("/transactions/", json=expense("1"))
    titles = [n["title"] for n in client.get("/notifications/").json()]
    assert titles == ["Budget Alert - Food", "Budget Alert - Food"]


def test_income_never_alerts(client):
    now = datetime.now()
    client.post("/budgets/", json={"category": "Income", "amount": "100", "month": now.month, "year": now.year})
    client.post("/transactions/", json={**expense("500", "Income"), "transaction_type": "income"})
    assert client.get("/notifications/").json() == []


def test_alert_uses_current_month_budget(client):
    now = datetime.now()
    client.post("/budgets/", json={"category": "Food", "amount": "100", "month": now.month, "year": now.year})
    # Dated years ago, so it doesn't count toward this month's spending
    client.post("/transactions/", json=expense("500", when=datetime(2001, 5, 5)))
    assert client.get("/notifications/").json() == []


def test_alert_failure_does_not_fail_the_request(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("alerts unavailable")

    monkeypatch.setattr(budget_alerts, "check_budget_alerts", boom)
    response = client.post("/transactions/", json=expense("10"))
    assert response.status_code == 201
    assert len(client.get("/transactions/").json()) == 1


def test_deleting_transaction_keeps_notifications(client):
    now = datetime.now()
    client.post("/budgets/", json={"category": "Food", "amount": "100", "month": now.month, "year": now.year})
    created = client.post("/transactions/", json=expense("90")).json()
    assert client.delete(f"/transactions/{created['id']}").status_code == 204
    assert len(client.get("/notifications/").json()) == 1
