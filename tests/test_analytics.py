from datetime import datetime
from decimal import Decimal

import pytest

from spendwise.crud import crud_analytics
from spendwise.db.core import Category, TransactionType
from conftest import add_transaction, create_user, expense

NOW = datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def user(db_session):
    return create_user(db_session, "alice")


def test_month_bounds():
    assert crud_analytics.month_bounds(2, 2024) == (datetime(2024, 2, 1), datetime(2024, 2, 29, 23, 59, 59))
    assert crud_analytics.month_bounds(12, 2023)[1] == datetime(2023, 12, 31, 23, 59, 59)
    with pytest.raises(ValueError):
        crud_analytics.month_bounds(13, 2024)


def test_shift_month_crosses_years():
    assert crud_analytics.shift_month(2024, 1, -1) == (2023, 12)
    assert crud_analytics.shift_month(2023, 11, 3) == (2024, 2)
    assert crud_analytics.shift_month(2024, 3, -14) == (2023, 1)


def test_spending_by_category(db_session, user):
    other = create_user(db_session, "bob")
    add_transaction(db_session, user.db_id, "10.50", datetime(2024, 3, 1))
    add_transaction(db_session, user.db_id, "4.50", datetime(2024, 3, 31, 23, 59, 59))
    add_transaction(db_session, user.db_id, "30", datetime(2024, 3, 10), category=Category.TRAVEL)
    add_transaction(db_session, user.db_id, "999", datetime(2024, 3, 10), transaction_type=TransactionType.INCOME)
    add_transaction(db_session, user.db_id, "999", datetime(2024, 4, 1))
    add_transaction(db_session, other.db_id, "999", datetime(2024, 3, 10))

    spending = crud_analytics.get_spending_by_category(db_session, user.db_id, month=3, year=2024)
    assert spending == {"Food": Decimal("15.00"), "Travel": Decimal("30.00")}


def test_spending_by_category_empty_month(db_session, user):
    assert crud_analytics.get_spending_by_category(db_session, user.db_id, month=1, year=2024) == {}


def test_monthly_trends_sparse(db_session, user):
    other = create_user(db_session, "bob")
    add_transaction(db_session, user.db_id, "999", datetime(2023, 12, 15, 11, 59))
    add_transaction(db_session, user.db_id, "30", datetime(2023, 12, 20))
    add_transaction(db_session, user.db_id, "1000", datetime(2024, 1, 10), category=Category.INCOME,
                    transaction_type=TransactionType.INCOME)
    add_transaction(db_session, user.db_id, "200", datetime(2024, 1, 20))
    add_transaction(db_session, user.db_id, "50", datetime(2024, 3, 1))
    add_transaction(db_session, user.db_id, "999", datetime(2024, 3, 20))
    add_transaction(db_session, other.db_id, "777", datetime(2024, 1, 15), category=Category.INCOME,
                    transaction_type=TransactionType.INCOME)
    add_transaction(db_session, other.db_id, "777", datetime(2024, 2, 15))

    # Window is 2023-12-15 12:00 .. 2024-03-15 12:00
    trends = crud_analytics.get_monthly_trends(db_session, user.db_id, months_back=3, now=NOW)
    assert [(t.month, t.income, t.expenses) for t in trends] == [
        ("2023-12", Decimal("0"), Decimal("30")),
        ("2024-01", Decimal("1000"), Decimal("200")),
        ("2024-03", Decimal("0"), Decimal("50")),
    ]


def test_monthly_trends_fill_empty(db_session, user):
    add_transaction(db_session, user.db_id, "50", datetime(2024, 3, 1))

    trends = crud_analytics.get_monthly_trends(db_session, user.db_id, months_back=3, fill_empty=True, now=NOW)
    assert [t.month for t in trends] == ["2023-12", "2024-01", "2024-02", "2024-03"]
    assert trends[2].income == Decimal("0") and trends[2].expenses == Decimal("0")
    assert trends[3].expenses == Decimal("50")


def test_monthly_trends_clamps_start_day(db_session, user):
    add_transaction(db_session, user.db_id, "5", datetime(2024, 2, 29, 9, 0))
    add_transaction(db_session, user.db_id, "7", datetime(2024, 2, 29, 11, 0))

    # May 31 minus three months lands on Feb 29 at the same time of day
    trends = crud_analytics.get_monthly_trends(
        db_session, user.db_id, months_back=3, now=datetime(2024, 5, 31, 10, 0)
    )
    assert [(t.month, t.expenses) for t in trends] == [("2024-02", Decimal("7"))]


def test_monthly_trends_requires_positive_window(db_session, user):
    with pytest.raises(ValueError):
        crud_analytics.get_monthly_trends(db_session, user.db_id, months_back=0, now=NOW)


# ===== THROUGH THE API =====

def test_spending_endpoint_defaults_to_current_month(client):
    client.post("/transactions/", json=expense("12.25"))
    client.post("/transactions/", json=expense("7.75"))
    client.post("/transactions/", json=expense("5", "Bills"))

    spending = client.get("/analytics/spending").json()
    assert {k: Decimal(v) for k, v in spending.items()} == {"Food": Decimal("20"), "Bills": Decimal("5")}

    assert client.get("/analytics/spending", params={"month": 1, "year": 2001}).json() == {}
    assert client.get("/analytics/spending", params={"month": 0}).status_code == 422


def test_trends_endpoint(client):
    client.post("/transactions/", json=expense("40"))
    client.post("/transactions/", json={**expense("100", "Income"), "transaction_type": "income"})

    trends = client.get("/analytics/trends").json()
    assert len(trends) == 1
    assert trends[0]["month"] == datetime.now().strftime("%Y-%m")
    assert Decimal(trends[0]["income"]) == Decimal("100")
    assert Decimal(trends[0]["expenses"]) == Decimal("40")

    filled = client.get("/analytics/trends", params={"months": 12, "fill_empty": True}).json()
    assert len(filled) == 13
    assert filled[-1]["month"] == trends[0]["month"]

    assert client.get("/analytics/trends", params={"months": 0}).status_code == 422
    assert client.get("/analytics/trends", params={"months": 61}).status_code == 422
