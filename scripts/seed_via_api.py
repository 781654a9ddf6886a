import subprocess
import time
import json
import os
import signal
import requests
import random
from decimal import Decimal
from datetime import datetime, timedelta
from faker import Faker

# --- Configuration ---
BASE_URL = os.environ.get("SPENDWISE_URL", "http://127.0.0.1:8000")
UVICORN_COMMAND = ["uvicorn", "spendwise.main:app"]

DEMO_USER = {
    "email": "demo@example.com",
    "username": "demo",
    "password": "DemoPassword123",
    "first_name": "Demo",
    "last_name": "User",
}

EXPENSE_CATEGORIES = [
    "Food", "Transportation", "Entertainment", "Bills", "Shopping", "Healthcare",
    "Education", "Travel", "Groceries", "Utilities", "Insurance", "Other",
]

fake = Faker()


# --- Helper Function for API Requests ---
def run_api_request(session: requests.Session, method: str, endpoint: str, data: dict = None):
    """Makes an API request on the logged-in session and returns the JSON response."""
    url = f"{BASE_URL}{endpoint}"
    try:
        # Decimal and datetime are not JSON serializable by default
        json_data = json.dumps(data, default=str) if data else None
        headers = {'Content-Type': 'application/json'} if json_data else None
        response = session.request(method, url, data=json_data, headers=headers, timeout=10)
        response.raise_for_status()
        if not response.text:
            return None
        return response.json()
    except requests.exceptions.HTTPError as e:
        print(f"Error: HTTP {e.response.status_code} for {url}\nResponse: {e.response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"An unexpected error occurred: {e}")
        return None


def random_amount(low: float, high: float) -> Decimal:
    return Decimal(str(random.uniform(low, high))).quantize(Decimal('0.01'))


def login_demo_user(session: requests.Session):
    print("--- Ensuring Demo User Exists ---")
    user = run_api_request(session, "POST", "/auth/login", {
        "username": DEMO_USER["username"], "password": DEMO_USER["password"]
    })
    if not user:
        user = run_api_request(session, "POST", "/auth/register", DEMO_USER)
    return user


def seed_budgets(session: requests.Session):
    print("--- Seeding Budgets ---")
    today = datetime.now()
    budgets = []
    for category in random.sample(EXPENSE_CATEGORIES, k=5):
        budget = run_api_request(session, "POST", "/budgets/", {
            "category": category,
            "amount": random_amount(300, 1200),
            "month": today.month,
            "year": today.year,
        })
        if budget:
            budgets.append(budget)
    return budgets


def seed_transactions(session: requests.Session, count: int = 150):
    print("--- Seeding Transactions ---")
    transactions = []
    for _ in range(count):
        is_income = random.random() < 0.15
        transaction = run_api_request(session, "POST", "/transactions/", {
            "amount": random_amount(1000, 5000) if is_income else random_amount(5, 250),
            "description": "Salary" if is_income else fake.bs().capitalize(),
            "category": "Income" if is_income else random.choice(EXPENSE_CATEGORIES),
            "transaction_type": "income" if is_income else "expense",
            "transaction_date": fake.date_time_between(start_date="-6M", end_date="now"),
        })
        if transaction:
            transactions.append(transaction)
    return transactions


def seed_goals(session: requests.Session):
    print("--- Seeding Goals ---")
    for title in ["Emergency Fund", "Vacation", "New Laptop"]:
        goal = run_api_request(session, "POST", "/goals/", {
            "title": title,
            "target_amount": random_amount(1000, 10000),
            "target_date": datetime.now() + timedelta(days=random.randint(60, 720)),
        })
        if goal:
            run_api_request(session, "PUT", f"/goals/{goal['id']}", {
                "current_amount": (Decimal(goal["target_amount"]) * Decimal(str(random.uniform(0, 0.8)))).quantize(Decimal('0.01'))
            })


def main():
    """Starts the server, seeds demo data through the API, and shuts down the server."""

    print("--- Migrating database with Alembic ---")
    try:
        subprocess.run(["alembic", "upgrade", "head"], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        print(f"Error during database migration: {e}")
        if hasattr(e, 'stderr') and e.stderr:
            print(e.stderr)
        return

    server_process = subprocess.Popen(UVICORN_COMMAND, env={**os.environ, "AUTO_CREATE_TABLES": "false"})
    time.sleep(5)
    print(f"Server started with PID: {server_process.pid}")

    try:
        with requests.Session() as session:
            if not login_demo_user(session):
                print("Could not log in the demo user; aborting.")
                return

            seed_budgets(session)
            transactions = seed_transactions(session)
            seed_goals(session)

            notifications = run_api_request(session, "GET", "/notifications/") or []
            print(f"\n--- Seeding Complete: {len(transactions)} transactions, {len(notifications)} notifications ---")

    finally:
        if server_process:
            print("\n--- Shutting down server ---")
            os.kill(server_process.pid, signal.SIGTERM)
            server_process.wait()
            print("Server shut down.")


if __name__ == "__main__":
    main()
