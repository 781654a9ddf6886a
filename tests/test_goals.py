from decimal import Decimal


def test_goal_lifecycle(client):
    response = client.post("/goals/", json={"title": "  Emergency Fund ", "target_amount": "5000"})
    assert response.status_code == 201
    goal = response.json()
    assert goal["title"] == "Emergency Fund"
    assert Decimal(goal["current_amount"]) == Decimal("0")
    assert goal["is_completed"] is False
    assert goal["target_date"] is None

    response = client.put(f"/goals/{goal['id']}", json={"current_amount": "5000", "is_completed": True})
    assert response.status_code == 200
    assert Decimal(response.json()["current_amount"]) == Decimal("5000")
    assert response.json()["is_completed"] is True

    assert [g["id"] for g in client.get("/goals/").json()] == [goal["id"]]
    assert client.delete(f"/goals/{goal['id']}").status_code == 204
    assert client.get(f"/goals/{goal['id']}").status_code == 404


def test_goal_validation(client):
    assert client.post("/goals/", json={"title": "Car", "target_amount": "0"}).status_code == 422
    assert client.post("/goals/", json={"title": "", "target_amount": "10"}).status_code == 422

    goal = client.post("/goals/", json={"title": "Car", "target_amount": "10"}).json()
    assert client.put(f"/goals/{goal['id']}", json={"current_amount": "-1"}).status_code == 422
    assert client.put(f"/goals/{goal['id']}", json={}).status_code == 400
    assert client.put(f"/goals/{goal['id']}", json={"title": None}).status_code == 400


def test_goal_target_date_can_be_cleared(client):
    goal = client.post("/goals/", json={
        "title": "Trip", "target_amount": "900", "target_date": "2030-06-01T00:00:00"
    }).json()
    assert goal["target_date"].startswith("2030-06-01")

    response = client.put(f"/goals/{goal['id']}", json={"target_date": None})
    assert response.status_code == 200
    assert response.json()["target_date"] is None


def test_goal_ownership(make_client):
    alice = make_client("alice")
    bob = make_client("bob")
    goal = alice.post("/goals/", json={"title": "Car", "target_amount": "10"}).json()

    assert bob.get("/goals/").json() == []
    assert bob.get(f"/goals/{goal['id']}").status_code == 404
    assert bob.put(f"/goals/{goal['id']}", json={"title": "Mine"}).status_code == 404
    assert bob.delete(f"/goals/{goal['id']}").status_code == 404


def test_goal_target_must_stay_positive_after_rounding(client):
    response = client.post("/goals/", json={"title": "Car", "target_amount": "0.004"})
    assert response.status_code == 422
    assert client.get("/goals/").json() == []

    goal = client.post("/goals/", json={"title": "Car", "target_amount": "10.005"}).json()
    assert Decimal(goal["target_amount"]) == Decimal("10.01")

    assert client.put(f"/goals/{goal['id']}", json={"target_amount": "0.004"}).status_code == 422
    response = client.put(f"/goals/{goal['id']}", json={"current_amount": "0.005"})
    assert response.status_code == 200
    assert Decimal(response.json()["current_amount"]) == Decimal("0.01")
