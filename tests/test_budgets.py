def create_budget(client, headers, **overrides):
    payload = {"name": "Groceries", "budget": 300, "description": "Monthly"}
    payload.update(overrides)
    return client.post("/budgets", json=payload, headers=headers)


def test_create_and_get_budget(client, ann, ann_headers):
    response = create_budget(client, ann_headers, name="  Groceries ")
    assert response.status_code == 201
    budget = response.json()
    assert budget["name"] == "Groceries"
    assert budget["owner_id"] == ann["user"]["id"]
    assert budget["spent"] == 0
    assert budget["remaining"] == 300
    assert budget["items"] == []

    fetched = client.get(f"/budgets/{budget['id']}", headers=ann_headers)
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Groceries"


def test_budget_validation(client, ann_headers):
    assert create_budget(client, ann_headers, budget=-1).status_code == 400
    assert create_budget(client, ann_headers, name=" ").status_code == 400


def test_items_track_spent_and_remaining(client, ann_headers):
    budget = create_budget(client, ann_headers).json()
    url = f"/budgets/{budget['id']}/items"

    response = client.post(
        url, json={"name": "Milk", "cost": 4.5}, headers=ann_headers
    )
    assert response.status_code == 201
    client.post(url, json={"name": "Bread", "cost": 5.5}, headers=ann_headers)

    body = client.get(f"/budgets/{budget['id']}", headers=ann_headers).json()
    assert [item["name"] for item in body["items"]] == ["Milk", "Bread"]
    assert body["spent"] == 10
    assert body["remaining"] == 290

    milk_id = body["items"][0]["id"]
    response = client.delete(f"{url}/{milk_id}", headers=ann_headers)
    assert response.status_code == 200
    assert response.json()["spent"] == 5.5

    missing = client.delete(f"{url}/{milk_id}", headers=ann_headers)
    assert missing.status_code == 404
    assert missing.json() == {"message": "Budget item not found"}


def test_item_cost_cannot_be_negative(client, ann_headers):
    budget = create_budget(client, ann_headers).json()
    response = client.post(
        f"/budgets/{budget['id']}/items",
        json={"name": "Refund", "cost": -2},
        headers=ann_headers,
    )
    assert response.status_code == 400


def test_partial_update(client, ann_headers):
    budget = create_budget(client, ann_headers).json()
    response = client.put(
        f"/budgets/{budget['id']}", json={"budget": 450}, headers=ann_headers
    )
    assert response.status_code == 200
    assert response.json()["budget"] == 450
    assert response.json()["name"] == "Groceries"


def test_delete_budget_removes_it(client, ann_headers):
    budget = create_budget(client, ann_headers).json()
    client.post(
        f"/budgets/{budget['id']}/items",
        json={"name": "Milk", "cost": 4},
        headers=ann_headers,
    )
    response = client.delete(f"/budgets/{budget['id']}", headers=ann_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Budget deleted successfully"
    assert body["budget"]["spent"] == 4
    assert client.get(f"/budgets/{budget['id']}", headers=ann_headers).status_code == 404
    assert client.get("/budgets", headers=ann_headers).json() == []


def test_budgets_are_owner_scoped(client, ann_headers, bob_headers):
    budget = create_budget(client, ann_headers).json()
    url = f"/budgets/{budget['id']}"

    assert client.get("/budgets", headers=bob_headers).json() == []
    assert client.get(url, headers=bob_headers).status_code == 404
    assert client.put(url, json={"budget": 1}, headers=bob_headers).status_code == 404
    assert (
        client.post(
            f"{url}/items", json={"name": "x", "cost": 1}, headers=bob_headers
        ).status_code
        == 404
    )
    assert client.delete(url, headers=bob_headers).status_code == 404
    assert client.get(url, headers=ann_headers).status_code == 200


def test_list_newest_first(client, ann_headers):
    first = create_budget(client, ann_headers, name="First").json()
    second = create_budget(client, ann_headers, name="Second").json()
    listed = client.get("/budgets", headers=ann_headers).json()
    assert [b["id"] for b in listed] == [second["id"], first["id"]]


def test_boolean_budget_is_rejected(client, ann_headers):
    response = create_budget(client, ann_headers, budget=True)
    assert response.status_code == 400
    assert response.json() == {"message": "Budget must be a number"}
