from fastapi.testclient import TestClient

from dependencies import get_expense_service
from errors import ServerError
from main import app


def test_home(client):
    assert client.get("/").json() == {
        "message": "Welcome to Personal Budget Tracker API"
    }


def test_unknown_route_uses_message_body(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_malformed_json_is_bad_request(client, ann_headers):
    response = client.post(
        "/expenses",
        content="{not json",
        headers={**ann_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid JSON body"}


def test_unexpected_failure_is_generic_500(client, ann_headers, caplog):
    def broken_service():
        raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_expense_service] = broken_service
    with TestClient(app, raise_server_exceptions=False) as raw_client:
        response = raw_client.get("/expenses", headers=ann_headers)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    assert "hunter2" not in response.text
    assert "Unhandled error on GET /expenses" in caplog.text


def test_app_errors_carry_their_status(client, ann_headers):
    def unavailable_service():
        raise ServerError("Expense store is unavailable")

    app.dependency_overrides[get_expense_service] = unavailable_service
    response = client.get("/expenses", headers=ann_headers)

    assert response.status_code == 500
    assert response.json() == {"message": "Expense store is unavailable"}
