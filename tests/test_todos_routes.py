from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.database import get_db
from app.main import app
from app.models.todo import Todo


def _create(client, headers, title, description=None):
    payload = {"title": title}
    if description is not None:
        payload["description"] = description
    resp = client.post("/api/todos", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["todo"]


def test_admin_creates_todo(client, register):
    admin, headers = register("admin", role="admin")
    resp = client.post("/api/todos", json={"title": "Buy milk"}, headers=headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Todo created successfully"
    todo = body["todo"]
    assert todo["title"] == "Buy milk"
    assert todo["description"] == ""
    assert todo["completed"] is False
    assert todo["owner_id"] == admin["id"]
    assert todo["username"] == "admin"


def test_manager_and_employee_cannot_create(client, db, register):
    _, manager = register("manager", role="manager")
    _, employee = register("employee", role="employee")
    for headers in (manager, employee):
        resp = client.post("/api/todos", json={"title": "Nope"}, headers=headers)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Insufficient permissions"}
    assert db.query(Todo).count() == 0


def test_create_requires_title(client, register):
    _, headers = register("admin", role="admin")
    resp = client.post("/api/todos", json={"description": "no title"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "title is required"}
    resp = client.post("/api/todos", json={"title": ""}, headers=headers)
    assert resp.status_code == 400


def test_employee_sees_only_own_todos(client, db, register):
    admin, admin_headers = register("admin", role="admin")
    _, manager_headers = register("manager", role="manager")
    employee, employee_headers = register("employee", role="employee")
    _create(client, admin_headers, "Admin task")
    db.add(Todo(title="Employee task", owner_id=employee["id"]))
    db.commit()

    resp = client.get("/api/todos", headers=employee_headers)
    assert resp.status_code == 200
    todos = resp.json()["todos"]
    assert [t["title"] for t in todos] == ["Employee task"]
    assert all(t["owner_id"] == employee["id"] for t in todos)

    for headers in (admin_headers, manager_headers):
        todos = client.get("/api/todos", headers=headers).json()["todos"]
        assert {t["title"] for t in todos} == {"Admin task", "Employee task"}


def test_list_newest_first(client, register):
    _, headers = register("admin", role="admin")
    first = _create(client, headers, "first")
    second = _create(client, headers, "second")
    todos = client.get("/api/todos", headers=headers).json()["todos"]
    assert [t["id"] for t in todos] == [second["id"], first["id"]]


def test_manager_updates_todo(client, register):
    _, admin_headers = register("admin", role="admin")
    _, manager_headers = register("manager", role="manager")
    todo = _create(client, admin_headers, "Draft", description="old")

    resp = client.put(
        f"/api/todos/{todo['id']}",
        json={"title": "Final", "completed": True},
        headers=manager_headers,
    )
    assert resp.status_code == 200
    updated = resp.json()["todo"]
    assert updated["title"] == "Final"
    assert updated["description"] == ""
    assert updated["completed"] is True
    # Ownership never transfers
    assert updated["owner_id"] == todo["owner_id"]


def test_update_requires_title(client, register):
    _, headers = register("admin", role="admin")
    todo = _create(client, headers, "Draft")
    resp = client.put(f"/api/todos/{todo['id']}", json={"completed": True}, headers=headers)
    assert resp.status_code == 400


def test_update_missing_todo_manager_gets_404(client, register):
    _, headers = register("manager", role="manager")
    resp = client.put("/api/todos/9999", json={"title": "x"}, headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Todo not found"}


def test_update_missing_todo_employee_gets_403(client, register):
    _, headers = register("employee", role="employee")
    resp = client.put("/api/todos/9999", json={"title": "x"}, headers=headers)
    assert resp.status_code == 403


def test_employee_cannot_modify_own_todo(client, db, register):
    employee, headers = register("employee", role="employee")
    todo = Todo(title="Mine", owner_id=employee["id"])
    db.add(todo)
    db.commit()
    todo_id = todo.id

    assert client.put(f"/api/todos/{todo_id}", json={"title": "x"}, headers=headers).status_code == 403
    assert client.patch(f"/api/todos/{todo_id}/toggle", headers=headers).status_code == 403
    assert client.delete(f"/api/todos/{todo_id}", headers=headers).status_code == 403
    db.expire_all()
    assert db.query(Todo).filter(Todo.id == todo_id).one().title == "Mine"


def test_toggle_twice_restores_flag(client, register):
    _, headers = register("admin", role="admin")
    todo = _create(client, headers, "Buy milk")
    assert todo["completed"] is False

    first = client.patch(f"/api/todos/{todo['id']}/toggle", headers=headers)
    assert first.status_code == 200
    assert first.json()["message"] == "Todo status updated"
    assert first.json()["todo"]["completed"] is True

    second = client.patch(f"/api/todos/{todo['id']}/toggle", headers=headers)
    assert second.json()["todo"]["completed"] is False


def test_toggle_missing_todo(client, register):
    _, headers = register("manager", role="manager")
    assert client.patch("/api/todos/9999/toggle", headers=headers).status_code == 404


def test_delete_todo(client, db, register):
    _, admin_headers = register("admin", role="admin")
    _, manager_headers = register("manager", role="manager")
    todo = _create(client, admin_headers, "Temporary")

    resp = client.delete(f"/api/todos/{todo['id']}", headers=manager_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Todo deleted successfully"}
    assert db.query(Todo).count() == 0

    resp = client.delete(f"/api/todos/{todo['id']}", headers=manager_headers)
    assert resp.status_code == 404


def test_unknown_role_in_token_denied(client, token_headers):
    headers = token_headers(role="superuser")
    assert client.get("/api/todos", headers=headers).status_code == 403
    assert client.post("/api/todos", json={"title": "x"}, headers=headers).status_code == 403


def test_store_failure_is_opaque_500(client, token_headers):
    broken = MagicMock()
    broken.query.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    def broken_db():
        yield broken

    app.dependency_overrides[get_db] = broken_db
    resp = client.get("/api/todos", headers=token_headers(role="admin"))
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


def test_unexpected_error_is_opaque_500(token_headers):
    broken = MagicMock()
    broken.query.side_effect = RuntimeError("boom")

    def broken_db():
        yield broken

    app.dependency_overrides[get_db] = broken_db
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/api/todos", headers=token_headers(role="admin"))
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
