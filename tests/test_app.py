from sqlalchemy.exc import OperationalError

from bookstore_service import store
from bookstore_service.store import engine_options


def test_home(client):
    assert client.get("/").get_json() == {"service": "bookstore", "status": "running"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "connected"}


def test_health_when_store_is_down(client, monkeypatch):
    def down():
        raise OperationalError("SELECT 1", {}, Exception("Can't connect to MySQL server"))

    monkeypatch.setattr(store, "ping", down)

    response = client.get("/health")

    assert response.status_code == 503
    assert "MySQL" not in response.get_data(as_text=True)


def test_unknown_route_is_json(client):
    response = client.get("/no-existe")

    assert response.status_code == 404
    assert "error" in response.get_json()


def test_store_errors_outside_transactions_are_not_echoed(client, monkeypatch):
    from bookstore_service import catalog

    def broken():
        raise OperationalError("SELECT * FROM book", {}, Exception("secret diagnostic"))

    monkeypatch.setattr(catalog, "list_books", broken)

    response = client.get("/books")

    assert response.status_code == 503
    assert "secret diagnostic" not in response.get_data(as_text=True)


def test_unexpected_errors_become_internal_errors(client, monkeypatch):
    from bookstore_service import catalog

    def broken():
        raise RuntimeError("boom")

    monkeypatch.setattr(catalog, "list_books", broken)

    response = client.get("/books")

    assert response.status_code == 500
    assert response.get_json() == {"error": "error interno"}


def test_swagger_docs_are_served(client):
    assert client.get("/apispec_1.json").status_code == 200


def test_engine_options_bound_every_store_operation():
    mysql = engine_options("mysql+pymysql://user:password@db/bookstore", 5)
    assert mysql["pool_timeout"] == 5
    assert mysql["connect_args"] == {"connect_timeout": 5, "read_timeout": 5, "write_timeout": 5}

    sqlite = engine_options("sqlite:////tmp/bookstore.db", 5)
    assert sqlite == {"connect_args": {"timeout": 5}}


def test_sqlite_store_enforces_foreign_keys(ctx):
    from sqlalchemy import text

    from bookstore_service.models import db

    assert db.session.execute(text("PRAGMA foreign_keys")).scalar() == 1

