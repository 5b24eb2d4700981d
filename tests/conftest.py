from decimal import Decimal

import pytest

from bookstore_service import create_app
from bookstore_service.auth import hash_password, issue_token
from bookstore_service.models import Book, User, db

TEST_SECRET = "test-secret"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'bookstore.db'}",
        "SECRET_KEY": TEST_SECRET,
        "STORE_TIMEOUT": 10,
        "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
        "RABBITMQ_HOST": None,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def books(app):
    """Tres libros; devuelve {isbn13: id}."""
    with app.app_context():
        rows = [
            Book(title="Cien años de soledad", author="Gabriel García Márquez",
                 isbn13="9780307474728", price=Decimal("10.00"), stock=5),
            Book(title="Rayuela", author="Julio Cortázar",
                 isbn13="9788437604572", price=Decimal("19.99"), stock=2),
            Book(title="Pedro Páramo", author="Juan Rulfo",
                 isbn13="9780802133908", price=Decimal("7.35"), stock=0),
        ]
        db.session.add_all(rows)
        db.session.commit()
        return {book.isbn13: book.id for book in rows}


@pytest.fixture
def book_ids(books):
    return list(books.values())


def _make_user(app, name, email, role="customer"):
    with app.app_context():
        user = User(name=name, email=email, password_hash=hash_password("secreto123"), role=role)
        db.session.add(user)
        db.session.commit()
        return {"id": user.id, "name": name, "email": email, "role": role}


@pytest.fixture
def user(app):
    return _make_user(app, "Ana", "ana@example.com")


@pytest.fixture
def other_user(app):
    return _make_user(app, "Luis", "luis@example.com")


@pytest.fixture
def auth_headers(app):
    def _headers(account):
        with app.app_context():
            token = issue_token(account["id"], account["email"], account["role"])
        return {"Authorization": f"Bearer {token}"}

    return _headers
