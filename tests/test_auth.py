import datetime

import jwt
import pytest

from bookstore_service.auth import TOKEN_LIFETIME, bearer_token, issue_token, verify_token
from bookstore_service.errors import AuthError
from tests.conftest import TEST_SECRET

PROTECTED = [
    ("post", "/orders"),
    ("get", "/orders/my"),
    ("post", "/books"),
    ("put", "/books/1"),
    ("delete", "/books/1"),
]


def _token(secret=TEST_SECRET, lifetime=TOKEN_LIFETIME, issued=None, **claims):
    issued = issued or datetime.datetime.now(datetime.timezone.utc)
    payload = {"id": 1, "email": "ana@example.com", "role": "customer", "iat": issued, "exp": issued + lifetime}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def test_issued_token_round_trips_claims(ctx):
    token = issue_token(7, "ana@example.com", "admin")

    assert verify_token(token) == {"id": 7, "email": "ana@example.com", "role": "admin"}


def test_token_is_valid_for_two_hours(ctx):
    payload = jwt.decode(issue_token(7, "ana@example.com", "customer"), TEST_SECRET, algorithms=["HS256"])

    assert payload["exp"] - payload["iat"] == 2 * 60 * 60


def test_expired_token_is_rejected(ctx):
    issued = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=3)

    with pytest.raises(AuthError, match="expirado"):
        verify_token(_token(issued=issued))


def test_forged_signature_is_rejected(ctx):
    with pytest.raises(AuthError):
        verify_token(_token(secret="otra-clave"))


def test_token_without_role_is_rejected(ctx):
    payload = {"id": 1, "email": "ana@example.com",
               "iat": datetime.datetime.now(datetime.timezone.utc),
               "exp": datetime.datetime.now(datetime.timezone.utc) + TOKEN_LIFETIME}
    token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")

    with pytest.raises(AuthError):
        verify_token(token)


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Token abc", "bearer abc", "Bearer a b"])
def test_malformed_authorization_header(header):
    with pytest.raises(AuthError):
        bearer_token(header)


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_endpoints_require_a_token(client, method, path):
    response = getattr(client, method)(path, json={})

    assert response.status_code == 401
    assert response.get_json()["error"] == "token no proporcionado"


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_endpoints_reject_expired_tokens(client, method, path):
    issued = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=2, seconds=1)
    headers = {"Authorization": f"Bearer {_token(issued=issued)}"}

    response = getattr(client, method)(path, json={}, headers=headers)

    assert response.status_code == 401


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_endpoints_reject_forged_tokens(client, method, path):
    headers = {"Authorization": f"Bearer {_token(secret='otra-clave')}"}

    response = getattr(client, method)(path, json={}, headers=headers)

    assert response.status_code == 401


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_endpoints_reject_wrong_scheme(client, method, path):
    headers = {"Authorization": f"Basic {_token()}"}

    response = getattr(client, method)(path, json={}, headers=headers)

    assert response.status_code == 401
