"""Emisión y verificación de credenciales."""
import datetime
import functools

import jwt
from flask import current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from bookstore_service.errors import AuthError

TOKEN_LIFETIME = datetime.timedelta(hours=2)
TOKEN_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("id", "email", "role")

_dummy_hash = None


def hash_password(password):
    return generate_password_hash(password, method=current_app.config["PASSWORD_HASH_METHOD"])


def verify_password(password_hash, password):
    return check_password_hash(password_hash, password)


def burn_password_check(password):
    """Compara contra un hash de relleno para que un email inexistente tarde lo mismo."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    check_password_hash(_dummy_hash, password)


def issue_token(user_id, email, role):
    """Generar un token JWT con expiración de 2 horas"""
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm=TOKEN_ALGORITHM)


def verify_token(token):
    """Decodificar y validar un token JWT"""
    try:
        payload = jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("token expirado") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("token inválido") from exc

    if any(claim not in payload for claim in REQUIRED_CLAIMS):
        raise AuthError("token inválido")
    return {claim: payload[claim] for claim in REQUIRED_CLAIMS}


def bearer_token(header):
    if not header:
        raise AuthError("token no proporcionado")
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthError("formato de token inválido")
    return parts[1]


def require_auth(view):
    """Exige un token Bearer válido y deja el usuario en `g.current_user`.

    El rol del token se acepta tal cual, sin volver a consultarlo en la base.
    """

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        token = bearer_token(request.headers.get("Authorization"))
        g.current_user = verify_token(token)
        return view(*args, **kwargs)

    return wrapper
