import logging

from flask import current_app

from bookstore_service.auth import burn_password_check, hash_password, issue_token, verify_password
from bookstore_service.errors import AuthError, ValidationError
from bookstore_service.models import User
from bookstore_service.store import transaction

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "credenciales inválidas"


def _require_fields(data, fields):
    if not isinstance(data, dict):
        raise ValidationError(f"{', '.join(fields)} requeridos")
    missing = [field for field in fields if not isinstance(data.get(field), str) or not data[field].strip()]
    if missing:
        raise ValidationError(f"{', '.join(missing)} requeridos")


def register_user(data):
    _require_fields(data, ("name", "email", "password"))
    email = data["email"].strip().lower()
    password_hash = hash_password(data["password"])

    with transaction(conflict="ya existe un usuario con ese email") as session:
        user = User(
            name=data["name"].strip(),
            email=email,
            password_hash=password_hash,
            role=current_app.config["DEFAULT_ROLE"],
        )
        session.add(user)
        session.flush()
        user_id = user.id

    logger.info("Usuario %s registrado", user_id)
    return user_id


def authenticate(data):
    """Devuelve (token, usuario) si email y password coinciden.

    Email desconocido y password incorrecto producen el mismo error.
    """
    _require_fields(data, ("email", "password"))
    email = data["email"].strip().lower()

    user = User.query.filter_by(email=email).first()
    if user is None:
        burn_password_check(data["password"])
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(user.password_hash, data["password"]):
        raise AuthError(INVALID_CREDENTIALS)

    token = issue_token(user.id, user.email, user.role)
    return token, user.to_public_dict()
