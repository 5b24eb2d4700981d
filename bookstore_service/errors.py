"""Errores del servicio y su traducción a respuestas HTTP."""
import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class BookstoreError(Exception):
    status_code = 500
    message = "error interno"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(BookstoreError):
    status_code = 400
    message = "datos inválidos"


class AuthError(BookstoreError):
    status_code = 401
    message = "no autorizado"


class NotFoundError(BookstoreError):
    status_code = 404
    message = "no encontrado"


class ConflictError(BookstoreError):
    status_code = 409
    message = "conflicto con un registro existente"


class StoreError(BookstoreError):
    status_code = 500
    message = "error de base de datos"


class ServiceUnavailableError(StoreError):
    status_code = 503
    message = "servicio no disponible, intente más tarde"


class InternalError(BookstoreError):
    status_code = 500
    message = "error interno"


def register_error_handlers(app):
    from bookstore_service.store import translate_store_error

    @app.errorhandler(BookstoreError)
    def handle_bookstore_error(error):
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        logger.exception("Fallo de base de datos no controlado")
        translated = translate_store_error(error)
        return jsonify({"error": translated.message}), translated.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Error inesperado")
        return jsonify({"error": InternalError.message}), InternalError.status_code
