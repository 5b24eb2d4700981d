"""Ciclo de vida de la conexión a la base de datos y alcance transaccional."""
import logging
from contextlib import contextmanager

from sqlalchemy import event, text
from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from bookstore_service.errors import ConflictError, ServiceUnavailableError, StoreError
from bookstore_service.models import db

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def engine_options(uri, timeout):
    """Opciones del engine para que ninguna operación espere más de `timeout` segundos."""
    if uri.startswith("sqlite"):
        return {"connect_args": {"timeout": timeout}}
    options = {"pool_pre_ping": True, "pool_timeout": timeout}
    if uri.startswith("mysql"):
        options["connect_args"] = {
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "write_timeout": timeout,
        }
    return options


def init_store(app):
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    for key, value in engine_options(app.config["SQLALCHEMY_DATABASE_URI"], app.config["STORE_TIMEOUT"]).items():
        options.setdefault(key, value)
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options

    db.init_app(app)

    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            # SQLite solo respeta las claves foráneas si se activan por conexión
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)
        db.create_all()
    logger.info("Base de datos inicializada")


def shutdown_store(app):
    with app.app_context():
        db.engine.dispose()
    logger.info("Conexiones a la base de datos liberadas")


def ping():
    db.session.execute(text("SELECT 1"))


def translate_store_error(error):
    if isinstance(error, (OperationalError, PoolTimeoutError, DisconnectionError)):
        return ServiceUnavailableError()
    return StoreError()


@contextmanager
def transaction(conflict=None):
    """Todo lo ejecutado dentro del bloque se confirma junto o se descarta.

    `conflict` es el mensaje a devolver si la base rechaza la escritura por
    una restricción de unicidad o de clave foránea.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if conflict is None:
            logger.exception("Violación de integridad inesperada")
            raise StoreError() from exc
        raise ConflictError(conflict) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Transacción revertida por fallo de base de datos")
        raise translate_store_error(exc) from exc
    except BaseException:
        session.rollback()
        raise
