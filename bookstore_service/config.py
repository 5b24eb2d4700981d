import os


class Config:
    """Configuración leída del entorno al arrancar el servicio."""

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URI", "mysql+pymysql://user:password@db/bookstore")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretkey")

    # segundos para cualquier operación contra la base de datos
    STORE_TIMEOUT = int(os.environ.get("STORE_TIMEOUT", "5"))

    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256")
    DEFAULT_ROLE = os.environ.get("DEFAULT_ROLE", "customer")

    RABBITMQ_HOST = os.environ.get("RABBITMQ_HOST")
    ORDER_EVENTS_QUEUE = os.environ.get("ORDER_EVENTS_QUEUE", "order_events")
    BOOK_EVENTS_QUEUE = os.environ.get("BOOK_EVENTS_QUEUE", "book_updates")
    # segundos de espera máxima al broker antes de abandonar la publicación
    EVENTS_TIMEOUT = float(os.environ.get("EVENTS_TIMEOUT", "2"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
