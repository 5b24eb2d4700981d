import atexit
import logging

from flasgger import Swagger
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from bookstore_service.api import api
from bookstore_service.config import Config
from bookstore_service.errors import register_error_handlers
from bookstore_service.store import init_store, shutdown_store


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    Swagger(app, template={
        "info": {
            "title": "Bookstore API",
            "description": "Catálogo de libros, usuarios y pedidos",
            "version": "3.0.0"
        }
    })

    init_store(app)
    atexit.register(shutdown_store, app)

    register_error_handlers(app)
    app.register_blueprint(api)
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, threaded=True)
