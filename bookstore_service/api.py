import logging

from flask import Blueprint, g, jsonify, request

from bookstore_service import accounts, catalog, placement, queries, store
from bookstore_service.auth import require_auth
from bookstore_service.errors import NotFoundError, ServiceUnavailableError, ValidationError

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("se requiere un cuerpo JSON")
    return data


# ------------------------------------------------------
# Estado del servicio
# ------------------------------------------------------
@api.route("/", methods=["GET"])
def home():
    """Estado del servicio"""
    return jsonify({"service": "bookstore", "status": "running"})


@api.route("/health", methods=["GET"])
def health():
    """
    Comprobar la conexión con la base de datos
    ---
    tags:
      - Estado
    responses:
      200:
        description: Servicio y base de datos disponibles
      503:
        description: Base de datos no disponible
    """
    try:
        store.ping()
    except Exception as exc:
        logger.exception("Health check fallido")
        raise ServiceUnavailableError() from exc
    return jsonify({"ok": True, "database": "connected"})


# ======================================================
# ===================== LIBROS ==========================
# ======================================================
@api.route("/books", methods=["GET"])
def list_books():
    """
    Obtener todos los libros del catálogo
    ---
    tags:
      - Libros
    responses:
      200:
        description: Lista de libros
        schema:
          type: array
          items:
            type: object
            properties:
              id: {type: integer}
              title: {type: string}
              author: {type: string}
              isbn13: {type: string}
              price: {type: string}
              stock: {type: integer}
    """
    return jsonify([book.to_dict() for book in catalog.list_books()])


@api.route("/books/<int:id>", methods=["GET"])
def get_book(id):
    """
    Obtener un libro por ID
    ---
    tags:
      - Libros
    parameters:
      - in: path
        name: id
        required: true
        type: integer
    responses:
      200:
        description: Libro encontrado
      404:
        description: No encontrado
    """
    return jsonify(catalog.get_book(id).to_dict())


@api.route("/books", methods=["POST"])
@require_auth
def add_book():
    """
    Agregar un nuevo libro
    ---
    tags:
      - Libros
    parameters:
      - in: header
        name: Authorization
        description: Token JWT del usuario
        required: true
        type: string
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, author, isbn13, price]
          properties:
            title: {type: string}
            author: {type: string}
            isbn13: {type: string}
            price: {type: number}
            stock: {type: integer}
    responses:
      201:
        description: Libro agregado
      400:
        description: Datos inválidos
      401:
        description: Token inválido o ausente
      409:
        description: isbn13 duplicado
    """
    book_id = catalog.create_book(_json_body())
    return jsonify({"id": book_id}), 201


@api.route("/books/<int:id>", methods=["PUT"])
@require_auth
def update_book(id):
    """
    Actualizar un libro existente
    ---
    tags:
      - Libros
    parameters:
      - in: header
        name: Authorization
        required: true
        type: string
      - in: path
        name: id
        required: true
        type: integer
      - in: body
        name: body
        schema:
          type: object
          properties:
            title: {type: string}
            author: {type: string}
            isbn13: {type: string}
            price: {type: number}
            stock: {type: integer}
    responses:
      200:
        description: Libro actualizado
      400:
        description: Datos inválidos
      404:
        description: No encontrado
      409:
        description: isbn13 duplicado
    """
    catalog.update_book(id, _json_body())
    return jsonify({"message": "libro actualizado"})


@api.route("/books/<int:id>", methods=["DELETE"])
@require_auth
def delete_book(id):
    """
    Eliminar un libro
    ---
    tags:
      - Libros
    parameters:
      - in: header
        name: Authorization
        required: true
        type: string
      - in: path
        name: id
        required: true
        type: integer
    responses:
      200:
        description: Libro eliminado
      404:
        description: No encontrado
      409:
        description: El libro aparece en pedidos
    """
    catalog.delete_book(id)
    return jsonify({"message": "libro eliminado"})


# ======================================================
# ==================== USUARIOS ========================
# ======================================================
@api.route("/signup", methods=["POST"])
def signup():
    """
    Registrar un nuevo usuario
    ---
    tags:
      - Autenticación
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, password]
          properties:
            name: {type: string}
            email: {type: string}
            password: {type: string}
    responses:
      201:
        description: Usuario creado correctamente
      400:
        description: Faltan datos
      409:
        description: El email ya está registrado
    """
    user_id = accounts.register_user(_json_body())
    return jsonify({"id": user_id}), 201


@api.route("/login", methods=["POST"])
def login():
    """
    Iniciar sesión y obtener JWT
    ---
    tags:
      - Autenticación
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password]
          properties:
            email: {type: string}
            password: {type: string}
    responses:
      200:
        description: Login exitoso
      401:
        description: Credenciales inválidas
    """
    token, user = accounts.authenticate(_json_body())
    return jsonify({"token": token, "user": user})


# ======================================================
# ===================== PEDIDOS ========================
# ======================================================
@api.route("/orders", methods=["POST"])
@require_auth
def create_order():
    """
    Crear un pedido
    ---
    tags:
      - Pedidos
    parameters:
      - in: header
        name: Authorization
        description: Token JWT del usuario
        required: true
        type: string
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [items]
          properties:
            items:
              type: array
              items:
                type: object
                required: [book_id, quantity]
                properties:
                  book_id: {type: integer}
                  quantity: {type: integer}
    responses:
      201:
        description: Pedido creado
      400:
        description: Lista vacía, cantidad inválida o libro inexistente
      401:
        description: Token inválido o ausente
    """
    data = _json_body()
    if not isinstance(data, dict):
        raise ValidationError("items debe ser una lista no vacía")

    user_id = g.current_user["id"]
    try:
        placed = placement.place_order(user_id, data.get("items"))
    except ValidationError as exc:
        logger.info("Pedido rechazado para usuario %s: %s", user_id, exc.message)
        raise
    except NotFoundError as exc:
        logger.info("Pedido rechazado para usuario %s: %s", user_id, exc.message)
        raise ValidationError(exc.message) from exc

    return jsonify({"orderId": placed.order_id, "total": str(placed.total)}), 201


@api.route("/orders/my", methods=["GET"])
@require_auth
def my_orders():
    """
    Listar los pedidos del usuario autenticado
    ---
    tags:
      - Pedidos
    parameters:
      - in: header
        name: Authorization
        required: true
        type: string
    responses:
      200:
        description: Una fila por línea de pedido con los datos del libro
    """
    return jsonify(queries.orders_for_user(g.current_user["id"]))
