"""Catálogo de libros: lecturas puntuales, lecturas por lote y escrituras simples."""
import logging
from decimal import Decimal, InvalidOperation

from bookstore_service import events
from bookstore_service.errors import NotFoundError, ValidationError
from bookstore_service.models import Book, db
from bookstore_service.store import transaction

logger = logging.getLogger(__name__)

BOOK_FIELDS = ("title", "author", "isbn13", "price", "stock")
REQUIRED_FIELDS = ("title", "author", "isbn13", "price")
MAX_PRICE = Decimal("99999999.99")
CENTS = Decimal("0.01")


def list_books():
    return Book.query.order_by(Book.id).all()


def get_book(book_id):
    book = db.session.get(Book, book_id)
    if book is None:
        raise NotFoundError("libro no encontrado")
    return book


def get_books_by_ids(book_ids):
    """Lee todos los libros pedidos en una sola consulta."""
    if not book_ids:
        return []
    return Book.query.filter(Book.id.in_(list(book_ids))).all()


def _parse_text(data, field):
    value = data[field]
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} debe ser un texto no vacío")
    return value.strip()


def _parse_isbn13(data):
    value = data["isbn13"]
    if not isinstance(value, str) or len(value) != 13:
        raise ValidationError("isbn13 debe tener exactamente 13 caracteres")
    return value


def _parse_price(data):
    value = data["price"]
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError("price debe ser un número")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("price debe ser un número") from None
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        raise ValidationError("price debe ser un número no negativo")
    if price.as_tuple().exponent < -2:
        raise ValidationError("price admite como máximo dos decimales")
    return price.quantize(CENTS)


def _parse_stock(data):
    value = data["stock"]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("stock debe ser un entero no negativo")
    return value


_PARSERS = {
    "title": lambda data: _parse_text(data, "title"),
    "author": lambda data: _parse_text(data, "author"),
    "isbn13": _parse_isbn13,
    "price": _parse_price,
    "stock": _parse_stock,
}


def validate_book_fields(data, partial=False):
    if not isinstance(data, dict) or not data:
        raise ValidationError("se requiere un objeto JSON con los datos del libro")

    unknown = sorted(set(data) - set(BOOK_FIELDS))
    if unknown:
        raise ValidationError(f"campos no permitidos: {', '.join(unknown)}")

    if not partial:
        missing = [field for field in REQUIRED_FIELDS if data.get(field) is None]
        if missing:
            raise ValidationError(f"campos requeridos: {', '.join(missing)}")

    return {field: _PARSERS[field](data) for field in BOOK_FIELDS if field in data}


def create_book(data):
    fields = validate_book_fields(data)
    fields.setdefault("stock", 0)
    with transaction(conflict="ya existe un libro con ese isbn13") as session:
        book = Book(**fields)
        session.add(book)
        session.flush()
        payload = book.to_dict()

    logger.info("Libro %s creado (isbn13=%s)", payload["id"], payload["isbn13"])
    events.book_changed("book_created", payload)
    return payload["id"]


def update_book(book_id, data):
    fields = validate_book_fields(data, partial=True)
    with transaction(conflict="ya existe un libro con ese isbn13") as session:
        book = session.get(Book, book_id)
        if book is None:
            raise NotFoundError("libro no encontrado")
        for key, value in fields.items():
            setattr(book, key, value)
        session.flush()
        payload = book.to_dict()

    logger.info("Libro %s actualizado: %s", book_id, ", ".join(sorted(fields)))
    events.book_changed("book_updated", payload)


def delete_book(book_id):
    with transaction(conflict="el libro está incluido en pedidos y no se puede eliminar") as session:
        book = session.get(Book, book_id)
        if book is None:
            raise NotFoundError("libro no encontrado")
        session.delete(book)

    logger.info("Libro %s eliminado", book_id)
    events.book_changed("book_deleted", {"id": book_id})
