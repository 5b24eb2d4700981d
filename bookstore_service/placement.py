"""Motor de colocación de pedidos.

Un pedido se coloca en tres pasos dentro de una sola transacción:

1. se leen de una vez los precios actuales de todos los libros pedidos,
2. se calcula el total con aritmética decimal sobre esos precios,
3. se escriben la cabecera y una línea por cada elemento recibido.

Si cualquier paso falla no queda nada escrito. Los precios leídos quedan
congelados en las líneas: cambios posteriores del catálogo no las afectan.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from bookstore_service import events
from bookstore_service.catalog import CENTS, get_books_by_ids
from bookstore_service.errors import NotFoundError, ValidationError
from bookstore_service.models import Order, OrderItem, OrderStatus
from bookstore_service.store import transaction

logger = logging.getLogger(__name__)

# límites de las columnas INTEGER y orders.total NUMERIC(12, 2)
MAX_BOOK_ID = 2 ** 31 - 1
MAX_QUANTITY = 2 ** 31 - 1
MAX_TOTAL = Decimal("9999999999.99")


@dataclass(frozen=True)
class RequestedLine:
    book_id: int
    quantity: int


@dataclass(frozen=True)
class OrderLine:
    book_id: int
    quantity: int
    price: Decimal

    @property
    def line_total(self):
        return self.price * self.quantity


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    total: Decimal


def _is_positive_int(value, limit):
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= limit


def parse_items(items):
    """Valida la lista recibida sin tocar la base de datos."""
    if not isinstance(items, list) or not items:
        raise ValidationError("items debe ser una lista no vacía")

    lines = []
    for position, item in enumerate(items):
        if not isinstance(item, dict) or "book_id" not in item or "quantity" not in item:
            raise ValidationError(f"items[{position}] debe tener book_id y quantity")
        if not _is_positive_int(item["book_id"], MAX_BOOK_ID):
            raise ValidationError(f"items[{position}].book_id inválido")
        if not _is_positive_int(item["quantity"], MAX_QUANTITY):
            raise ValidationError(
                f"items[{position}].quantity debe ser un entero entre 1 y {MAX_QUANTITY}"
            )
        lines.append(RequestedLine(book_id=item["book_id"], quantity=item["quantity"]))
    return lines


def snapshot_prices(book_ids):
    books = get_books_by_ids(book_ids)
    prices = {book.id: book.price for book in books}
    missing = sorted(set(book_ids) - set(prices))
    if missing:
        raise NotFoundError(f"libros inexistentes: {', '.join(str(book_id) for book_id in missing)}")
    return prices


def price_lines(lines, prices):
    priced = [OrderLine(line.book_id, line.quantity, prices[line.book_id]) for line in lines]
    total = sum((line.line_total for line in priced), Decimal("0")).quantize(CENTS)
    if total > MAX_TOTAL:
        raise ValidationError(f"el total del pedido supera el máximo permitido ({MAX_TOTAL})")
    return priced, total


def _line_items(order_id, lines):
    return [
        OrderItem(order_id=order_id, book_id=line.book_id, quantity=line.quantity, price=line.price)
        for line in lines
    ]


def place_order(user_id, items):
    lines = parse_items(items)

    with transaction() as session:
        prices = snapshot_prices({line.book_id for line in lines})
        priced, total = price_lines(lines, prices)

        order = Order(user_id=user_id, total=total, status=OrderStatus.PENDING.value)
        session.add(order)
        session.flush()
        order_id = order.id

        session.add_all(_line_items(order_id, priced))
        session.flush()

    logger.info("Pedido %s creado: usuario=%s total=%s lineas=%s", order_id, user_id, total, len(priced))
    events.order_placed(order_id, user_id, total, priced)
    return PlacedOrder(order_id=order_id, total=total)
