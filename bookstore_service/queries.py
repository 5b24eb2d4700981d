from bookstore_service.models import Book, Order, OrderItem, db


def orders_for_user(user_id):
    """Pedidos del usuario, una fila por línea con los datos del libro.

    Los más recientes primero; a igual fecha decide el id más alto.
    """
    rows = (
        db.session.query(Order, OrderItem, Book)
        .join(OrderItem, OrderItem.order_id == Order.id)
        .join(Book, Book.id == OrderItem.book_id)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc(), OrderItem.id.asc())
        .all()
    )
    return [
        {
            "orderId": order.id,
            "total": str(order.total),
            "status": order.status,
            "createdAt": order.created_at.isoformat(),
            "itemId": item.id,
            "bookId": item.book_id,
            "quantity": item.quantity,
            "price": str(item.price),
            "title": book.title,
            "author": book.author,
            "isbn13": book.isbn13,
        }
        for order, item, book in rows
    ]
