from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from bookstore_service.models.book import Book  # noqa: E402
from bookstore_service.models.user import User  # noqa: E402
from bookstore_service.models.order import Order, OrderItem, OrderStatus  # noqa: E402

__all__ = ["db", "Book", "User", "Order", "OrderItem", "OrderStatus"]
