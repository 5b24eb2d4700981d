import enum

from bookstore_service.models import db


class OrderStatus(str, enum.Enum):
    """Estados de un pedido.

    Este servicio solo crea pedidos en PENDING; el resto de transiciones las
    hace el proceso externo de despacho.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    CANCELLED = "cancelled"
    FULFILLED = "fulfilled"


class Order(db.Model):
    __tablename__ = "orders"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    total = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PENDING.value)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    items = db.relationship("OrderItem", backref=db.backref("order", lazy=True), lazy=True,
                            order_by="OrderItem.id")


class OrderItem(db.Model):
    __tablename__ = "order_item"
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("book.id", ondelete="RESTRICT"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    # precio del libro en el momento de la compra
    price = db.Column(db.Numeric(10, 2), nullable=False)
    book = db.relationship("Book", lazy=True)
