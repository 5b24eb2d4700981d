from bookstore_service.models import db

class Book(db.Model):
    __tablename__ = "book"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(255), nullable=False)
    isbn13 = db.Column(db.String(13), nullable=False, unique=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    # informativo: los pedidos no lo consultan ni lo descuentan
    stock = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "isbn13": self.isbn13,
            "price": str(self.price),
            "stock": self.stock,
        }
