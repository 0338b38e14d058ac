from farmconnect.db.models.products import Product
from farmconnect.db.models.users import User

__all__ = [
    "Product",
    "User",
]
