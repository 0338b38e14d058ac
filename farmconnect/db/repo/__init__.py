from farmconnect.db.repo.products_repo import ProductsRepo
from farmconnect.db.repo.users_repo import UsersRepo

__all__ = [
    "ProductsRepo",
    "UsersRepo",
]
