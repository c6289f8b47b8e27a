"""Services for catalog business logic."""

from .exceptions import (
    CatalogServiceError,
    ProductValidationError,
    DuplicateProductCodeError,
    ProductInUseError,
)
from .product_management import (
    create_product,
    update_product,
    delete_product,
    search_products,
)

__all__ = [
    # Exceptions
    'CatalogServiceError',
    'ProductValidationError',
    'DuplicateProductCodeError',
    'ProductInUseError',
    # Services
    'create_product',
    'update_product',
    'delete_product',
    'search_products',
]
