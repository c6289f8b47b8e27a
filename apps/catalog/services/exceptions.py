"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class ProductValidationError(CatalogServiceError):
    """Raised when product data breaks a catalog rule."""
    pass


class DuplicateProductCodeError(CatalogServiceError):
    """Raised when another product already uses the code."""
    pass


class ProductInUseError(CatalogServiceError):
    """Raised when deleting a product that still has stock."""
    pass
