class CatalogError(Exception):
    """Base class for everything the catalog layer raises."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class ProductValidationError(CatalogError):
    """Malformed form input; raised before any backend call."""


class AuthError(CatalogError):
    pass


class StoreError(CatalogError):
    """Failure reported by the backend. The message is the backend's own."""


class NotFoundError(CatalogError):
    pass


class ConfigurationError(CatalogError):
    pass
