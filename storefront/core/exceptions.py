# storefront/core/exceptions.py
"""
Domain exceptions for the storefront core.

Services raise these; they carry no HTTP knowledge. The API layer maps each
class to a status code in `storefront.main`.
"""


class StorefrontError(Exception):
    """
    Base exception for all storefront domain errors.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, quantities, ...)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class NotFoundError(StorefrontError):
    """Raised when an entity or association is absent."""

    def __init__(self, entity: str, **details):
        super().__init__(f"{entity} not found", details=details)
        self.entity = entity


class InvalidArgumentError(StorefrontError):
    """Raised when a caller-supplied value violates a precondition."""

    def __init__(self, message: str, **details):
        super().__init__(message, details=details)


class InsufficientStockError(StorefrontError):
    """Raised when a cart mutation asks for more units than are in stock."""

    def __init__(self, product_id, requested: int, available: int):
        super().__init__(
            "Insufficient stock available",
            details={
                'product_id': product_id,
                'requested': requested,
                'available': available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class CartConflictError(StorefrontError):
    """Raised when a cart keeps changing underneath a mutation."""

    def __init__(self, user_id, attempts: int | None = None):
        details = {'user_id': user_id}
        if attempts is not None:
            details['attempts'] = attempts
        super().__init__(
            "Cart was modified concurrently, please retry",
            details=details,
        )
        self.user_id = user_id
