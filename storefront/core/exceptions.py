"""Domain exceptions raised by services and translated to HTTP errors by the API."""


class StorefrontError(Exception):
    """Base class for storefront domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    """A requested store, product, order or slug does not exist."""


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__("Order not found")
        self.order_id = order_id


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str) -> None:
        super().__init__("Product not found")
        self.product_id = product_id


class StoreNotFoundError(NotFoundError):
    def __init__(self, identifier: str) -> None:
        super().__init__("Store not found")
        self.identifier = identifier


class AccessDeniedError(StorefrontError):
    """The caller does not own the resource it is acting on."""


class OrderAccessDeniedError(AccessDeniedError):
    def __init__(self, order_id: str) -> None:
        super().__init__("Unauthorized to update this order")
        self.order_id = order_id


class ValidationError(StorefrontError):
    """Client input that passed schema validation but breaks a business rule."""


class ConflictError(StorefrontError):
    """The write would clash with existing state."""


class SlugUnavailableError(ConflictError):
    def __init__(self, slug: str, suggestions: list[str] | None = None) -> None:
        super().__init__(
            "This store name is already taken. Please try one of the suggestions "
            "or choose a different name."
        )
        self.slug = slug
        self.suggestions = suggestions or []
