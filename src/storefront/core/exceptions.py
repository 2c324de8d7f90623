"""Storefront exception hierarchy.

Each error carries the HTTP status and the shopper-facing message the error
middleware renders for it.
"""


class StorefrontError(Exception):
    """Base class for storefront errors."""

    status_code = 500
    default_message = "An error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(StorefrontError):
    """A requested item, cart, order or user does not exist."""

    status_code = 404
    default_message = "Not found."


class ItemNotFound(NotFound):
    default_message = "Item not found"


class CartNotFound(NotFound):
    default_message = "Cart not found"


class ItemNotInCart(NotFound):
    default_message = "Item not found in cart"


class OrderNotFound(NotFound):
    """No order with that id belongs to the shopper.

    Missing orders and orders owned by someone else are reported the same way.
    """

    default_message = "Order not found or access denied."


class UserNotFound(NotFound):
    default_message = "User not found."


class Unauthorized(StorefrontError):
    """No authenticated shopper in the session."""

    status_code = 401
    default_message = "Please log in to continue."


class InvalidCredentials(StorefrontError):
    status_code = 400
    default_message = "Invalid email or password."


class DuplicateUser(StorefrontError):
    status_code = 400
    default_message = "An account with that email or username already exists."


class EmptyCart(StorefrontError):
    status_code = 400
    default_message = "Your cart is empty."


class StoreFailure(StorefrontError):
    """Persistence failed underneath an operation."""

    status_code = 500
    default_message = "An error occurred. Please try again later."


class SessionError(StoreFailure):
    default_message = "An error occurred during logout."


class CheckoutIncomplete(StoreFailure):
    """The order was saved but the cart could not be emptied."""

    default_message = (
        "Your order was placed, but we could not empty your cart. "
        "Please review your cart before ordering again."
    )

    def __init__(self, order_id, message: str | None = None):
        self.order_id = order_id
        super().__init__(message)


class ImmutableRecordError(StorefrontError):
    """Attempt to modify a saved order snapshot."""

    default_message = "Orders cannot be modified once placed."
