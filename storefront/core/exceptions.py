# storefront/core/exceptions.py

from enum import Enum
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Checkout precondition errors
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    CART_EMPTY = "CART_EMPTY"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    PAYMENT_MODE_UNAVAILABLE = "PAYMENT_MODE_UNAVAILABLE"

    # Business rule errors
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

    # Lookup errors
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"

    # System errors
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

class StorefrontError(Exception):
    """
    Base for every failure the storefront reports to a client.

    ``code`` picks the HTTP status (see ``error_handlers.STATUS_CODE_MAP``).
    ``context`` carries ids such as the order left behind by a partial checkout.
    """

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggested_action: Optional[str] = None
    ):
        self.code = code
        self.user_message = user_message
        self.technical_details = technical_details
        self.context = context or {}
        self.suggested_action = suggested_action

        logger.error(
            f"{code.value}: {user_message}"
            + (f" ({technical_details})" if technical_details else "")
            + (f" context={self.context}" if self.context else "")
        )

        super().__init__(self.user_message)

    def to_response(self) -> Dict[str, Any]:
        error = {"code": self.code.value, "message": self.user_message, "context": self.context}
        if self.suggested_action:
            error["suggested_action"] = self.suggested_action
        return {"error": error}

class AddressNotFoundError(StorefrontError):
    """The delivery address does not exist, is not the user's, or could not be read."""

    def __init__(self, address_id: Any, technical_details: Optional[str] = None):
        super().__init__(
            code=ErrorCode.ADDRESS_NOT_FOUND,
            user_message="Address not found",
            technical_details=technical_details,
            context={"address_id": str(address_id)},
            suggested_action="Please add a delivery address first."
        )

class CartEmptyError(StorefrontError):
    """Checkout was attempted with no cart lines, or the cart could not be read."""

    def __init__(self, user_id: Any, technical_details: Optional[str] = None):
        super().__init__(
            code=ErrorCode.CART_EMPTY,
            user_message="Cart empty",
            technical_details=technical_details,
            context={"user_id": str(user_id)},
            suggested_action="Browse products and add items to your cart."
        )

class InvalidQuantityError(StorefrontError):
    """A cart line quantity is not a whole number."""

    def __init__(self, product_id: Any, quantity: Any):
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            user_message="Invalid quantity type",
            technical_details=f"Quantity {quantity!r} is not a whole number",
            context={"product_id": str(product_id), "quantity": str(quantity)}
        )

class InsufficientStockError(StorefrontError):
    """The atomic stock decrement refused a line."""

    def __init__(self, product_id: Any, message: Optional[str] = None, order_id: Optional[str] = None):
        context = {"product_id": str(product_id)}
        if order_id:
            context["order_id"] = order_id
        super().__init__(
            code=ErrorCode.INSUFFICIENT_STOCK,
            user_message=message or "Insufficient stock for one or more items",
            context=context
        )

class PersistenceError(StorefrontError):
    """An insert, update or delete against the store failed."""

    def __init__(self, operation: str, technical_details: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.PERSISTENCE_ERROR,
            user_message=f"Failed to {operation}",
            technical_details=technical_details,
            context={"operation": operation, **(context or {})},
            suggested_action="Please try again."
        )

class PaymentModeUnavailableError(StorefrontError):
    """The requested payment mode is switched off."""

    def __init__(self, payment_mode: str, enabled_modes):
        super().__init__(
            code=ErrorCode.PAYMENT_MODE_UNAVAILABLE,
            user_message=f"Payment mode '{payment_mode}' is currently unavailable",
            context={"payment_mode": payment_mode, "enabled_modes": list(enabled_modes)},
            suggested_action=f"Please choose from: {', '.join(enabled_modes)}"
        )

class OrderNotFoundError(StorefrontError):
    """Order lookup by id found nothing for this user."""

    def __init__(self, order_id: Any):
        super().__init__(
            code=ErrorCode.ORDER_NOT_FOUND,
            user_message="Order not found",
            context={"order_id": str(order_id)}
        )

class ProductNotFoundError(StorefrontError):

    def __init__(self, product_id: Any):
        super().__init__(
            code=ErrorCode.PRODUCT_NOT_FOUND,
            user_message="Product not found",
            context={"product_id": str(product_id)}
        )

class AuthenticationError(Exception):
    """Exception raised for authentication-related errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)
