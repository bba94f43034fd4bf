"""
Error taxonomy.

    ShopError
    ├── ValidationError      400  rejected before any write
    │   ├── AddressRequired       buyer has no shipping address
    │   ├── OutOfStock       409  optional pre-write stock check
    │   └── InvalidStatus         unknown or illegal transaction status
    ├── NotFoundError        404
    │   ├── BuyerNotFound
    │   ├── ProductNotFound       product or color variant
    │   └── TransactionNotFound
    └── StorageError         500  write failed, nothing persisted

Stores return these inside kungfu.Result; graph nodes raise them.
"""

from __future__ import annotations


class ShopError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class ValidationError(ShopError):
    status_code = 400


class AddressRequired(ValidationError):
    pass


class OutOfStock(ValidationError):
    status_code = 409


class InvalidStatus(ValidationError):
    pass


class NotFoundError(ShopError):
    status_code = 404


class BuyerNotFound(NotFoundError):
    pass


class ProductNotFound(NotFoundError):
    pass


class TransactionNotFound(NotFoundError):
    pass


class StorageError(ShopError):
    status_code = 500


# The client redirects to address entry when the error contains this prefix.
NO_ADDRESS_MESSAGE = (
    "No address provided. Please add or edit your address in settings "
    "before proceeding with the purchase."
)

REQUIRED_FIELDS_MESSAGE = "User ID, cart items, and total amount are required"

GENERIC_FAILURE_MESSAGE = "Something went wrong while processing your order. Please try again."


class Errors:
    @staticmethod
    def address_required() -> AddressRequired:
        return AddressRequired("ADDRESS_REQUIRED", NO_ADDRESS_MESSAGE)

    @staticmethod
    def required_fields() -> ValidationError:
        return ValidationError("INVALID_REQUEST", REQUIRED_FIELDS_MESSAGE)

    @staticmethod
    def invalid(msg: str) -> ValidationError:
        return ValidationError("INVALID_REQUEST", msg)

    @staticmethod
    def empty_cart() -> ValidationError:
        return ValidationError("EMPTY_CART", "Cart is empty")

    @staticmethod
    def out_of_stock(product_id: str, color: str, requested: int, available: int) -> OutOfStock:
        return OutOfStock(
            "OUT_OF_STOCK",
            f"Not enough stock for {product_id} ({color}): "
            f"requested {requested}, only {available} left",
        )

    @staticmethod
    def invalid_status(status: str) -> InvalidStatus:
        return InvalidStatus("INVALID_STATUS", f"Invalid status: {status}")

    @staticmethod
    def illegal_transition(current: str, target: str) -> InvalidStatus:
        return InvalidStatus(
            "ILLEGAL_TRANSITION", f"Cannot move transaction from {current} to {target}"
        )

    @staticmethod
    def buyer_not_found(buyer_id: str) -> BuyerNotFound:
        return BuyerNotFound("USER_NOT_FOUND", "User not found")

    @staticmethod
    def product_not_found(product_id: str) -> ProductNotFound:
        return ProductNotFound("PRODUCT_NOT_FOUND", f"Gadget {product_id} not found")

    @staticmethod
    def color_not_found(product_id: str, color: str) -> ProductNotFound:
        return ProductNotFound(
            "COLOR_NOT_FOUND", f"Gadget {product_id} has no color variant {color!r}"
        )

    @staticmethod
    def transaction_not_found(transaction_id: int) -> TransactionNotFound:
        return TransactionNotFound("TRANSACTION_NOT_FOUND", "Transaction not found")

    @staticmethod
    def storage(msg: str, cause: Exception | None = None) -> StorageError:
        return StorageError("STORAGE_ERROR", msg, cause)


__all__ = (
    "ShopError",
    "ValidationError",
    "AddressRequired",
    "OutOfStock",
    "InvalidStatus",
    "NotFoundError",
    "BuyerNotFound",
    "ProductNotFound",
    "TransactionNotFound",
    "StorageError",
    "Errors",
    "NO_ADDRESS_MESSAGE",
    "REQUIRED_FIELDS_MESSAGE",
    "GENERIC_FAILURE_MESSAGE",
)
