"""Error types shared by the store client, the API and the dashboard engine."""

from typing import Iterable, Optional


class ProductBoardError(Exception):
    """Base class for product board errors."""


class ValidationError(ProductBoardError, ValueError):
    """A create payload was rejected before anything was applied."""

    def __init__(self, messages: Iterable[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Invalid product")


class GatewayError(ProductBoardError):
    """The remote store answered with a non-success status."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}" if detail else f"HTTP {status_code}")


class RemoteOperationFailure(ProductBoardError):
    """A remote create/update/delete call did not succeed."""

    def __init__(
        self,
        operation: str,
        message: str,
        product_id: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.operation = operation
        self.message = message
        self.product_id = product_id
        self.cause = cause
        super().__init__(message)


class PartialBulkFailure(RemoteOperationFailure):
    """One or more calls of a bulk operation failed."""

    def __init__(
        self,
        operation: str,
        message: str,
        failed_ids: Iterable[str],
        succeeded_ids: Iterable[str],
        cause: Optional[BaseException] = None,
    ):
        super().__init__(operation, message, cause=cause)
        self.failed_ids = list(failed_ids)
        self.succeeded_ids = list(succeeded_ids)


class OperationInProgressError(ProductBoardError):
    """Another intent for the same product has not settled yet."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"An operation on product {product_id} is already in progress")


class RoleNotAllowedError(ProductBoardError, PermissionError):
    """The current role may not perform this intent."""

    def __init__(self, role: str, intent: str):
        self.role = role
        self.intent = intent
        super().__init__(f"Role '{role}' is not allowed to {intent}")


class UnknownProductError(ProductBoardError, KeyError):
    """No product with this id is known locally."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(product_id)

    def __str__(self) -> str:
        return f"Unknown product: {self.product_id}"


class ProductNotFoundError(ProductBoardError, LookupError):
    """The store has no product with this id."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")
