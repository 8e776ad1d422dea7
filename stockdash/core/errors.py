"""Typed errors raised by the stock dashboard.

Every error carries a machine-readable ``code`` so callers can branch on the
type instead of parsing messages:

    StockDashError
    +-- NotFound               NOT_FOUND
    +-- ValidationError        VALIDATION_ERROR
    +-- InsufficientStock      INSUFFICIENT_STOCK
    +-- BackendUnavailable     BACKEND_UNAVAILABLE
    +-- PartialFailure         PARTIAL_FAILURE
"""


class StockDashError(Exception):
    code = "STOCKDASH_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class NotFound(StockDashError):
    code = "NOT_FOUND"

    def __init__(self, collection: str, identifier):
        self.collection = collection
        self.identifier = identifier
        super().__init__("{} not found for id {}".format(collection, identifier))

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["collection"] = self.collection
        payload["id"] = self.identifier
        return payload


class ValidationError(StockDashError):
    """Local input rule failed; raised before any backend write."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__("{}: {}".format(field, message))

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["field"] = self.field
        return payload


class InsufficientStock(StockDashError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id, requested: float, available: float):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            "Not enough stock for product {}: requested {} kg, available {} kg".format(
                product_id, requested, available
            )
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            product_id=self.product_id,
            requested=self.requested,
            available=self.available,
        )
        return payload


class BackendUnavailable(StockDashError):
    code = "BACKEND_UNAVAILABLE"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["retry"] = True
        return payload


class PartialFailure(StockDashError):
    """The movement record was appended but the stock level was not adjusted.

    The ledger and the product's stock no longer agree. Nothing is rolled
    back; the appended movement is kept for manual reconciliation.
    """

    code = "PARTIAL_FAILURE"

    def __init__(self, movement: dict, product_id, cause: Exception):
        self.movement = movement
        self.product_id = product_id
        self.cause = cause
        super().__init__(
            "Movement {} was recorded but stock for product {} was not updated: {}".format(
                movement.get("id"), product_id, cause
            )
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            product_id=self.product_id,
            movement=self.movement,
            cause=getattr(self.cause, "code", type(self.cause).__name__),
            uncertain=True,
        )
        return payload


__all__ = [
    "BackendUnavailable",
    "InsufficientStock",
    "NotFound",
    "PartialFailure",
    "StockDashError",
    "ValidationError",
]
