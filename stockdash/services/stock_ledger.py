"""Stock ledger coordinator.

Every committed movement is reflected exactly once in both the movement
history (``entries`` / ``outputs``) and the product's live stock level:

1. validate (positive quantity, product exists, outputs covered by a fresh
   read of current stock); rejected submissions write nothing
2. append the immutable movement record
3. re-read the product and write the adjusted stock

Step 2 always completes before step 3 starts. When step 3 fails the
movement stays appended and the submission ends in ``FAILED_PARTIAL``;
nothing is rolled back. Backends that support transactions run steps 2 and
3 in one transaction, so a failure there is a clean ``FAILED``.

There is no concurrency control across clients: two simultaneous outputs can
both pass validation and jointly overdraw stock. Closing that gap needs a
compare-and-swap or transactional update on the backend.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from stockdash.backend.base import ResourceBackend
from stockdash.core.constants import ENTRIES, OUTPUTS, PRODUCTS, STOCK_PRECISION
from stockdash.core.dates import normalize_timestamp, utc_now
from stockdash.core.errors import (
    InsufficientStock,
    PartialFailure,
    StockDashError,
    ValidationError,
)
from stockdash.schemas.product import ProductRead
from stockdash.services.product_service import get_product, parse_product

logger = logging.getLogger(__name__)


class MovementKind(str, Enum):
    ENTRY = "entry"
    OUTPUT = "output"


class MovementState(str, Enum):
    DRAFT = "draft"
    VALIDATING = "validating"
    REJECTED = "rejected"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"
    FAILED_PARTIAL = "failed_partial"


TERMINAL_STATES = frozenset(
    {
        MovementState.REJECTED,
        MovementState.COMMITTED,
        MovementState.FAILED,
        MovementState.FAILED_PARTIAL,
    }
)

_COLLECTIONS = {
    MovementKind.ENTRY: ENTRIES,
    MovementKind.OUTPUT: OUTPUTS,
}


@dataclass
class MovementSubmission:
    kind: MovementKind
    product_id: object
    quantity: object
    timestamp: Optional[datetime] = None
    state: MovementState = MovementState.DRAFT
    movement: Optional[dict] = None
    product: Optional[ProductRead] = None
    error: Optional[StockDashError] = None
    history: list = field(default_factory=list)

    def advance(self, state: MovementState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError("submission already finished as {}".format(self.state.value))
        self.history.append(self.state)
        self.state = state


def _validate_quantity(quantity) -> float:
    if isinstance(quantity, bool):
        raise ValidationError("quantity", "must be a positive number")
    try:
        value = float(quantity)
    except (TypeError, ValueError) as exc:
        raise ValidationError("quantity", "must be a positive number") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("quantity", "must be a positive number")
    return value


def _remaining(stock, quantity) -> float:
    return round(stock - quantity, STOCK_PRECISION)


def _resolve_timestamp(timestamp) -> datetime:
    if timestamp is None:
        return utc_now()
    resolved = normalize_timestamp(timestamp)
    if resolved is None:
        raise ValidationError("date", "expected an ISO-8601 timestamp")
    return resolved


class StockLedger:
    def __init__(self, backend: ResourceBackend):
        self.backend = backend

    def record_entry(self, product_id, quantity, timestamp=None) -> ProductRead:
        submission = self.submit(
            MovementSubmission(MovementKind.ENTRY, product_id, quantity, timestamp)
        )
        return submission.product

    def record_output(self, product_id, quantity, timestamp=None) -> ProductRead:
        submission = self.submit(
            MovementSubmission(MovementKind.OUTPUT, product_id, quantity, timestamp)
        )
        return submission.product

    def submit(self, submission: MovementSubmission) -> MovementSubmission:
        """Drive a submission to a terminal state.

        Returns the committed submission; raises the error of any other
        terminal state after recording it on the submission.
        """
        try:
            self._validate(submission)
        except StockDashError as exc:
            self._finish(submission, MovementState.REJECTED, exc)
            raise
        submission.advance(MovementState.COMMITTING)
        if self.backend.supports_transactions:
            self._commit_atomic(submission)
        else:
            self._commit_sequential(submission)
        self._finish(submission, MovementState.COMMITTED)
        return submission

    def _validate(self, submission):
        submission.advance(MovementState.VALIDATING)
        submission.quantity = _validate_quantity(submission.quantity)
        submission.timestamp = _resolve_timestamp(submission.timestamp)
        # Fresh read; a client-held stock value may be stale.
        product = get_product(self.backend, submission.product_id)
        if submission.kind is MovementKind.OUTPUT and _remaining(product.stock, submission.quantity) < 0:
            raise InsufficientStock(product.id, submission.quantity, product.stock)
        submission.product_id = product.id
        submission.product = product

    def _commit_sequential(self, submission):
        try:
            submission.movement = self._append_movement(submission)
        except StockDashError as exc:
            self._finish(submission, MovementState.FAILED, exc)
            raise
        try:
            submission.product = self._adjust_stock(submission)
        except StockDashError as exc:
            partial = PartialFailure(submission.movement, submission.product_id, exc)
            self._finish(submission, MovementState.FAILED_PARTIAL, partial)
            raise partial from exc

    def _commit_atomic(self, submission):
        try:
            with self.backend.transaction():
                movement = self._append_movement(submission)
                product = self._adjust_stock(submission)
        except StockDashError as exc:
            self._finish(submission, MovementState.FAILED, exc)
            raise
        submission.movement = movement
        submission.product = product

    def _append_movement(self, submission) -> dict:
        payload = {
            "productId": submission.product_id,
            "quantity": submission.quantity,
            "date": submission.timestamp.astimezone(timezone.utc).isoformat(),
        }
        return self.backend.create(_COLLECTIONS[submission.kind], payload)

    def _adjust_stock(self, submission) -> ProductRead:
        current = get_product(self.backend, submission.product_id)
        if submission.kind is MovementKind.ENTRY:
            new_stock = round(current.stock + submission.quantity, STOCK_PRECISION)
        else:
            new_stock = _remaining(current.stock, submission.quantity)
            if new_stock < 0:
                raise InsufficientStock(current.id, submission.quantity, current.stock)
        updated = self.backend.update(PRODUCTS, submission.product_id, {"stock": new_stock})
        return parse_product(updated)

    def _finish(self, submission, state, error=None):
        submission.error = error
        submission.advance(state)
        if state is MovementState.COMMITTED:
            logger.info(
                "Recorded %s of %s kg for product %s (stock now %s kg)",
                submission.kind.value,
                submission.quantity,
                submission.product_id,
                submission.product.stock,
            )
        elif state is MovementState.FAILED_PARTIAL:
            logger.error(
                "Ledger inconsistency: %s %s appended for product %s but stock not updated: %s",
                submission.kind.value,
                (submission.movement or {}).get("id"),
                submission.product_id,
                error.cause,
                extra={
                    "error_code": error.code,
                    "product_id": submission.product_id,
                    "movement_state": state.value,
                },
            )
        else:
            logger.warning(
                "%s for product %s ended %s: %s",
                submission.kind.value.capitalize(),
                submission.product_id,
                state.value,
                error,
                extra={
                    "error_code": getattr(error, "code", None),
                    "product_id": submission.product_id,
                    "movement_state": state.value,
                },
            )


__all__ = [
    "MovementKind",
    "MovementState",
    "MovementSubmission",
    "StockLedger",
    "TERMINAL_STATES",
]
