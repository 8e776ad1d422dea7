import logging
from contextlib import contextmanager
from datetime import timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from stockdash.backend.base import ResourceBackend, check_collection
from stockdash.core.constants import ENTRIES, OUTPUTS, PRODUCTS
from stockdash.core.dates import normalize_date, normalize_timestamp
from stockdash.core.errors import BackendUnavailable, NotFound, ValidationError
from stockdash.models.movement import EntryRecord, OutputRecord
from stockdash.models.product import ProductRecord
from stockdash.schemas.common import coerce_identifier

logger = logging.getLogger(__name__)

_MODELS = {
    PRODUCTS: ProductRecord,
    ENTRIES: EntryRecord,
    OUTPUTS: OutputRecord,
}

# wire key -> column attribute
_FIELDS = {
    PRODUCTS: {
        "id": "id",
        "name": "name",
        "price": "price",
        "stock": "stock",
        "expirationDate": "expiration_date",
    },
    ENTRIES: {
        "id": "id",
        "productId": "product_id",
        "quantity": "quantity",
        "date": "date",
    },
    OUTPUTS: {
        "id": "id",
        "productId": "product_id",
        "quantity": "quantity",
        "date": "date",
    },
}


def _to_column_value(column, value):
    if value is None:
        return None
    if column == "expiration_date":
        parsed = normalize_date(value)
        if parsed is None:
            raise ValidationError("expirationDate", "expected a YYYY-MM-DD date")
        return parsed
    if column == "date":
        parsed = normalize_timestamp(value)
        if parsed is None:
            raise ValidationError("date", "expected an ISO-8601 timestamp")
        return parsed.astimezone(timezone.utc)
    if column in ("id", "product_id"):
        identifier = coerce_identifier(value)
        if not isinstance(identifier, int):
            raise ValidationError(column, "expected an integer id")
        return identifier
    return value


def _to_wire_value(column, value):
    if value is None:
        return None
    if column == "expiration_date":
        return value.isoformat()
    if column == "date":
        return normalize_timestamp(value).isoformat()
    return value


def _row_to_dict(collection, row):
    return {
        wire: _to_wire_value(column, getattr(row, column))
        for wire, column in _FIELDS[collection].items()
    }


def _assign(collection, row, payload):
    fields = _FIELDS[collection]
    for key, value in payload.items():
        column = fields.get(key)
        if column is None or column == "id":
            continue
        setattr(row, column, _to_column_value(column, value))


class SqlBackend(ResourceBackend):
    """Resource API over a local SQL database.

    Each call commits on its own unless it runs inside ``transaction()``,
    where all calls share one session and commit or roll back together.
    """

    name = "sql"
    supports_transactions = True

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self._session = None

    @contextmanager
    def _session_scope(self):
        if self._session is not None:
            yield self._session
            return
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database operation failed")
            raise BackendUnavailable("Database error: {}".format(exc.__class__.__name__)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def transaction(self):
        if self._session is not None:
            yield self
            return
        session = self._session_factory()
        self._session = session
        try:
            yield self
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Database transaction failed")
            raise BackendUnavailable("Database error: {}".format(exc.__class__.__name__)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            self._session = None
            session.close()

    def _load(self, session, collection, identifier):
        model = _MODELS[collection]
        key = coerce_identifier(identifier)
        row = session.get(model, key) if isinstance(key, int) else None
        if row is None:
            raise NotFound(collection, identifier)
        return row

    def list(self, collection):
        model = _MODELS[check_collection(collection)]
        with self._session_scope() as session:
            rows = session.execute(select(model).order_by(model.id)).scalars().all()
            return [_row_to_dict(collection, row) for row in rows]

    def get(self, collection, identifier):
        check_collection(collection)
        with self._session_scope() as session:
            return _row_to_dict(collection, self._load(session, collection, identifier))

    def create(self, collection, payload):
        model = _MODELS[check_collection(collection)]
        row = model()
        if payload.get("id") is not None:
            row.id = _to_column_value("id", payload["id"])
        _assign(collection, row, payload)
        with self._session_scope() as session:
            session.add(row)
            session.flush()
            return _row_to_dict(collection, row)

    def update(self, collection, identifier, changes):
        check_collection(collection)
        with self._session_scope() as session:
            row = self._load(session, collection, identifier)
            _assign(collection, row, changes)
            session.flush()
            return _row_to_dict(collection, row)

    def delete(self, collection, identifier):
        check_collection(collection)
        with self._session_scope() as session:
            session.delete(self._load(session, collection, identifier))
            session.flush()


__all__ = ["SqlBackend"]
