from abc import ABC, abstractmethod
from contextlib import contextmanager

from stockdash.core.constants import COLLECTIONS


class ResourceBackend(ABC):
    """Generic resource API: list/get/create/update/delete per collection.

    Records are plain dicts in wire shape (camelCase keys). ``get`` raises
    ``NotFound`` for a missing id; any other failure surfaces as
    ``BackendUnavailable``.
    """

    name = "base"
    supports_transactions = False

    @abstractmethod
    def list(self, collection: str) -> list[dict]:
        raise NotImplementedError

    @abstractmethod
    def get(self, collection: str, identifier) -> dict:
        raise NotImplementedError

    @abstractmethod
    def create(self, collection: str, payload: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def update(self, collection: str, identifier, changes: dict) -> dict:
        raise NotImplementedError

    @abstractmethod
    def delete(self, collection: str, identifier) -> None:
        raise NotImplementedError

    @contextmanager
    def transaction(self):
        # Backends without transactions run each call on its own.
        yield self

    def close(self) -> None:
        return None


def check_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError("Unknown collection: {}".format(collection))
    return collection


__all__ = ["ResourceBackend", "check_collection"]
