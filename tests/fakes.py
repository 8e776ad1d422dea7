from stockdash.backend.base import ResourceBackend
from stockdash.core.constants import ENTRIES, OUTPUTS, PRODUCTS
from stockdash.core.errors import BackendUnavailable, NotFound


class MemoryBackend(ResourceBackend):
    """Dict-backed resource API with call recording and failure injection."""

    name = "memory"

    def __init__(self, products=None, entries=None, outputs=None):
        self.records = {PRODUCTS: {}, ENTRIES: {}, OUTPUTS: {}}
        self.calls = []
        self.failures = {}
        self.after_create = None
        for collection, items in ((PRODUCTS, products), (ENTRIES, entries), (OUTPUTS, outputs)):
            for item in items or []:
                self.records[collection][str(item["id"])] = dict(item)

    def fail(self, method, collection, error=None):
        self.failures[(method, collection)] = error or BackendUnavailable("backend down")

    def _enter(self, method, collection):
        self.calls.append((method, collection))
        failure = self.failures.get((method, collection))
        if failure is not None:
            raise failure

    def _record(self, collection, identifier):
        record = self.records[collection].get(str(identifier))
        if record is None:
            raise NotFound(collection, identifier)
        return record

    def list(self, collection):
        self._enter("list", collection)
        return [dict(record) for record in self.records[collection].values()]

    def get(self, collection, identifier):
        self._enter("get", collection)
        return dict(self._record(collection, identifier))

    def create(self, collection, payload):
        self._enter("create", collection)
        record = dict(payload)
        if record.get("id") is None:
            record["id"] = len(self.records[collection]) + 1
        self.records[collection][str(record["id"])] = record
        if self.after_create is not None:
            self.after_create(collection, record)
        return dict(record)

    def update(self, collection, identifier, changes):
        self._enter("update", collection)
        record = self._record(collection, identifier)
        record.update(changes)
        return dict(record)

    def delete(self, collection, identifier):
        self._enter("delete", collection)
        self._record(collection, identifier)
        del self.records[collection][str(identifier)]


def bananas(**overrides):
    product = {
        "id": 1,
        "name": "Bananas",
        "price": 10,
        "stock": 20,
        "expirationDate": "2024-06-05",
    }
    product.update(overrides)
    return product
