import importlib

from stockdash.models.movement import EntryRecord, OutputRecord
from stockdash.models.product import ProductRecord


def import_all_models() -> None:
    for module_name in (
        "stockdash.models.movement",
        "stockdash.models.product",
    ):
        importlib.import_module(module_name)


__all__ = ["EntryRecord", "OutputRecord", "ProductRecord", "import_all_models"]
