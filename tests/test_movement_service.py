import unittest

from stockdash.core.constants import ENTRIES, OUTPUTS
from stockdash.services.movement_service import (
    attach_product_names,
    list_entries,
    list_outputs,
    movement_stats,
    search_movements,
)
from stockdash.services.product_service import list_products
from tests.fakes import MemoryBackend, bananas


class MovementServiceTest(unittest.TestCase):
    def setUp(self):
        self.backend = MemoryBackend(
            products=[bananas(), bananas(id="2", name="Tomatoes")],
            entries=[
                {"id": 1, "productId": 1, "quantity": 5, "date": "2024-06-08T10:00:00.000Z"},
                {"id": 2, "productId": 999, "quantity": 2.5, "date": "2024-06-10T08:00:00.000Z"},
                {"id": 3, "productId": "2", "quantity": 4, "date": "2024-06-09T12:30:00+00:00"},
            ],
            outputs=[
                {"id": 1, "productId": 2, "quantity": 1, "date": "2024-06-10T09:00:00Z"},
            ],
        )
        self.products = list_products(self.backend)

    def test_entries_are_newest_first(self):
        self.assertEqual([entry.id for entry in list_entries(self.backend)], [2, 3, 1])

    def test_missing_product_is_labelled_not_dropped(self):
        rows = attach_product_names(list_entries(self.backend), self.products, ENTRIES)
        self.assertEqual(len(rows), 3)
        missing = rows[0]
        self.assertTrue(missing.product_missing)
        self.assertEqual(missing.product_name, "Product not found (ID: 999)")
        self.assertEqual(rows[1].product_name, "Tomatoes")
        self.assertFalse(rows[1].product_missing)
        self.assertEqual(rows[2].kind, "entry")

    def test_wire_shape_uses_camel_case(self):
        rows = attach_product_names(list_outputs(self.backend), self.products, OUTPUTS)
        dumped = rows[0].model_dump(mode="json", by_alias=True)
        self.assertEqual(dumped["productId"], 2)
        self.assertEqual(dumped["productName"], "Tomatoes")
        self.assertEqual(dumped["kind"], "output")

    def test_search_and_stats(self):
        rows = attach_product_names(list_entries(self.backend), self.products, ENTRIES)
        self.assertEqual([row.id for row in search_movements(rows, " banan ")], [1])
        self.assertEqual([row.id for row in search_movements(rows, "not found")], [2])
        self.assertEqual(len(search_movements(rows, "")), 3)

        stats = movement_stats(rows)
        self.assertEqual(stats.total_movements, 3)
        self.assertEqual(stats.total_kg, 11.5)
        self.assertEqual(stats.unique_products, 3)


if __name__ == "__main__":
    unittest.main()
