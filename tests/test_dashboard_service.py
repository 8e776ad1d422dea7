import unittest
from datetime import date

from stockdash.core.constants import ENTRIES
from stockdash.core.errors import BackendUnavailable, ValidationError
from stockdash.services.dashboard_service import (
    dashboard_summary,
    expiration_report,
    near_expiry_notice,
)
from tests.fakes import MemoryBackend, bananas

TODAY = date(2024, 6, 10)


def _backend():
    return MemoryBackend(
        products=[
            bananas(),
            bananas(id=2, name="Tomatoes", price=18, stock=12, expirationDate="2024-06-13"),
            bananas(id=3, name="Avocados", price=40, stock=2, expirationDate="2024-06-17"),
            bananas(id=4, name="Rice", price=22, stock=50, expirationDate="2024-12-01"),
        ],
        entries=[
            {"id": n, "productId": 4, "quantity": 1, "date": "2024-06-%02dT08:00:00Z" % n}
            for n in range(1, 11)
        ],
        outputs=[
            {"id": 1, "productId": 999, "quantity": 3, "date": "2024-06-09T08:00:00Z"},
        ],
    )


class DashboardSummaryTest(unittest.TestCase):
    def test_totals(self):
        summary = dashboard_summary(_backend(), TODAY)

        self.assertEqual(summary["product_count"], 4)
        self.assertEqual(summary["total_stock_kg"], 84)
        self.assertEqual(summary["total_value"], 200 + 216 + 80 + 1100)
        self.assertEqual(summary["expired"], {"count": 1, "loss_value": 200})
        self.assertEqual(summary["near_expiry"], {"count": 2, "risk_value": 296})
        self.assertEqual(summary["entry_count"], 10)
        self.assertEqual(summary["output_count"], 1)
        self.assertEqual(summary["missing_product_movements"], 1)

    def test_latest_movements_and_attention(self):
        summary = dashboard_summary(_backend(), TODAY)

        self.assertEqual(len(summary["latest_entries"]), 8)
        self.assertEqual(summary["latest_entries"][0].id, 10)
        self.assertEqual(summary["latest_outputs"][0].product_name, "Product not found (ID: 999)")
        self.assertEqual(
            [(view.name, view.days_until) for view in summary["attention"]],
            [("Bananas", -5), ("Tomatoes", 3), ("Avocados", 7)],
        )

    def test_failed_load_raises(self):
        backend = _backend()
        backend.fail("list", ENTRIES)
        with self.assertRaises(BackendUnavailable):
            dashboard_summary(backend, TODAY)


class ExpirationReportTest(unittest.TestCase):
    def test_stats_and_notice(self):
        report = expiration_report(_backend(), TODAY)

        self.assertEqual(report["total"], 4)
        self.assertEqual(report["count"], 4)
        self.assertEqual(report["stats"]["expired"], {"count": 1, "stock_kg": 20.0})
        self.assertEqual(report["stats"]["near_expiry"], {"count": 2, "stock_kg": 14.0})
        self.assertEqual(report["stats"]["current"], {"count": 1, "stock_kg": 50.0})
        self.assertEqual(report["notice"], "2 products are close to their expiration date.")

    def test_view_and_query_filters(self):
        report = expiration_report(_backend(), TODAY, view="near", query="avo")
        self.assertEqual([item.name for item in report["results"]], ["Avocados"])

        report = expiration_report(_backend(), TODAY, view="expired")
        self.assertEqual([item.name for item in report["results"]], ["Bananas"])

    def test_unknown_view(self):
        with self.assertRaises(ValidationError):
            expiration_report(_backend(), TODAY, view="soon")

    def test_notice_wording(self):
        self.assertIsNone(near_expiry_notice(0))
        self.assertEqual(near_expiry_notice(1), "1 product is close to its expiration date.")


if __name__ == "__main__":
    unittest.main()
