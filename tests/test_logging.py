import json
import logging
import unittest

from stockdash.config import Settings
from stockdash.core.logging import JsonFormatter, build_formatter, setup_logging


class LoggingTest(unittest.TestCase):
    def tearDown(self):
        setup_logging(Settings())

    def test_json_formatter_includes_error_code(self):
        record = logging.LogRecord("stockdash.test", logging.WARNING, __file__, 1, "stock %s", ("low",), None)
        record.error_code = "INSUFFICIENT_STOCK"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["message"], "stock low")
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["error_code"], "INSUFFICIENT_STOCK")

    def test_json_formatter_carries_ledger_fields(self):
        record = logging.LogRecord("stockdash.ledger", logging.ERROR, __file__, 1, "partial", (), None)
        record.product_id = 7
        record.movement_state = "failed_partial"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["product_id"], 7)
        self.assertEqual(payload["movement_state"], "failed_partial")
        self.assertNotIn("error_code", payload)

    def test_plain_output_and_unknown_level(self):
        setup_logging(Settings(LOG_LEVEL="chatty", LOG_JSON=False))
        root = logging.getLogger()
        self.assertEqual(root.level, logging.INFO)
        self.assertNotIsInstance(root.handlers[0].formatter, JsonFormatter)
        self.assertEqual(logging.getLogger("httpx").level, logging.WARNING)
        self.assertIsInstance(build_formatter(True), JsonFormatter)

    def test_setup_installs_single_handler(self):
        setup_logging(Settings(LOG_LEVEL="debug", LOG_JSON=True))
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JsonFormatter)
        self.assertEqual(logging.getLogger("sqlalchemy.engine").level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
