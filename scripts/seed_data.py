import argparse
import logging
from datetime import date, timedelta

from stockdash.config import get_settings
from stockdash.core.constants import PRODUCTS
from stockdash.core.errors import StockDashError
from stockdash.core.logging import setup_logging
from stockdash.dependencies import build_backend
from stockdash.schemas.product import ProductCreate
from stockdash.services.product_service import create_product, delete_product, list_products
from stockdash.services.stock_ledger import StockLedger

logger = logging.getLogger("seed_data")

# name, price, stock (kg), days until expiration
SAMPLE_PRODUCTS = [
    ("Bananas", 10.0, 20.0, -5),
    ("Tomatoes", 18.5, 12.0, 3),
    ("Avocados", 45.0, 8.5, 7),
    ("Rice", 22.0, 50.0, 180),
    ("Beans", 28.0, 35.0, 240),
]


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample products into the configured backend.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing products before seeding.",
    )
    parser.add_argument(
        "--with-movements",
        action="store_true",
        help="Record one entry and one output per product through the stock ledger.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    settings = get_settings()

    if settings.BACKEND_MODE.strip().lower() == "sql":
        from stockdash.database import Base, engine
        from stockdash.models import import_all_models

        import_all_models()
        Base.metadata.create_all(bind=engine)

    backend = build_backend(settings)
    try:
        if args.reset:
            for product in list_products(backend):
                delete_product(backend, product.id)

        if backend.list(PRODUCTS):
            print("Seed skipped: products already exist.")
            return

        today = date.today()
        ledger = StockLedger(backend)
        for name, price, stock, days in SAMPLE_PRODUCTS:
            product = create_product(
                backend,
                ProductCreate(
                    name=name,
                    price=price,
                    stock=stock,
                    expiration_date=today + timedelta(days=days),
                ),
            )
            if args.with_movements:
                ledger.record_entry(product.id, 5)
                ledger.record_output(product.id, 2.5)
        print("Seeded {} products.".format(len(SAMPLE_PRODUCTS)))
    except StockDashError as exc:
        logger.error("Seeding failed: %s", exc)
        raise SystemExit(1) from exc
    finally:
        backend.close()


if __name__ == "__main__":
    main()
