STATUS_EXPIRED = "expired"
STATUS_NEAR_EXPIRY = "near_expiry"
STATUS_CURRENT = "current"
EXPIRATION_STATUSES = (STATUS_EXPIRED, STATUS_NEAR_EXPIRY, STATUS_CURRENT)

NEAR_EXPIRY_DAYS = 7
MS_PER_DAY = 86_400_000

STOCK_LOW_MAX_KG = 5
STOCK_MID_MAX_KG = 15
STOCK_LEVELS = ("low", "mid", "high")
# Decimal places kept on stored stock (grams for kg quantities).
STOCK_PRECISION = 3

PRODUCTS = "products"
ENTRIES = "entries"
OUTPUTS = "outputs"
COLLECTIONS = (PRODUCTS, ENTRIES, OUTPUTS)

LATEST_MOVEMENTS_LIMIT = 8
MISSING_PRODUCT_LABEL = "Product not found (ID: {})"

DEFAULT_DASHBOARD_PATH = "/dashboard/summary"
