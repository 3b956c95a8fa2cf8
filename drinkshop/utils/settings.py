# drinkshop/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CART_TTL_SECONDS = int(os.getenv("CART_TTL_SECONDS", 2*60*60))

#ceny w dongach (VND), zawsze calkowite
SHIPPING_FEE = Decimal(os.getenv("SHIPPING_FEE", "20000"))
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "300000"))
MERGE_IDENTICAL_ITEMS = os.getenv("MERGE_IDENTICAL_ITEMS", "false").lower() in ("1", "true", "yes")

TABLE_API_URL = os.getenv("TABLE_API_URL", "https://api.baserow.io/api/database/rows/table")
TABLE_API_TOKEN = os.getenv("TABLE_API_TOKEN", "")
PRODUCTS_TABLE_ID = int(os.getenv("PRODUCTS_TABLE_ID", 760465))
VOUCHERS_TABLE_ID = int(os.getenv("VOUCHERS_TABLE_ID", 760470))
ORDERS_TABLE_ID = int(os.getenv("ORDERS_TABLE_ID", 760468))
ORDER_DETAILS_TABLE_ID = int(os.getenv("ORDER_DETAILS_TABLE_ID", 760469))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
