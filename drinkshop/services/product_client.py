# drinkshop/services/product_client.py
from decimal import Decimal
from typing import Any, Dict

from drinkshop.services.table_client import TableClient
from drinkshop.utils.settings import PRODUCTS_TABLE_ID
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)

_NO_IMAGE = "https://placehold.co/150x150/f0f9ff/64748b?text=No+Image"


def _link_value(value: Any) -> str:
    #kolumna link row przychodzi jako lista [{"id": .., "value": ..}]
    if isinstance(value, list):
        return str(value[0].get("value", "")) if value else ""
    return value or ""


class ProductClient:
    def __init__(self, table_client: TableClient | None = None, table_id: int = PRODUCTS_TABLE_ID):
        self.table = table_client or TableClient()
        self.table_id = table_id

    def fetch_product(self, product_id: int) -> Dict[str, Any]:
        logger.info(f"ProductClient fetch product {product_id}")
        row = self.table.get_row(self.table_id, product_id)

        return {
            "id": row["id"],
            "name": row.get("name", ""),
            "price": Decimal(str(row.get("price") or 0)),
            "image": row.get("image") or _NO_IMAGE,
            "category": _link_value(row.get("category")),
        }
