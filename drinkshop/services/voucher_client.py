# drinkshop/services/voucher_client.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from pydantic import ValidationError

from drinkshop.domain.schemas import Voucher
from drinkshop.services.table_client import TableClient
from drinkshop.utils.settings import VOUCHERS_TABLE_ID
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)


def _select_value(value: Any) -> Any:
    #single select: {"id": 1, "value": "percent", "color": ".."}
    if isinstance(value, dict):
        return value.get("value")
    return value


def _money(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def row_to_voucher(row: Dict[str, Any]) -> Voucher:
    return Voucher(
        id=row["id"],
        code=row.get("code", ""),
        title=row.get("title") or row.get("name") or "",
        type=_select_value(row.get("type")),
        discount=_money(row.get("discount")) or Decimal("0"),
        min_order=_money(row.get("min_order")),
        max_discount=_money(row.get("max_discount")),
        used=bool(row.get("used", False)),
    )


class VoucherClient:
    def __init__(self, table_client: TableClient | None = None, table_id: int = VOUCHERS_TABLE_ID):
        self.table = table_client or TableClient()
        self.table_id = table_id

    def list_vouchers(self) -> List[Voucher]:
        vouchers = []
        for row in self.table.list_rows(self.table_id):
            try:
                vouchers.append(row_to_voucher(row))
            except (ValidationError, InvalidOperation) as e:
                # jeden zle wpisany wiersz nie moze zablokowac calej listy
                logger.warning(f"Pomijam niepoprawny voucher {row.get('id')}: {e}")
        return vouchers

    def get_voucher(self, voucher_id: int) -> Voucher:
        row = self.table.get_row(self.table_id, voucher_id)
        try:
            return row_to_voucher(row)
        except (ValidationError, InvalidOperation) as e:
            raise ValueError(f"Voucher {voucher_id} ma niepoprawne dane") from e

    def mark_used(self, voucher_id: int) -> Voucher:
        logger.info(f"Voucher {voucher_id} oznaczony jako wykorzystany")
        row = self.table.update_row(self.table_id, voucher_id, {"used": True})
        return row_to_voucher(row)
