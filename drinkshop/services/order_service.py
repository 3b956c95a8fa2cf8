# drinkshop/services/order_service.py
import random
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

import requests

from drinkshop.services.cart_service import CartService
from drinkshop.services.notification_service import NotificationService
from drinkshop.services.table_client import TableClient, link_row_filter
from drinkshop.services.voucher_client import VoucherClient
from drinkshop.utils.settings import ORDERS_TABLE_ID, ORDER_DETAILS_TABLE_ID
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)

CANCELLABLE_STATUSES = ("pending",)


def _first_link_id(value: Any) -> int | None:
    if isinstance(value, list) and value:
        return value[0].get("id")
    return None


def _status(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("value", "")
    return value or ""


def order_name(user_id: int, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now.strftime('%Y%m%d%H%M%S')}-{random.randint(0, 999)}-{user_id}"


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Zamowienia zapisywane sa w hostowanych tabelach (naglowek + pozycje),
    koszyk sesji zyje tylko do checkoutu.
    """

    def __init__(
        self,
        cart_service: CartService,
        table_client: TableClient,
        voucher_client: VoucherClient,
        notification_service: NotificationService | None = None,
    ):
        self.cart_service = cart_service
        self.table = table_client
        self.voucher_client = voucher_client
        self.notification_service = notification_service or NotificationService()

    @staticmethod
    def _to_out(row: Dict[str, Any], details: List[Dict[str, Any]] | None = None) -> Dict[str, Any]:
        return {
            "id": row["id"],
            "name": row.get("name"),
            "user_id": _first_link_id(row.get("user")),
            "status": _status(row.get("status")),
            "amount": Decimal(str(row.get("amount") or 0)),
            "method": row.get("method"),
            "notes": row.get("notes"),
            "voucher_id": _first_link_id(row.get("voucher")),
            "items": [
                {
                    "product_id": _first_link_id(d.get("Product")),
                    "quantity": d.get("quantity") or 0,
                    "price": Decimal(str(d.get("price") or 0)),
                    "total": Decimal(str(d.get("total") or 0)),
                    "size": d.get("size"),
                    "ice": d.get("ice"),
                    "sugar": d.get("sugar"),
                    "is_drink": d.get("is_drink"),
                }
                for d in details or []
            ],
        }

    def _check_voucher_still_free(self, voucher) -> None:
        # snapshot w sesji moze byc stary - ten sam voucher mogl zostac uzyty w innej sesji
        try:
            current = self.voucher_client.get_voucher(voucher.id)
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise ValueError(f"Voucher {voucher.code} nie istnieje") from e
            raise

        if current.used:
            raise ValueError(f"Voucher {voucher.code} zostal juz wykorzystany")

    def _cancel_header(self, order_id: int) -> None:
        try:
            self.table.update_row(ORDERS_TABLE_ID, order_id, {"status": "cancelled"})
        except requests.RequestException as e:
            logger.error(f"Nie udalo sie anulowac niepelnego zamowienia {order_id}: {e}")

    def checkout(
        self,
        session_id: str,
        user_id: int,
        address_id: int,
        payment_method: str,
        note: str | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: zlozenie zamowienia z koszyka sesji.

        1. Sprawdza czy koszyk nie jest pusty, czy voucher spelnia minimum
           i czy nie zostal w miedzyczasie wykorzystany
        2. Zdejmuje koszyk z sesji (drugi rownolegly checkout dostaje konflikt)
        3. Tworzy naglowek zamowienia i pozycje
        4. Oznacza voucher jako wykorzystany i wysyla powiadomienie (async)

        Blad przy zapisie pozycji anuluje naglowek i przywraca koszyk.
        """
        cart = self.cart_service.load(session_id)

        if not cart.items:
            raise ValueError("Koszyk jest pusty")

        if cart.checkout_blocked():
            raise ValueError(cart.summary().warning)

        voucher = cart.selected_voucher
        if voucher:
            self._check_voucher_still_free(voucher)

        total = cart.total_price()
        self.cart_service.claim_cart(session_id, cart)

        order_id = None
        try:
            header = self.table.create_row(ORDERS_TABLE_ID, {
                "name": order_name(user_id),
                "notes": note,
                "status": "pending",
                "amount": str(total),
                "method": payment_method,
                "address": [address_id],
                "voucher": [voucher.id] if voucher else [],
                "user": [user_id],
            })
            order_id = header["id"]

            details = []
            for item in cart.items:
                details.append(self.table.create_row(ORDER_DETAILS_TABLE_ID, {
                    "quantity": item.quantity,
                    "price": str(item.price),
                    "total": str(item.price * item.quantity),
                    "size": item.size,
                    "ice": item.ice,
                    "sugar": item.sugar,
                    "is_drink": item.is_drink,
                    "Product": [int(item.product_id)],
                    "orders": [order_id],
                }))
        except Exception:
            logger.warning(f"Checkout sesji {session_id} przerwany, przywracam koszyk")
            if order_id is not None:
                self._cancel_header(order_id)
            self.cart_service.restore_cart(session_id, cart)
            raise

        logger.info(f"Order {order_id} created from session {session_id}, total {total}")

        # zamowienie jest juz zapisane - bledy ponizej tylko logujemy
        if voucher:
            try:
                self.voucher_client.mark_used(voucher.id)
            except requests.RequestException as e:
                logger.error(f"Voucher {voucher.id} nie oznaczony jako uzyty (order {order_id}): {e}")

        try:
            self.notification_service.send_order_notification(user_id, order_id, str(total))
        except Exception as e:
            logger.warning(f"Nie wyslano powiadomienia dla order {order_id}: {e}")

        return self._to_out(header, details)

    def get_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamowienia (Query).
        """
        try:
            row = self.table.get_row(ORDERS_TABLE_ID, order_id)
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise ValueError("Zamowienie nie istnieje") from e
            raise

        if _first_link_id(row.get("user")) != user_id:
            raise PermissionError("Brak dostepu do zamowienia")

        details = self.table.list_rows(
            ORDER_DETAILS_TABLE_ID, filters=link_row_filter("orders", order_id)
        )
        return self._to_out(row, details)

    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        rows = self.table.list_rows(ORDERS_TABLE_ID, filters=link_row_filter("user", user_id))
        return [self._to_out(r) for r in rows]

    def cancel_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.get_order(order_id, user_id)

        if order["status"] not in CANCELLABLE_STATUSES:
            raise ValueError(f"Nie mozna anulowac zamowienia w statusie {order['status']}")

        row = self.table.update_row(ORDERS_TABLE_ID, order_id, {"status": "cancelled"})

        logger.info(f"Order {order_id} cancelled by user {user_id}")
        cancelled = self._to_out(row)
        cancelled["items"] = order["items"]
        return cancelled
