# drinkshop/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any, List

import requests

from drinkshop.domain import pricing
from drinkshop.domain.cart import Cart, new_item_id
from drinkshop.domain.schemas import LineItem
from drinkshop.repos.cart_repo import CartRepo
from drinkshop.services.product_client import ProductClient
from drinkshop.services.voucher_client import VoucherClient
from drinkshop.utils.settings import MERGE_IDENTICAL_ITEMS
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)


def _not_found(exc: requests.RequestException) -> bool:
    response = getattr(exc, "response", None)
    return response is not None and response.status_code == 404


class CartService:
    """
    Use case'y koszyka sesji.
    commands (add, remove, set quantity, voucher, clear) zapisuja nowy snapshot
    query (get, list vouchers) tylko odczyt
    """

    def __init__(
        self,
        repo: CartRepo,
        product_client: ProductClient,
        voucher_client: VoucherClient,
        merge_identical: bool = MERGE_IDENTICAL_ITEMS,
    ):
        self.repo = repo
        self.product_client = product_client
        self.voucher_client = voucher_client
        self.merge_identical = merge_identical

    @staticmethod
    def to_view(session_id: str, cart: Cart) -> Dict[str, Any]:
        summary = cart.summary()
        return {
            "session_id": session_id,
            "items": list(cart.items),
            "voucher": cart.selected_voucher,
            "summary": summary,
            "can_checkout": bool(cart.items) and not summary.checkout_blocked,
        }

    #query - odczyt
    def load(self, session_id: str) -> Cart:
        return self.repo.get_cart(session_id)

    def get_cart(self, session_id: str) -> Dict[str, Any]:
        return self.to_view(session_id, self.load(session_id))

    def list_vouchers(self, session_id: str) -> List[Dict[str, Any]]:
        """Lista voucherow z informacja czy pasuja do obecnego koszyka."""
        cart = self.load(session_id)
        amount = cart.subtotal()

        result = []
        for voucher in self.voucher_client.list_vouchers():
            eligible = not voucher.used and pricing.is_voucher_valid(voucher, amount)
            result.append({
                "voucher": voucher,
                "eligible": eligible,
                "projected_discount": (
                    pricing.discount_amount(cart.items, voucher) if eligible else Decimal("0")
                ),
            })
        return result

    #commands
    def _update(self, session_id: str, mutate) -> Cart:
        return self.repo.update_cart(session_id, mutate)

    @staticmethod
    def _require_item(cart: Cart, item_id: str) -> None:
        if cart.get_item(item_id) is None:
            raise ValueError("Pozycja nie istnieje w koszyku")

    def add_product(
        self,
        session_id: str,
        product_id: int,
        quantity: int,
        size: str = "M",
        ice: int = 100,
        sugar: int = 100,
        is_drink: bool = True,
    ) -> Dict[str, Any]:

        if quantity <= 0:
            raise ValueError("Ilosc musi byc wieksza niz 0")

        # cena zawsze z katalogu, nie od klienta
        try:
            pdata = self.product_client.fetch_product(product_id)
        except requests.RequestException as e:
            if _not_found(e):
                raise ValueError(f"Produkt {product_id} nie istnieje") from e
            raise

        item = LineItem(
            id=new_item_id(str(product_id)),
            product_id=str(product_id),
            name=pdata["name"],
            image=pdata["image"],
            price=pdata["price"],
            quantity=quantity,
            size=size,
            ice=ice,
            sugar=sugar,
            is_drink=is_drink,
        )

        cart = self._update(
            session_id, lambda c: c.add_item(item, merge_identical=self.merge_identical)
        )

        logger.info(
            f"Dodano produkt {product_id} x{quantity} do koszyka {session_id}, "
            f"subtotal: {cart.subtotal()}"
        )
        return self.to_view(session_id, cart)

    def remove_item(self, session_id: str, item_id: str) -> Dict[str, Any]:
        def mutate(cart: Cart) -> Cart:
            self._require_item(cart, item_id)
            return cart.remove_item(item_id)

        cart = self._update(session_id, mutate)
        logger.info(f"Usunieto pozycje {item_id} z koszyka {session_id}")
        return self.to_view(session_id, cart)

    def set_quantity(self, session_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        def mutate(cart: Cart) -> Cart:
            self._require_item(cart, item_id)
            updated = cart.set_quantity(item_id, quantity)
            if updated.checkout_blocked() and not cart.checkout_blocked():
                logger.info(
                    f"Voucher {cart.selected_voucher.code} przestal spelniac minimum "
                    f"w koszyku {session_id}"
                )
            return updated

        return self.to_view(session_id, self._update(session_id, mutate))

    def select_voucher(self, session_id: str, voucher_id: int) -> Dict[str, Any]:
        try:
            voucher = self.voucher_client.get_voucher(voucher_id)
        except requests.RequestException as e:
            if _not_found(e):
                raise ValueError(f"Voucher {voucher_id} nie istnieje") from e
            raise

        if voucher.used:
            raise ValueError(f"Voucher {voucher.code} zostal juz wykorzystany")

        # niewazny voucher tez zostaje wybrany, checkout jest wtedy zablokowany
        cart = self._update(session_id, lambda c: c.select_voucher(voucher))
        logger.info(
            f"Wybrano voucher {voucher.code} dla koszyka {session_id}, "
            f"wazny: {cart.is_voucher_valid()}"
        )
        return self.to_view(session_id, cart)

    def clear_voucher(self, session_id: str) -> Dict[str, Any]:
        return self.to_view(session_id, self._update(session_id, lambda c: c.clear_voucher()))

    def clear_cart(self, session_id: str) -> Dict[str, Any]:
        self.repo.delete_cart(session_id)
        return self.to_view(session_id, Cart())

    #checkout
    def claim_cart(self, session_id: str, cart: Cart) -> None:
        self.repo.claim_cart(session_id, cart)

    def restore_cart(self, session_id: str, cart: Cart) -> None:
        logger.info(f"Przywracanie koszyka sesji {session_id}")
        self.repo.save_cart(session_id, cart)
