# drinkshop/domain/cart.py
import secrets
import string
import time
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from drinkshop.domain import pricing
from drinkshop.domain.schemas import LineItem, Voucher, PriceSummary

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_item_id(product_id: str) -> str:
    """ID pozycji: produkt + znacznik czasu + losowy sufiks."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{product_id}-{int(time.time() * 1000)}-{suffix}"


def _same_options(a: LineItem, b: LineItem) -> bool:
    if a.product_id != b.product_id:
        return False
    if not a.is_drink:
        return True
    return a.size == b.size and a.ice == b.ice and a.sugar == b.sugar


class Cart(BaseModel):
    """
    Snapshot koszyka jednej sesji.
    Mutatory nie zmieniaja obiektu tylko zwracaja nowy snapshot,
    wartosci pochodne (subtotal, dostawa, rabat, total) liczone przy kazdym wywolaniu.
    """

    model_config = ConfigDict(frozen=True)

    items: Tuple[LineItem, ...] = ()
    selected_voucher: Voucher | None = None

    #commands
    def add_item(self, item: LineItem, merge_identical: bool = False) -> "Cart":
        if merge_identical:
            for idx, existing in enumerate(self.items):
                if _same_options(existing, item):
                    merged = existing.model_copy(
                        update={"quantity": existing.quantity + item.quantity}
                    )
                    items = self.items[:idx] + (merged,) + self.items[idx + 1:]
                    return self.model_copy(update={"items": items})

        return self.model_copy(update={"items": self.items + (item,)})

    def remove_item(self, item_id: str) -> "Cart":
        items = tuple(i for i in self.items if i.id != item_id)
        return self.model_copy(update={"items": items})

    def set_quantity(self, item_id: str, quantity: int) -> "Cart":
        # ilosc <= 0 oznacza usuniecie, nie trzymamy pozycji z zerem
        if quantity <= 0:
            return self.remove_item(item_id)

        items = tuple(
            i.model_copy(update={"quantity": quantity}) if i.id == item_id else i
            for i in self.items
        )
        return self.model_copy(update={"items": items})

    def select_voucher(self, voucher: Voucher) -> "Cart":
        return self.model_copy(update={"selected_voucher": voucher})

    def clear_voucher(self) -> "Cart":
        return self.model_copy(update={"selected_voucher": None})

    def clear(self) -> "Cart":
        return Cart()

    #query
    def get_item(self, item_id: str) -> LineItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    def subtotal(self) -> Decimal:
        return pricing.subtotal(self.items)

    def total_items(self) -> int:
        return pricing.total_items(self.items)

    def shipping_fee(self) -> Decimal:
        return pricing.shipping_fee(self.items, self.selected_voucher)

    def discount_amount(self) -> Decimal:
        return pricing.discount_amount(self.items, self.selected_voucher)

    def total_price(self) -> Decimal:
        return pricing.total_price(self.items, self.selected_voucher)

    def is_voucher_valid(self) -> bool:
        return pricing.is_voucher_valid(self.selected_voucher, self.subtotal())

    def checkout_blocked(self) -> bool:
        return pricing.checkout_blocked(self.selected_voucher, self.subtotal())

    def summary(self) -> PriceSummary:
        return pricing.summarize(self.items, self.selected_voucher)
