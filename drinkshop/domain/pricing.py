# drinkshop/domain/pricing.py
"""
Wyliczenia ceny koszyka i walidacja vouchera.

Czyste funkcje - ten sam koszyk zawsze daje ten sam wynik, nic nie jest
cache'owane ani zapisywane. Voucher nieaktualny dla koszyka NIE jest tu
usuwany, funkcje tylko raportuja jego waznosc.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from drinkshop.domain.schemas import LineItem, Voucher, VoucherType, PriceSummary
from drinkshop.utils.settings import SHIPPING_FEE, FREE_SHIPPING_THRESHOLD

ZERO = Decimal("0")
_DONG = Decimal("1")


def subtotal(items: Iterable[LineItem]) -> Decimal:
    return sum((i.price * i.quantity for i in items), ZERO)


def total_items(items: Iterable[LineItem]) -> int:
    return sum(i.quantity for i in items)


def is_voucher_valid(voucher: Voucher | None, amount: Decimal) -> bool:
    """Voucher jest wazny gdy nie ma minimum albo subtotal >= minimum."""
    if voucher is None:
        return False
    return voucher.min_order is None or amount >= voucher.min_order


def checkout_blocked(voucher: Voucher | None, amount: Decimal) -> bool:
    #brak vouchera nie blokuje, blokuje tylko wybrany i niewazny
    return voucher is not None and not is_voucher_valid(voucher, amount)


def shipping_fee(
    items: Iterable[LineItem],
    voucher: Voucher | None,
    base_fee: Decimal = SHIPPING_FEE,
    free_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
) -> Decimal:
    amount = subtotal(items)

    if amount >= free_threshold:
        return ZERO

    if (
        voucher is not None
        and voucher.type == VoucherType.SHIPPING
        and is_voucher_valid(voucher, amount)
    ):
        return ZERO

    return base_fee


def discount_amount(items: Iterable[LineItem], voucher: Voucher | None) -> Decimal:
    amount = subtotal(items)

    if not is_voucher_valid(voucher, amount):
        return ZERO

    if voucher.type == VoucherType.PERCENT:
        discount = amount * voucher.discount / 100
        if voucher.max_discount is not None:
            discount = min(discount, voucher.max_discount)
        # zaokraglenie dopiero po limicie, limit tez moze byc ulamkowy
        return discount.quantize(_DONG, rounding=ROUND_HALF_UP)

    if voucher.type == VoucherType.FIXED:
        # rabat kwotowy nie moze przekroczyc wartosci koszyka
        return min(voucher.discount, amount)

    # shipping dziala tylko na koszt dostawy
    return ZERO


def total_price(
    items: Iterable[LineItem],
    voucher: Voucher | None,
    base_fee: Decimal = SHIPPING_FEE,
    free_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
) -> Decimal:
    items = list(items)
    total = (
        subtotal(items)
        - discount_amount(items, voucher)
        + shipping_fee(items, voucher, base_fee, free_threshold)
    )
    return max(total, ZERO)


def summarize(
    items: Iterable[LineItem],
    voucher: Voucher | None,
    base_fee: Decimal = SHIPPING_FEE,
    free_threshold: Decimal = FREE_SHIPPING_THRESHOLD,
) -> PriceSummary:
    items = list(items)
    amount = subtotal(items)
    blocked = checkout_blocked(voucher, amount)

    warning = None
    if blocked:
        missing = voucher.min_order - amount
        warning = (
            f"Voucher {voucher.code} wymaga zamowienia od {voucher.min_order} "
            f"(brakuje {missing})"
        )

    return PriceSummary(
        subtotal=amount,
        shipping_fee=shipping_fee(items, voucher, base_fee, free_threshold),
        discount_amount=discount_amount(items, voucher),
        total=total_price(items, voucher, base_fee, free_threshold),
        total_items=total_items(items),
        voucher_valid=is_voucher_valid(voucher, amount),
        checkout_blocked=blocked,
        warning=warning,
    )
