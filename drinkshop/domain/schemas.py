# drinkshop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal
from decimal import Decimal
from enum import Enum


class VoucherType(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"
    SHIPPING = "shipping"


class LineItem(BaseModel):
    """Pozycja w koszyku. Niezmienna - kazda zmiana tworzy nowy obiekt."""

    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    name: str = ""
    image: str = ""
    price: Decimal = Field(..., ge=0, description="Cena jednostkowa w momencie dodania")
    quantity: int = Field(..., ge=1)
    size: Literal["S", "M", "L"] = "M"
    ice: int = Field(100, ge=0, le=100)
    sugar: int = Field(100, ge=0, le=100)
    is_drink: bool = True


class Voucher(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    code: str
    type: VoucherType
    discount: Decimal = Field(Decimal("0"), ge=0)
    min_order: Decimal | None = Field(None, ge=0)
    max_discount: Decimal | None = Field(None, ge=0)
    title: str = ""
    used: bool = False


class PriceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    shipping_fee: Decimal
    discount_amount: Decimal
    total: Decimal
    total_items: int
    voucher_valid: bool
    checkout_blocked: bool
    warning: str | None = None


# =====================================================
# API (request / response)
# =====================================================

class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")
    size: Literal["S", "M", "L"] = "M"
    ice: int = Field(100, ge=0, le=100)
    sugar: int = Field(100, ge=0, le=100)
    is_drink: bool = True


class QuantityIn(BaseModel):
    """Ilosc <= 0 usuwa pozycje z koszyka."""

    quantity: int


class VoucherSelectIn(BaseModel):
    voucher_id: int = Field(..., gt=0)


class CartOut(BaseModel):
    session_id: str
    items: List[LineItem]
    voucher: Voucher | None = None
    summary: PriceSummary
    can_checkout: bool


class VoucherOut(BaseModel):
    voucher: Voucher
    eligible: bool
    projected_discount: Decimal


class CheckoutIn(BaseModel):
    session_id: str = Field(..., min_length=1)
    user_id: int = Field(..., gt=0)
    address_id: int = Field(..., gt=0)
    payment_method: Literal["cash", "momo", "zalopay", "banking"] = "cash"
    note: str | None = Field(None, max_length=500)


class OrderItemOut(BaseModel):
    product_id: int | None = None
    quantity: int
    price: Decimal
    total: Decimal
    size: str | None = None
    ice: int | None = None
    sugar: int | None = None
    is_drink: bool | None = None


class OrderOut(BaseModel):
    id: int
    name: str | None = None
    user_id: int | None = None
    status: str
    amount: Decimal
    method: str | None = None
    notes: str | None = None
    voucher_id: int | None = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)
