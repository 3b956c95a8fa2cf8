# drinkshop/api/deps.py
from drinkshop.repos.cart_repo import CartRepo
from drinkshop.services.cart_service import CartService
from drinkshop.services.order_service import OrderService
from drinkshop.services.product_client import ProductClient
from drinkshop.services.table_client import TableClient
from drinkshop.services.voucher_client import VoucherClient


def get_cart_service() -> CartService:
    table = TableClient()
    return CartService(
        repo=CartRepo(),
        product_client=ProductClient(table),
        voucher_client=VoucherClient(table),
    )


def get_order_service() -> OrderService:
    table = TableClient()
    return OrderService(
        cart_service=get_cart_service(),
        table_client=table,
        voucher_client=VoucherClient(table),
    )
