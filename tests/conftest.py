import itertools
import json
from decimal import Decimal

import pytest
import redis
import requests

from drinkshop.domain.cart import new_item_id
from drinkshop.domain.schemas import LineItem, Voucher
from drinkshop.repos.cart_repo import CartRepo
from drinkshop.services.cart_service import CartService
from drinkshop.services.order_service import OrderService
from drinkshop.services.product_client import ProductClient
from drinkshop.services.voucher_client import VoucherClient
from drinkshop.utils.settings import (
    PRODUCTS_TABLE_ID,
    VOUCHERS_TABLE_ID,
)


class FakePipeline:
    """WATCH / MULTI / EXEC: komendy po multi() buforowane, execute() sprawdza wersje kluczy."""

    def __init__(self, owner):
        self.owner = owner
        self.watched = {}
        self.queued = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.watched = {}
        self.queued = None
        return False

    def watch(self, *keys):
        for key in keys:
            self.watched[key] = self.owner.versions.get(key, 0)

    def get(self, key):
        return self.owner.get(key)

    def multi(self):
        self.queued = []

    def set(self, key, value, ex=None):
        self.queued.append(("set", key, value, ex))

    def delete(self, key):
        self.queued.append(("delete", key))

    def execute(self):
        for key, version in self.watched.items():
            if self.owner.versions.get(key, 0) != version:
                raise redis.WatchError("Watched variable changed.")
        results = []
        for cmd, key, *args in self.queued:
            if cmd == "set":
                results.append(self.owner.set(key, args[0], ex=args[1]))
            else:
                results.append(self.owner.delete(key))
        return results


class FakeRedis:
    """Minimalny redis w pamieci: get / set(ex) / delete + pipeline z WATCH."""

    def __init__(self):
        self.data = {}
        self.ttl = {}
        self.versions = {}

    def _touch(self, key):
        self.versions[key] = self.versions.get(key, 0) + 1

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttl[key] = ex
        self._touch(key)
        return True

    def delete(self, key):
        self.ttl.pop(key, None)
        self._touch(key)
        return 1 if self.data.pop(key, None) is not None else 0

    def pipeline(self):
        return FakePipeline(self)


def not_found_error():
    response = requests.Response()
    response.status_code = 404
    return requests.HTTPError("404 Not Found", response=response)


class FakeTableClient:
    """
    Hostowane tabele w pamieci.
    Linki (listy intow) zwracane sa tak jak w Baserow: [{"id": .., "value": ..}].
    """

    def __init__(self):
        self.tables = {}
        self._ids = itertools.count(1)
        self.calls = []

    @staticmethod
    def _links(data):
        out = {}
        for key, value in data.items():
            if isinstance(value, list) and all(isinstance(v, int) for v in value):
                out[key] = [{"id": v, "value": ""} for v in value]
            else:
                out[key] = value
        return out

    def add_row(self, table_id, row):
        self.tables.setdefault(table_id, {})[row["id"]] = row
        return row

    def get_row(self, table_id, row_id):
        self.calls.append(("GET", table_id, row_id))
        try:
            return dict(self.tables[table_id][row_id])
        except KeyError:
            raise not_found_error()

    def list_rows(self, table_id, filters=None, size=200):
        self.calls.append(("LIST", table_id, filters))
        rows = list(self.tables.get(table_id, {}).values())
        if filters:
            flt = json.loads(filters)["filters"][0]
            rows = [
                r for r in rows
                if any(str(link["id"]) == flt["value"] for link in r.get(flt["field"], []))
            ]
        return [dict(r) for r in rows]

    def create_row(self, table_id, data):
        self.calls.append(("POST", table_id, data))
        row = {"id": next(self._ids), **self._links(data)}
        return dict(self.add_row(table_id, row))

    def update_row(self, table_id, row_id, data):
        self.calls.append(("PATCH", table_id, row_id, data))
        if row_id not in self.tables.get(table_id, {}):
            raise not_found_error()
        self.tables[table_id][row_id].update(self._links(data))
        return dict(self.tables[table_id][row_id])


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, total):
        self.sent.append((user_id, order_id, total))


def make_item(price, quantity=1, product_id="1", **kwargs):
    return LineItem(
        id=new_item_id(product_id),
        product_id=product_id,
        price=Decimal(price),
        quantity=quantity,
        **kwargs,
    )


def make_voucher(type, discount=0, min_order=None, max_discount=None, **kwargs):
    return Voucher(
        id=kwargs.pop("id", 1),
        code=kwargs.pop("code", "TEST"),
        type=type,
        discount=Decimal(discount),
        min_order=None if min_order is None else Decimal(min_order),
        max_discount=None if max_discount is None else Decimal(max_discount),
        **kwargs,
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cart_repo(fake_redis):
    return CartRepo(client=fake_redis, ttl=600)


@pytest.fixture
def table():
    """Katalog z dwoma napojami i zestaw voucherow."""
    t = FakeTableClient()
    t.add_row(PRODUCTS_TABLE_ID, {
        "id": 10, "name": "Tra sua tran chau", "price": "45000",
        "image": "", "category": [{"id": 1, "value": "Tra sua"}],
    })
    t.add_row(PRODUCTS_TABLE_ID, {
        "id": 11, "name": "Banh flan", "price": 25000, "image": "https://cdn/flan.png",
    })
    t.add_row(VOUCHERS_TABLE_ID, {
        "id": 1, "code": "WELCOME30", "type": {"id": 1, "value": "percent"},
        "discount": 30, "min_order": 0, "max_discount": 50000, "used": False,
    })
    t.add_row(VOUCHERS_TABLE_ID, {
        "id": 2, "code": "FREESHIP", "type": {"id": 3, "value": "shipping"},
        "discount": None, "min_order": 100000, "used": False,
    })
    t.add_row(VOUCHERS_TABLE_ID, {
        "id": 3, "code": "FLASH50", "type": "fixed",
        "discount": 50000, "min_order": 200000, "used": False,
    })
    t.add_row(VOUCHERS_TABLE_ID, {
        "id": 4, "code": "USED_CODE", "type": "percent",
        "discount": 20, "min_order": 50000, "max_discount": 30000, "used": True,
    })
    return t


@pytest.fixture
def cart_service(cart_repo, table):
    return CartService(
        repo=cart_repo,
        product_client=ProductClient(table),
        voucher_client=VoucherClient(table),
        merge_identical=False,
    )


@pytest.fixture
def notifications():
    return FakeNotificationService()


@pytest.fixture
def order_service(cart_service, table, notifications):
    return OrderService(
        cart_service=cart_service,
        table_client=table,
        voucher_client=VoucherClient(table),
        notification_service=notifications,
    )
