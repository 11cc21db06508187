"""Cart - tests for basket merge, update, removal and totals."""

from decimal import Decimal
from uuid import uuid4

from app.core.cart import Cart


def _product(name="Gummy Bears", price="5.15", currencies=None):
    return {"id": uuid4(), "name": name, "price": price, "currencies": currencies or []}


def test_add_same_product_merges_quantity():
    cart = Cart()
    gummy = _product()
    cart.add(gummy)
    cart.add(gummy, 2)
    assert len(cart.lines) == 1
    assert cart.total_items == 3


def test_update_quantity_to_zero_removes_line():
    cart = Cart()
    gummy = _product()
    cart.add(gummy, 2)
    cart.update_quantity(gummy["id"], 0)
    assert cart.lines == []


def test_update_quantity_sets_value():
    cart = Cart()
    gummy = _product()
    cart.add(gummy)
    cart.update_quantity(gummy["id"], 4)
    assert cart.total_items == 4


def test_remove_and_clear():
    cart = Cart()
    a, b = _product("A"), _product("B")
    cart.add(a)
    cart.add(b)
    cart.remove(a["id"])
    assert [line.name for line in cart.lines] == ["B"]
    cart.clear()
    assert cart.total_items == 0


def test_subtotal_and_rounded_totals():
    cart = Cart()
    cart.add(_product(currencies=[{"type": "pencil", "amount": 3.6}]), 2)
    assert cart.subtotal == Decimal("10.30")
    totals = cart.totals()
    assert totals["total"] == 11
    assert totals["currency_totals"] == {"pencil": 8}


def test_to_order_items_payload():
    cart = Cart()
    gummy = _product()
    cart.add(gummy, 2)
    assert cart.to_order_items() == [{"product_id": gummy["id"], "quantity": 2}]
