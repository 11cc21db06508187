"""Domain Types - verifies identity types, constants and enum values.

Tests:
    - NewType wrappers exist and are callable
    - customer_key trims and case-folds
    - Enums have expected members and serialize to string
"""

from uuid import uuid4

from app.core.domain_types import (
    DAILY_ORDER_LIMIT, BASE_CURRENCY,
    OrderId, ProductId, OrderStatus, PlacementOutcome, customer_key,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert ProductId(uid) == uid
    assert OrderId(uid) == uid


def test_daily_limit_is_two():
    assert DAILY_ORDER_LIMIT == 2


def test_base_currency_is_pencils():
    assert BASE_CURRENCY == "pencils"


def test_customer_key_trims_and_casefolds():
    assert customer_key("  Ana ") == "ana"
    assert customer_key("ANA") == customer_key("ana")


def test_customer_key_keeps_inner_spaces():
    assert customer_key("Ana Maria") == "ana maria"
    assert customer_key("Ana Maria") != customer_key("AnaMaria")


def test_order_status_has_five_states():
    assert {s.value for s in OrderStatus} == {
        "pending", "processing", "shipped", "delivered", "cancelled",
    }


def test_placement_outcome_has_four_tags():
    assert set(PlacementOutcome) == {
        PlacementOutcome.PLACED,
        PlacementOutcome.REJECTED_DAILY_LIMIT,
        PlacementOutcome.REJECTED_INSUFFICIENT_STOCK,
        PlacementOutcome.REJECTED_ERROR,
    }


def test_enums_serialize_to_str():
    assert OrderStatus.PENDING == "pending"
    assert PlacementOutcome.PLACED.value == "placed"
