"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.order.events import OrderCancelled, OrderCreated, OrderPaid
from ordering.order.order import Order
from ordering.order.service import OrderDomainService
from ordering.shared.money import Money
from ordering.shop.shop import Shop
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderCreated": OrderCreated,
    "OrderPaid": OrderPaid,
    "OrderCancelled": OrderCancelled,
}


@pytest.fixture
def service():
    return OrderDomainService()


@pytest.fixture
def outcome():
    """Result or error of the most recent When step."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.parse('an {state} shop selling "{first}" at {first_price} and "{second}" at {second_price}'),
    target_fixture="shop",
)
def _(state, first, first_price, second, second_price):
    return Shop.register(
        [
            {"id": first, "name": f"Product {first}", "price": first_price},
            {"id": second, "name": f"Product {second}", "price": second_price},
        ],
        active=(state == "active"),
        shop_id="shop-001",
    )


@given(
    parsers.parse(
        'an order for {first_qty:d} of "{first}" at {first_price} '
        'and {second_qty:d} of "{second}" at {second_price} totalling {total}'
    ),
    target_fixture="order",
)
def _(first_qty, first, first_price, second_qty, second, second_price, total):
    lines = [(first, first_qty, first_price), (second, second_qty, second_price)]
    return Order.place(
        customer_id="cust-001",
        shop_id="shop-001",
        delivery_address={"street": "1 Main St", "postal_code": "10001", "city": "Springfield"},
        price=total,
        items=[
            {
                "product_id": product_id,
                "quantity": quantity,
                "price": price,
                "sub_total": Money.of(price).multiply(quantity),
            }
            for product_id, quantity, price in lines
        ],
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("an {event_name} event is returned"))
def _(outcome, event_name):
    assert "error" not in outcome
    assert isinstance(outcome["result"], _ORDER_EVENT_CLASSES[event_name])


@then(parsers.parse('the order status is "{status}"'))
def _(order, status):
    assert order.status == status


@then("the order has a tracking id")
def _(order):
    assert order.tracking_id is not None


@then(parsers.parse("the order is rejected for its {key}"))
def _(outcome, key):
    assert key in outcome["error"].messages


@then("the order is not initialized")
def _(order):
    assert order.status is None
    assert order.tracking_id is None


@then(parsers.parse('the failure messages are "{messages}"'))
def _(order, messages):
    assert order.failure_messages == messages.split(", ")
