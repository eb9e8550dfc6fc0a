"""Domain events for the Order aggregate.

Events are versioned, immutable facts. Each one carries a snapshot of the
order at the moment it was raised so that the publishing side never has to
load the aggregate again. Protean's event type string (for example
``Ordering.OrderPaid.v1``) identifies the kind of event on the wire.
"""

import json

from protean.fields import DateTime, Identifier, List, String, Text
from protean.fields import Decimal as DecimalField

from ordering.domain import ordering
from ordering.shared.money import DEFAULT_CURRENCY


def order_snapshot(order):
    """Event payload fields describing ``order`` as it stands now."""
    return {
        "order_id": str(order.id),
        "tracking_id": str(order.tracking_id),
        "customer_id": str(order.customer_id),
        "shop_id": str(order.shop_id),
        "status": order.status,
        "price": order.price.amount,
        "currency": order.price.currency,
        "items": json.dumps(
            [
                {
                    "order_item_id": item.order_item_id,
                    "product_id": str(item.product_id),
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "price": str(item.price.amount),
                    "sub_total": str(item.sub_total.amount),
                }
                for item in order.items
            ]
        ),
        "failure_messages": list(order.failure_messages or []),
    }


@ordering.event(part_of="Order")
class OrderCreated:
    """An order passed validation against its shop and is now pending payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    status = String(required=True)
    price = DecimalField(required=True)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    items = Text(required=True)  # JSON: list of item dicts
    failure_messages = List(content_type=String)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for the order was captured."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    status = String(required=True)
    price = DecimalField(required=True)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    items = Text(required=True)  # JSON: list of item dicts
    failure_messages = List(content_type=String)
    created_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """Cancellation of a paid order started; the payment has to be reversed."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    status = String(required=True)
    price = DecimalField(required=True)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    items = Text(required=True)  # JSON: list of item dicts
    failure_messages = List(content_type=String)
    created_at = DateTime(required=True)
