"""Order aggregate — the consistency boundary for an order and its line items.

An order is assembled with ``Order.place()`` from the checkout data, checked
with ``validate()`` and stamped with its tracking id, status and item numbers
by ``initialize()``. From then on its status only moves through the
transitions in ``ordering.order.lifecycle``.
"""

from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import HasMany, Identifier, Integer, List, String, ValueObject

from ordering.domain import ordering
from ordering.order.lifecycle import TERMINAL_STATES, OrderAction, OrderStatus, transition
from ordering.shared.money import DEFAULT_CURRENCY, Money


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order is delivered, captured when the order is placed."""

    street = String(required=True, max_length=255)
    postal_code = String(required=True, max_length=20)
    city = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line in an order: a catalog product, quantity, unit price and subtotal.

    ``order_item_id`` is the item's position in the order (1-based) and stays
    empty until the order is initialized.
    """

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = ValueObject(Money, required=True)
    sub_total = ValueObject(Money, required=True)
    order_item_id = Integer(min_value=1)

    def is_price_valid(self):
        return self.price.multiply(self.quantity).equals(self.sub_total)


def _to_money(value, currency):
    if value is None or isinstance(value, Money):
        return value
    return Money.of(value, currency)


def _to_order_item(item, currency):
    if isinstance(item, OrderItem):
        return item
    return OrderItem(
        product_id=item.get("product_id"),
        product_name=item.get("product_name"),
        quantity=item.get("quantity"),
        price=_to_money(item.get("price"), currency),
        sub_total=_to_money(item.get("sub_total"), currency),
        order_item_id=item.get("order_item_id"),
    )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    delivery_address = ValueObject(DeliveryAddress, required=True)
    price = ValueObject(Money, required=True)
    items = HasMany(OrderItem)
    tracking_id = Identifier()
    status = String(choices=OrderStatus)
    failure_messages = List(content_type=String, default=list)

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        shop_id,
        delivery_address,
        price,
        items,
        currency=DEFAULT_CURRENCY,
        order_id=None,
        tracking_id=None,
        status=None,
        failure_messages=None,
    ):
        """Assemble an order from checkout data.

        A new order leaves ``order_id``, ``tracking_id``, ``status`` and
        ``failure_messages`` unset; they are only supplied when rebuilding an
        order that was already initialized. A stored order id or tracking id
        without its status is rejected.

        Args:
            customer_id: The customer placing the order.
            shop_id: The shop the order is placed with.
            delivery_address: DeliveryAddress, or dict with street,
                postal_code, city.
            price: Declared order total, as Money or a plain amount.
            items: OrderItem entities, or dicts with product_id, quantity,
                price, sub_total and optional product_name and order_item_id.
            currency: Currency for amounts given as plain numbers.
        """
        if items is None:
            raise ValidationError({"items": ["is required"]})
        # Ids are fixed once the order exists, so a stored identity is only
        # accepted together with the status it was stored with
        if status is None and (order_id is not None or tracking_id is not None):
            raise ValidationError({"status": ["Order is not in a correct state for initialization"]})

        if isinstance(delivery_address, dict):
            delivery_address = DeliveryAddress(**delivery_address)
        if isinstance(status, OrderStatus):
            status = status.value

        kwargs = {
            "customer_id": customer_id,
            "shop_id": shop_id,
            "delivery_address": delivery_address,
            "price": _to_money(price, currency),
            "items": [_to_order_item(item, currency) for item in items],
            "tracking_id": tracking_id,
            "status": status,
            "failure_messages": list(failure_messages or []),
        }
        if order_id is not None:
            kwargs["id"] = order_id
        return cls(**kwargs)

    # -------------------------------------------------------------------
    # Initialization & validation
    # -------------------------------------------------------------------
    def initialize(self):
        """Stamp a new order with its tracking id, PENDING status and item numbers."""
        self.tracking_id = str(uuid4())
        self.status = OrderStatus.PENDING.value
        for number, item in enumerate(self.items, start=1):
            item.order_item_id = number

    def validate(self):
        """Check a freshly placed order before it is initialized.

        Runs the initial-state check, then the total, then the items.
        Nothing is modified.
        """
        self._validate_initial_order()
        self._validate_total_price()
        self._validate_items_price()

    def _validate_initial_order(self):
        if self.status is not None:
            raise ValidationError({"status": ["Order is not in a correct state for initialization"]})

    def _validate_total_price(self):
        if self.price is None or not self.price.is_greater_than_zero():
            raise ValidationError({"price": ["Total price must be greater than zero"]})

    def _validate_items_price(self):
        items_total = Money.zero(self.price.currency)
        for item in self.items:
            if not item.is_price_valid():
                raise ValidationError(
                    {"price": [f"Order item price {item.price.as_decimal()} is not valid for product {item.product_id}"]}
                )
            items_total = items_total.add(item.sub_total)

        if not self.price.equals(items_total):
            raise ValidationError(
                {
                    "price": [
                        f"Total price {self.price.as_decimal()} is not equal to "
                        f"order items total {items_total.as_decimal()}"
                    ]
                }
            )

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    @property
    def current_status(self):
        return OrderStatus(self.status) if self.status else None

    @property
    def is_terminal(self):
        return self.current_status in TERMINAL_STATES

    def _transition(self, action):
        result = transition(self.current_status, action)
        if not result.ok:
            raise ValidationError({"status": [result.error]})
        self.status = result.target.value

    def _update_failure_messages(self, failure_messages):
        new_messages = [message for message in (failure_messages or []) if message]
        self.failure_messages = [*(self.failure_messages or []), *new_messages]

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def pay(self):
        self._transition(OrderAction.PAY)

    def approve(self):
        self._transition(OrderAction.APPROVE)

    def init_cancel(self, failure_messages=None):
        """Start cancelling a paid order; the payment still has to be reversed."""
        self._transition(OrderAction.INIT_CANCEL)
        self._update_failure_messages(failure_messages)

    def cancel(self, failure_messages=None):
        self._transition(OrderAction.CANCEL)
        self._update_failure_messages(failure_messages)
