"""Order domain service — business operations spanning an Order and its Shop.

Every operation acts on the Order instance it is given. Operations that
collaborators must react to return the event they raised. Loading and
saving orders, and publishing the events, is left to the caller.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError

from ordering.order.events import OrderCancelled, OrderCreated, OrderPaid, order_snapshot

logger = structlog.get_logger(__name__)


class OrderDomainService:
    def validate_and_initiate_order(self, order, shop):
        """Check ``order`` against ``shop``, then validate and initialize it.

        The order must have been placed with ``shop``, the shop must be
        active, and every item must reference a catalog product at the
        catalog's price. The order is untouched if any check fails.
        """
        self._validate_shop(order, shop)
        catalog_products = self._match_catalog_products(order, shop)
        order.validate()

        for item, product in catalog_products:
            item.product_name = product.name
        order.initialize()

        event = self._raise(order, OrderCreated)
        logger.info(
            "Order initiated",
            order_id=str(order.id),
            tracking_id=str(order.tracking_id),
            shop_id=str(shop.id),
        )
        return event

    def pay_order(self, order):
        order.pay()
        event = self._raise(order, OrderPaid)
        logger.info("Order paid", order_id=str(order.id))
        return event

    def approve_order(self, order):
        order.approve()
        logger.info("Order approved", order_id=str(order.id))

    def cancel_order_payment(self, order, failure_messages):
        order.init_cancel(failure_messages)
        event = self._raise(order, OrderCancelled)
        logger.info(
            "Order payment cancelling",
            order_id=str(order.id),
            failure_messages=order.failure_messages,
        )
        return event

    def cancel_order(self, order, failure_messages):
        order.cancel(failure_messages)
        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            failure_messages=order.failure_messages,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _validate_shop(self, order, shop):
        if str(order.shop_id) != str(shop.id):
            raise ValidationError({"shop": [f"Order was placed with shop {order.shop_id}, not {shop.id}"]})
        if not shop.active:
            logger.warning("Order rejected for inactive shop", shop_id=str(shop.id))
            raise ValidationError({"shop": [f"Shop with id {shop.id} is currently not active"]})

    def _match_catalog_products(self, order, shop):
        """Pair each order item with its catalog product, checking the price."""
        matched = []
        for item in order.items:
            product = shop.find_product(item.product_id)
            if product is None:
                raise ValidationError({"items": [f"Product {item.product_id} is not sold by shop {shop.id}"]})
            if not item.price.equals(product.price):
                raise ValidationError(
                    {
                        "price": [
                            f"Price {item.price.as_decimal()} for product {item.product_id} "
                            f"does not match catalog price {product.price.as_decimal()}"
                        ]
                    }
                )
            matched.append((item, product))
        return matched

    def _raise(self, order, event_cls):
        event = event_cls(**order_snapshot(order), created_at=datetime.now(UTC))
        order.raise_(event)
        return event
