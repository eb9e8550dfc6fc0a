"""Shop aggregate with its Product catalog.

The ordering context holds a read-only snapshot of each shop: whether it is
accepting orders and the products (with confirmed prices) it sells. Orders
are validated against this snapshot; the catalog itself is maintained
elsewhere.
"""

from protean.fields import Boolean, HasMany, String, ValueObject

from ordering.domain import ordering
from ordering.shared.money import DEFAULT_CURRENCY, Money


@ordering.entity(part_of="Shop")
class Product:
    """A catalog entry: the product's identity, display name and current price."""

    name: String(required=True, max_length=255)
    price: ValueObject(Money, required=True)


@ordering.aggregate
class Shop:
    """A shop that customers place orders with.

    Only an active shop accepts new orders.
    """

    name: String(max_length=255)
    products: HasMany(Product)
    active: Boolean(default=False)

    @classmethod
    def register(cls, products_data, active=True, shop_id=None, name=None):
        """Build a shop snapshot from plain catalog data.

        Args:
            products_data: List of dicts with id, name, price (amount) and an
                optional currency.
            active: Whether the shop currently accepts orders.
            shop_id: Identity of the shop; generated when omitted.
            name: Optional display name.
        """
        products = [
            Product(
                id=product["id"],
                name=product["name"],
                price=Money.of(product["price"], product.get("currency", DEFAULT_CURRENCY)),
            )
            for product in products_data
        ]

        kwargs = {"name": name, "products": products, "active": active}
        if shop_id is not None:
            kwargs["id"] = shop_id
        return cls(**kwargs)

    def find_product(self, product_id):
        return next((p for p in self.products if str(p.id) == str(product_id)), None)
