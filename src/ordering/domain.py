"""Ordering bounded context — Order placement against a Shop's catalog.

Validates newly placed orders against the shop they were placed with and
drives them through the payment lifecycle (pending, paid, approved, or
cancelled via the cancelling state).
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
