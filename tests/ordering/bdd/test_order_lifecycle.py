"""BDD tests for the order lifecycle."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, when

scenarios("features/order_lifecycle.feature")


def attempt(outcome, operation, *args):
    outcome.clear()
    try:
        outcome["result"] = operation(*args)
    except ValidationError as exc:
        outcome["error"] = exc


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the order is validated and initiated")
def _(service, order, shop, outcome):
    attempt(outcome, service.validate_and_initiate_order, order, shop)


@when("the order is paid")
def _(service, order, outcome):
    attempt(outcome, service.pay_order, order)


@when("the order is approved")
def _(service, order, outcome):
    attempt(outcome, service.approve_order, order)


@when(parsers.parse('the order payment is cancelled because "{reason}"'))
def _(service, order, outcome, reason):
    attempt(outcome, service.cancel_order_payment, order, [reason])


@when(parsers.parse('the order is cancelled because "{reason}"'))
def _(service, order, outcome, reason):
    attempt(outcome, service.cancel_order, order, [reason])
