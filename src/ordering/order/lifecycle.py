"""Order lifecycle — statuses, actions and the transition table.

State Machine (5 states):
    PENDING --pay--> PAID --approve--> APPROVED
    PENDING --cancel--> CANCELLED
    PAID --init_cancel--> CANCELLING --cancel--> CANCELLED

``transition()`` never raises: it returns a ``TransitionResult`` that either
names the target status or explains why the action is not allowed. The
Order aggregate decides what to do with a failed result.
"""

from dataclasses import dataclass
from enum import Enum


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    APPROVED = "Approved"
    CANCELLING = "Cancelling"
    CANCELLED = "Cancelled"


class OrderAction(Enum):
    PAY = "Pay"
    APPROVE = "Approve"
    INIT_CANCEL = "Init_Cancel"
    CANCEL = "Cancel"


# action -> (legal source states, target state)
_TRANSITIONS = {
    OrderAction.PAY: ({OrderStatus.PENDING}, OrderStatus.PAID),
    OrderAction.APPROVE: ({OrderStatus.PAID}, OrderStatus.APPROVED),
    OrderAction.INIT_CANCEL: ({OrderStatus.PAID}, OrderStatus.CANCELLING),
    OrderAction.CANCEL: ({OrderStatus.PENDING, OrderStatus.CANCELLING}, OrderStatus.CANCELLED),
}

TERMINAL_STATES = frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED})


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of applying an action to a status."""

    action: OrderAction
    source: OrderStatus | None
    target: OrderStatus | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def transition(current: OrderStatus | None, action: OrderAction) -> TransitionResult:
    """Resolve ``action`` against ``current`` without mutating anything."""
    sources, target = _TRANSITIONS[action]
    if current not in sources:
        current_label = current.value if current else "Uninitialized"
        allowed = ", ".join(sorted(s.value for s in sources))
        return TransitionResult(
            action=action,
            source=current,
            error=(
                f"Order is not in a correct state for {action.value} operation: "
                f"status is {current_label}, expected one of {allowed}"
            ),
        )
    return TransitionResult(action=action, source=current, target=target)


def allowed_actions(current: OrderStatus | None) -> list[OrderAction]:
    """Actions that may legally be applied from ``current``, in declaration order."""
    return [action for action, (sources, _) in _TRANSITIONS.items() if current in sources]
