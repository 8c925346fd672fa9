# backend/ceahub/core/statuses.py
from __future__ import annotations

import enum
import logging
from typing import Mapping

from ceahub.core.errors import InvalidInput

logger = logging.getLogger(__name__)


class SaleStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    PAYOUT_PENDING = "payout_pending"


class PayoutStatus(str, enum.Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
    COMPLETED = "completed"


# Allowed forward moves. rejected and completed are terminal.
SALE_TRANSITIONS: Mapping[SaleStatus, frozenset[SaleStatus]] = {
    SaleStatus.PENDING: frozenset({SaleStatus.CONFIRMED, SaleStatus.REJECTED}),
    SaleStatus.CONFIRMED: frozenset({SaleStatus.PAYOUT_PENDING}),
    SaleStatus.REJECTED: frozenset(),
    SaleStatus.PAYOUT_PENDING: frozenset(),
}

PAYOUT_TRANSITIONS: Mapping[PayoutStatus, frozenset[PayoutStatus]] = {
    PayoutStatus.REQUESTED: frozenset({PayoutStatus.APPROVED}),
    PayoutStatus.APPROVED: frozenset({PayoutStatus.COMPLETED}),
    PayoutStatus.COMPLETED: frozenset(),
}


def is_allowed(
    transitions: Mapping[enum.Enum, frozenset],
    current: str | None,
    target: enum.Enum,
) -> bool:
    if current is None:
        return False
    try:
        cur = type(target)(current)
    except ValueError:
        return False
    return target in transitions.get(cur, frozenset())


def check_transition(
    transitions: Mapping[enum.Enum, frozenset],
    *,
    entity: str,
    entity_id: object,
    current: str | None,
    target: enum.Enum,
    enforce: bool,
) -> None:
    """
    Admin status changes are overrides by default: a move outside the
    state machine is logged and allowed. With enforce=True it is rejected.
    """
    if current == target.value or is_allowed(transitions, current, target):
        return

    if enforce:
        raise InvalidInput(
            f"Cannot move {entity} from '{current}' to '{target.value}'.",
            details="invalid_status_transition",
        )

    logger.warning(
        "admin override: %s %s moved %s -> %s outside the allowed transitions",
        entity,
        entity_id,
        current,
        target.value,
    )
