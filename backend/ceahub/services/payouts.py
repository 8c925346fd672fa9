# backend/ceahub/services/payouts.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.core.errors import NoEligibleSales, NotFound, UpstreamError
from ceahub.core.rewards import RewardPolicy, describe_sales, total_units
from ceahub.core.statuses import (
    PAYOUT_TRANSITIONS,
    SALE_TRANSITIONS,
    PayoutStatus,
    SaleStatus,
    check_transition,
)
from ceahub.crud.sales import lock_confirmed_sales
from ceahub.models.payout_request import PayoutRequest
from ceahub.models.sale import Sale

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayoutResult:
    payout: PayoutRequest
    total_sales: int
    rate: Decimal


async def request_payout(
    db: AsyncSession,
    agent_id: uuid.UUID,
    policy: RewardPolicy,
) -> PayoutResult:
    """
    Bundle every currently confirmed sale of `agent_id` into one payout request.

    The payout insert and the sales -> payout_pending update share one
    transaction: either both are committed or neither is, so a sale can
    never be counted in two requests and no request is left orphaned.
    """
    sales = await lock_confirmed_sales(db, agent_id)
    if not sales:
        # release the row locks / read transaction
        await db.rollback()
        raise NoEligibleSales()

    total = total_units(sales)
    rate = policy.rate_for(total)
    sale_ids = [s.id for s in sales]

    payout = PayoutRequest(
        agent_id=agent_id,
        amount_requested=policy.amount_for(total),
        status=PayoutStatus.REQUESTED.value,
        sales_data=describe_sales(sales),
        included_sale_ids=[str(i) for i in sale_ids],
    )

    try:
        db.add(payout)
        await db.flush()

        await db.execute(
            update(Sale)
            .where(Sale.id.in_(sale_ids))
            .where(Sale.status == SaleStatus.CONFIRMED.value)
            .values(status=SaleStatus.PAYOUT_PENDING.value)
            .execution_options(synchronize_session="fetch")
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("payout request failed for agent %s; rolled back %d sales", agent_id, len(sale_ids))
        raise UpstreamError("Failed to process payout request.") from e

    await db.refresh(payout)
    logger.info(
        "payout %s requested by agent %s: %d units at %s = %s",
        payout.id,
        agent_id,
        total,
        rate,
        payout.amount_requested,
    )
    return PayoutResult(payout=payout, total_sales=total, rate=rate)


async def set_sale_status(
    db: AsyncSession,
    sale_id: uuid.UUID,
    target: SaleStatus,
    *,
    enforce: bool,
) -> Sale:
    sale = await db.get(Sale, sale_id)
    if sale is None:
        raise NotFound("Sale not found.")

    check_transition(
        SALE_TRANSITIONS,
        entity="sale",
        entity_id=sale_id,
        current=sale.status,
        target=target,
        enforce=enforce,
    )

    sale.status = target.value
    await db.commit()
    await db.refresh(sale)
    return sale


async def set_payout_status(
    db: AsyncSession,
    payout_id: uuid.UUID,
    target: PayoutStatus,
    *,
    enforce: bool,
) -> PayoutRequest:
    payout = await db.get(PayoutRequest, payout_id)
    if payout is None:
        raise NotFound("Payout request not found.")

    check_transition(
        PAYOUT_TRANSITIONS,
        entity="payout request",
        entity_id=payout_id,
        current=payout.status,
        target=target,
        enforce=enforce,
    )

    payout.status = target.value
    await db.commit()
    await db.refresh(payout)
    return payout
