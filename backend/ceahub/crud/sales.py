# backend/ceahub/crud/sales.py
from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.core.statuses import SaleStatus
from ceahub.models.agent import Agent
from ceahub.models.payout_request import PayoutRequest
from ceahub.models.sale import Sale


async def list_sales_for_agent(db: AsyncSession, agent_id: uuid.UUID) -> Sequence[Sale]:
    stmt = select(Sale).where(Sale.agent_id == agent_id).order_by(Sale.created_at)
    return (await db.execute(stmt)).scalars().all()


async def lock_confirmed_sales(db: AsyncSession, agent_id: uuid.UUID) -> Sequence[Sale]:
    """
    Confirmed sales of one agent, row-locked until the transaction ends
    (FOR UPDATE is a no-op on SQLite).
    """
    stmt = (
        select(Sale)
        .where(Sale.agent_id == agent_id)
        .where(Sale.status == SaleStatus.CONFIRMED.value)
        .order_by(Sale.created_at)
        .with_for_update()
    )
    return (await db.execute(stmt)).scalars().all()


async def list_sales_with_agents(db: AsyncSession) -> list[tuple[Sale, Agent | None]]:
    """All sales, newest first, each paired with its agent (None if the agent row is gone)."""
    stmt = (
        select(Sale, Agent)
        .outerjoin(Agent, Agent.id == Sale.agent_id)
        .order_by(Sale.created_at.desc())
    )
    return [(s, a) for s, a in (await db.execute(stmt)).all()]


async def list_payouts_with_agents(db: AsyncSession) -> list[tuple[PayoutRequest, Agent | None]]:
    stmt = (
        select(PayoutRequest, Agent)
        .outerjoin(Agent, Agent.id == PayoutRequest.agent_id)
        .order_by(PayoutRequest.created_at.desc())
    )
    return [(p, a) for p, a in (await db.execute(stmt)).all()]
