# backend/ceahub/crud/agents.py
from __future__ import annotations

import uuid
from typing import Sequence

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.core.statuses import SaleStatus
from ceahub.models.agent import Agent
from ceahub.models.sale import Sale

# Units that count toward the leaderboard: approved by an admin, paid out or not.
LEADERBOARD_STATUSES = (SaleStatus.CONFIRMED.value, SaleStatus.PAYOUT_PENDING.value)


def _contains(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def get_agent(db: AsyncSession, agent_id: uuid.UUID) -> Agent | None:
    return await db.get(Agent, agent_id)


async def list_agents(db: AsyncSession, *, newest_first: bool = False) -> Sequence[Agent]:
    stmt = select(Agent)
    if newest_first:
        stmt = stmt.order_by(Agent.created_at.desc())
    else:
        stmt = stmt.order_by(Agent.name)
    return (await db.execute(stmt)).scalars().all()


async def search_by_province(db: AsyncSession, province: str) -> Sequence[Agent]:
    """
    Case-insensitive partial match on province.
    An empty query matches nothing (no browse-all fallback).
    """
    term = (province or "").strip()
    if not term:
        return []
    stmt = (
        select(Agent)
        .where(Agent.province.ilike(_contains(term), escape="\\"))
        .order_by(Agent.name)
    )
    return (await db.execute(stmt)).scalars().all()


async def search_agents(db: AsyncSession, query: str) -> Sequence[Agent]:
    """
    Admin free-text search: name OR email OR contact_details, case-insensitive.
    """
    term = (query or "").strip()
    if not term:
        return []
    pattern = _contains(term)
    stmt = (
        select(Agent)
        .where(
            or_(
                Agent.name.ilike(pattern, escape="\\"),
                Agent.email.ilike(pattern, escape="\\"),
                Agent.contact_details.ilike(pattern, escape="\\"),
            )
        )
        .order_by(Agent.name)
    )
    return (await db.execute(stmt)).scalars().all()


async def top_performers(db: AsyncSession, limit: int) -> list[dict]:
    units = func.coalesce(func.sum(Sale.sale_count), 0).label("confirmed_sales")
    stmt = (
        select(Agent.id, Agent.name, Agent.agent_id, units)
        .join(Sale, Sale.agent_id == Agent.id)
        .where(Sale.status.in_(LEADERBOARD_STATUSES))
        .group_by(Agent.id, Agent.name, Agent.agent_id)
        .order_by(desc("confirmed_sales"), Agent.name)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()

    return [
        {
            "rank": i,
            "id": r.id,
            "name": r.name,
            "agent_internal_id": r.agent_id or "N/A",
            "confirmed_sales": int(r.confirmed_sales or 0),
        }
        for i, r in enumerate(rows, start=1)
    ]
