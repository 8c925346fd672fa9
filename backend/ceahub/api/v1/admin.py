# backend/ceahub/api/v1/admin.py
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.api.deps.auth import require_admin
from ceahub.api.deps.services import enforce_status_transitions, get_gateway
from ceahub.core.errors import NotFound
from ceahub.core.statuses import PayoutStatus, SaleStatus
from ceahub.crud.agents import get_agent, list_agents, search_agents
from ceahub.crud.sales import list_payouts_with_agents, list_sales_with_agents
from ceahub.db.session import get_db
from ceahub.models.agent import Agent
from ceahub.schemas.agent import (
    AdminAgentUpdate,
    AgentOut,
    AgentUpdateResult,
    MessageOut,
    PasswordReset,
)
from ceahub.schemas.payouts import AdminPayoutOut, PayoutAgentOut, PayoutRequestOut
from ceahub.schemas.sales import AdminSaleOut, SaleOut
from ceahub.services.payouts import set_payout_status, set_sale_status
from ceahub.services.supabase_gateway import SupabaseGateway

logger = logging.getLogger(__name__)

# Every route here requires a bearer token AND role == admin.
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# -----------------------------
# Agents
# -----------------------------
@router.get("/all-agents", response_model=List[AgentOut])
async def admin_list_agents(db: AsyncSession = Depends(get_db)):
    return await list_agents(db, newest_first=True)


@router.get("/get-agent-details/{agent_id}", response_model=AgentOut)
async def admin_get_agent(agent_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    agent = await get_agent(db, agent_id)
    if agent is None:
        raise NotFound("Agent not found.")
    return agent


@router.put("/update-agent-details/{agent_id}", response_model=AgentUpdateResult)
async def admin_update_agent(
    agent_id: uuid.UUID,
    payload: AdminAgentUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Agent = Depends(require_admin),
):
    agent = await get_agent(db, agent_id)
    if agent is None:
        raise NotFound("Agent not found.")

    data = payload.model_dump(exclude_unset=True, mode="json")
    for field, value in data.items():
        setattr(agent, field, value)

    await db.commit()
    await db.refresh(agent)

    logger.info("admin %s updated agent %s fields=%s", admin.id, agent_id, sorted(data))
    return AgentUpdateResult(data=AgentOut.model_validate(agent))


@router.put("/update-agent-auth/{agent_id}", response_model=MessageOut)
async def admin_reset_password(
    agent_id: uuid.UUID,
    payload: PasswordReset,
    gateway: SupabaseGateway = Depends(get_gateway),
    admin: Agent = Depends(require_admin),
):
    await gateway.update_user_password(agent_id, payload.new_password)
    logger.info("admin %s reset the password of %s", admin.id, agent_id)
    return MessageOut(message="Agent's password changed.")


@router.get("/search-agents", response_model=List[AgentOut])
async def admin_search_agents(
    db: AsyncSession = Depends(get_db),
    query: Optional[str] = Query(None, max_length=200),
):
    return await search_agents(db, query or "")


# -----------------------------
# Sales
# -----------------------------
@router.get("/all-sales", response_model=List[AdminSaleOut])
async def admin_list_sales(db: AsyncSession = Depends(get_db)):
    rows = await list_sales_with_agents(db)

    items: list[AdminSaleOut] = []
    for sale, agent in rows:
        base = SaleOut.model_validate(sale).model_dump()
        items.append(
            AdminSaleOut(
                **base,
                agent_name=(agent.name if agent and agent.name else "Unknown Agent"),
                agent_internal_id=(agent.agent_id if agent and agent.agent_id else "N/A"),
            )
        )
    return items


@router.put("/approve-sale/{sale_id}", response_model=SaleOut)
async def admin_approve_sale(
    sale_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    enforce: bool = Depends(enforce_status_transitions),
):
    return await set_sale_status(db, sale_id, SaleStatus.CONFIRMED, enforce=enforce)


@router.put("/reject-sale/{sale_id}", response_model=SaleOut)
async def admin_reject_sale(
    sale_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    enforce: bool = Depends(enforce_status_transitions),
):
    return await set_sale_status(db, sale_id, SaleStatus.REJECTED, enforce=enforce)


# -----------------------------
# Payouts
# -----------------------------
@router.get("/all-payouts", response_model=List[AdminPayoutOut])
async def admin_list_payouts(db: AsyncSession = Depends(get_db)):
    rows = await list_payouts_with_agents(db)

    items: list[AdminPayoutOut] = []
    for payout, agent in rows:
        base = PayoutRequestOut.model_validate(payout).model_dump()
        items.append(
            AdminPayoutOut(
                **base,
                agent=PayoutAgentOut.model_validate(agent) if agent else None,
            )
        )
    return items


@router.put("/approve-payout/{payout_id}", response_model=PayoutRequestOut)
async def admin_approve_payout(
    payout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    enforce: bool = Depends(enforce_status_transitions),
):
    return await set_payout_status(db, payout_id, PayoutStatus.APPROVED, enforce=enforce)


@router.put("/complete-payout/{payout_id}", response_model=PayoutRequestOut)
async def admin_complete_payout(
    payout_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    enforce: bool = Depends(enforce_status_transitions),
):
    return await set_payout_status(db, payout_id, PayoutStatus.COMPLETED, enforce=enforce)
