# backend/ceahub/api/v1/sales.py
from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.api.deps.auth import get_current_user
from ceahub.api.deps.services import get_reward_policy
from ceahub.core.config import settings
from ceahub.core.rewards import RewardPolicy, summarize_sales
from ceahub.core.security import AuthenticatedUser
from ceahub.core.statuses import SaleStatus
from ceahub.crud.agents import top_performers
from ceahub.crud.sales import list_sales_for_agent
from ceahub.db.session import get_db
from ceahub.models.sale import Sale
from ceahub.schemas.sales import SaleCreate, SaleOut, SalesSummaryOut, TopPerformerOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sales"])


@router.post("/log-sale", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
async def log_sale(
    payload: SaleCreate,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Body: {"saleCount": 3, "saleNames": "Alice; Bob; Carol"}
    New sales always start as pending.
    """
    sale = Sale(
        agent_id=user.id,
        sale_count=payload.sale_count,
        sale_names=payload.sale_names,
        status=SaleStatus.PENDING.value,
    )
    db.add(sale)
    await db.commit()
    await db.refresh(sale)

    logger.info("agent %s logged sale %s (%d units)", user.id, sale.id, sale.sale_count)
    return sale


@router.get("/get-agent-sales/{agent_id}", response_model=SalesSummaryOut)
async def get_agent_sales(
    agent_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: AuthenticatedUser = Depends(get_current_user),
    policy: RewardPolicy = Depends(get_reward_policy),
):
    """
    Dashboard summary: pending/confirmed unit totals and what the confirmed
    units are worth at the current reward tier.
    """
    sales = await list_sales_for_agent(db, agent_id)
    summary = summarize_sales(sales, policy)
    return SalesSummaryOut(
        period=summary.period,
        pending_sales=summary.pending_sales,
        confirmed_sales=summary.confirmed_sales,
        amount_earned=summary.amount_earned,
    )


@router.get("/get-top-performers", response_model=List[TopPerformerOut])
async def get_top_performers(
    db: AsyncSession = Depends(get_db),
    _: AuthenticatedUser = Depends(get_current_user),
):
    return await top_performers(db, limit=settings.TOP_PERFORMERS_LIMIT)
