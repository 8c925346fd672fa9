# backend/ceahub/api/v1/public.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.crud.agents import list_agents, search_by_province
from ceahub.db.session import get_db
from ceahub.schemas.agent import PublicAgentDetailOut, PublicAgentOut

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/all-agents", response_model=List[PublicAgentOut])
async def list_public_agents(db: AsyncSession = Depends(get_db)):
    """
    Full public directory (map pins). No auth.
    """
    return await list_agents(db)


@router.get("/agents", response_model=List[PublicAgentDetailOut])
async def find_agents_by_province(
    db: AsyncSession = Depends(get_db),
    province: Optional[str] = Query(None, max_length=100),
):
    """
    Province search. Missing or empty `province` returns [].
    """
    return await search_by_province(db, province or "")
