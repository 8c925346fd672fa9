# backend/ceahub/api/v1/payouts.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.api.deps.auth import get_current_user
from ceahub.api.deps.services import get_reward_policy
from ceahub.core.rewards import RewardPolicy
from ceahub.core.security import AuthenticatedUser
from ceahub.db.session import get_db
from ceahub.schemas.payouts import PayoutSubmittedOut
from ceahub.services.payouts import request_payout

router = APIRouter(tags=["payouts"])


@router.post("/request-payout", response_model=PayoutSubmittedOut)
async def submit_payout_request(
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
    policy: RewardPolicy = Depends(get_reward_policy),
):
    """
    Bundles all of the caller's confirmed sales into one payout request.
    400 when nothing is confirmed. Clients should re-fetch
    /get-agent-sales afterwards.
    """
    result = await request_payout(db, user.id, policy)
    return PayoutSubmittedOut(
        message="Payout request submitted successfully!",
        payout_request_id=result.payout.id,
        amount_requested=result.payout.amount_requested,
        total_sales=result.total_sales,
    )
