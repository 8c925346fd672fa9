# backend/ceahub/schemas/payouts.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PayoutRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    agent_id: UUID
    amount_requested: Decimal
    status: str
    sales_data: str
    included_sale_ids: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class PayoutAgentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    email: str


class AdminPayoutOut(PayoutRequestOut):
    agent: Optional[PayoutAgentOut] = None


class PayoutSubmittedOut(BaseModel):
    success: bool = True
    message: str
    payout_request_id: UUID
    amount_requested: Decimal
    total_sales: int
