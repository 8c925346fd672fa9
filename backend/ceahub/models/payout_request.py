# backend/ceahub/models/payout_request.py
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from ceahub.core.statuses import PayoutStatus
from ceahub.core.time import utcnow
from ceahub.db.base import Base


class PayoutRequest(Base):
    """
    Snapshot of every confirmed sale an agent had when they asked to be paid.

    Stores:
      - amount_requested (derived from the reward policy, never edited)
      - sales_data: human-readable summary, e.g. "Alice;Bob (15); Carol (2)"
      - included_sale_ids: list of sale ids (as strings) moved to payout_pending
    """

    __tablename__ = "payout_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount_requested: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # requested | approved | completed
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PayoutStatus.REQUESTED.value, server_default=PayoutStatus.REQUESTED.value
    )

    sales_data: Mapped[str] = mapped_column(Text, nullable=False, default="")

    included_sale_ids: Mapped[list[Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
