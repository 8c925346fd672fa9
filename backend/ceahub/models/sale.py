# backend/ceahub/models/sale.py
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ceahub.core.statuses import SaleStatus
from ceahub.core.time import utcnow
from ceahub.db.base import Base


class Sale(Base):
    """
    A batch of sales logged by an agent.

    Never deleted. Status moves pending -> confirmed -> payout_pending
    or pending -> rejected.
    """

    __tablename__ = "sales"
    __table_args__ = (
        CheckConstraint("sale_count > 0", name="ck_sales_sale_count_positive"),
        Index("ix_sales_agent_status", "agent_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sale_count: Mapped[int] = mapped_column(Integer, nullable=False)
    sale_names: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SaleStatus.PENDING.value, server_default=SaleStatus.PENDING.value
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
