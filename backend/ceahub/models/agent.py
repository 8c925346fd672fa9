# backend/ceahub/models/agent.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ceahub.core.roles import AgentRole
from ceahub.core.time import utcnow
from ceahub.db.base import Base


class Agent(Base):
    """
    One row per registered user.

    `id` is NOT generated here: it mirrors the Supabase Auth user id the
    client created before calling /register-agent.
    """

    __tablename__ = "agents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    # consultant | admin
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AgentRole.CONSULTANT.value, server_default=AgentRole.CONSULTANT.value
    )

    # Display code shown on the dashboard / leaderboard (e.g., CEA-482913)
    agent_id: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)

    contact_details: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    province: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    town: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    about_me: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    training_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def is_admin(self) -> bool:
        return (self.role or "").strip().lower() == AgentRole.ADMIN.value
