# backend/ceahub/api/v1/agents.py
from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.api.deps.auth import get_current_user
from ceahub.api.deps.services import get_gateway
from ceahub.core.config import settings
from ceahub.core.errors import Forbidden, InvalidInput, NotFound
from ceahub.core.roles import AgentRole
from ceahub.core.security import AuthenticatedUser
from ceahub.core.time import epoch_millis
from ceahub.crud.agents import get_agent
from ceahub.db.session import get_db
from ceahub.models.agent import Agent
from ceahub.schemas.agent import AgentOut, AgentProfileUpdate, AgentRegister, ProfilePictureOut
from ceahub.services.supabase_gateway import SupabaseGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["agents"])


def make_agent_code(millis: int | None = None) -> str:
    """CEA- plus the last six digits of the millisecond clock."""
    millis = epoch_millis() if millis is None else millis
    return f"{settings.AGENT_CODE_PREFIX}-{str(millis)[-6:]}"


@router.post("/register-agent", response_model=AgentOut, status_code=status.HTTP_201_CREATED)
async def register_agent(payload: AgentRegister, db: AsyncSession = Depends(get_db)):
    """
    Body: {"userId": "<auth user id>", "name": ..., "email": ..., ...}
    Creates the agent row mirroring an existing Supabase Auth account.
    """
    agent = Agent(
        id=payload.user_id,
        name=payload.name,
        email=str(payload.email).strip().lower(),
        agent_id=make_agent_code(),
        role=AgentRole.CONSULTANT.value,
        contact_details=payload.contact_details,
        province=payload.province,
        about_me=payload.about_me,
        training_completed=payload.training_completed,
    )
    db.add(agent)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise InvalidInput("An agent is already registered for this user.", details="agent_exists")

    await db.refresh(agent)
    logger.info("registered agent %s (%s)", agent.id, agent.agent_id)
    return agent


@router.get("/get-agent-profile", response_model=AgentOut)
async def get_agent_profile(
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    agent = await get_agent(db, user.id)
    if agent is None:
        raise NotFound("Agent profile not found.")
    return agent


@router.put("/update-agent-profile/{agent_id}", response_model=AgentOut)
async def update_agent_profile(
    agent_id: uuid.UUID,
    payload: AgentProfileUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
):
    if user.id != agent_id:
        raise Forbidden("Forbidden: You can only update your own profile.")

    agent = await get_agent(db, user.id)
    if agent is None:
        raise NotFound("Agent profile not found.")

    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(agent, field, value)

    await db.commit()
    await db.refresh(agent)
    return agent


@router.post("/upload-profile-picture", response_model=ProfilePictureOut)
async def upload_profile_picture(
    profileImage: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
    gateway: SupabaseGateway = Depends(get_gateway),
):
    """
    multipart/form-data, field `profileImage`.
    The file is buffered in memory (capped at MAX_UPLOAD_BYTES) and
    forwarded to the profile-pictures bucket.
    """
    if profileImage is None:
        raise InvalidInput("No file uploaded.", details="file_missing")

    content = await profileImage.read(settings.MAX_UPLOAD_BYTES + 1)
    if not content:
        raise InvalidInput("No file uploaded.", details="file_missing")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise InvalidInput(
            f"File is too large (max {settings.MAX_UPLOAD_BYTES} bytes).",
            details="file_too_large",
        )

    agent = await get_agent(db, user.id)
    if agent is None:
        raise NotFound("Agent profile not found.")

    path = f"public/{user.id}-{epoch_millis()}"
    photo_url = await gateway.upload_public_file(
        path,
        content,
        profileImage.content_type or "application/octet-stream",
    )

    agent.photo_url = photo_url
    await db.commit()
    return ProfilePictureOut(photo_url=photo_url)
