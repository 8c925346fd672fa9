# backend/ceahub/schemas/agent.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ceahub.core.roles import AgentRole


def _normalize_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = " ".join(value.strip().split())
    return v or None


class AgentRegister(BaseModel):
    """
    Body posted by the signup page right after the Supabase Auth account
    was created. `userId` is the Auth user id.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: UUID = Field(alias="userId")
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr

    contact_details: Optional[str] = Field(default=None, max_length=200)
    province: Optional[str] = Field(default=None, max_length=100)
    about_me: Optional[str] = None
    training_completed: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = _normalize_text(v)
        if not v:
            raise ValueError("name is required")
        return v


class AgentProfileUpdate(BaseModel):
    """Fields an agent may change on their own profile."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, max_length=200)
    about_me: Optional[str] = None
    province: Optional[str] = Field(default=None, max_length=100)
    town: Optional[str] = Field(default=None, max_length=100)
    address: Optional[str] = None
    contact_details: Optional[str] = Field(default=None, max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        # only runs for an explicit value; omitted fields keep the column as is
        if v is None:
            raise ValueError("name cannot be null")
        v = _normalize_text(v)
        if not v:
            raise ValueError("name cannot be blank")
        return v


class AdminAgentUpdate(AgentProfileUpdate):
    """Admins can edit every column except the id."""
    model_config = ConfigDict(extra="forbid")

    email: Optional[EmailStr] = None
    role: Optional[AgentRole] = None
    agent_id: Optional[str] = Field(default=None, max_length=20)
    photo_url: Optional[str] = None
    training_completed: Optional[bool] = None

    # the admin edit form posts the full row back; these are read-only
    id: Optional[UUID] = Field(default=None, exclude=True)
    created_at: Optional[datetime] = Field(default=None, exclude=True)
    updated_at: Optional[datetime] = Field(default=None, exclude=True)

    @field_validator("email", "role", "training_completed")
    @classmethod
    def reject_null(cls, v, info):
        # NOT NULL columns: omit the key to leave them unchanged
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PasswordReset(BaseModel):
    new_password: str = Field(default="")

    @field_validator("new_password")
    @classmethod
    def validate_length(cls, v: str) -> str:
        if len(v or "") < 6:
            raise ValueError("Password must be at least 6 characters.")
        return v


class AgentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    agent_id: Optional[str] = None

    contact_details: Optional[str] = None
    province: Optional[str] = None
    town: Optional[str] = None
    address: Optional[str] = None
    about_me: Optional[str] = None
    photo_url: Optional[str] = None
    training_completed: bool = False

    created_at: datetime
    updated_at: datetime


class AgentUpdateResult(BaseModel):
    success: bool = True
    data: AgentOut


class PublicAgentOut(BaseModel):
    """Map pins: the fields anyone may see."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    province: Optional[str] = None
    town: Optional[str] = None
    photo_url: Optional[str] = None


class PublicAgentDetailOut(PublicAgentOut):
    about_me: Optional[str] = None
    contact_details: Optional[str] = None
    email: Optional[str] = None


class ProfilePictureOut(BaseModel):
    success: bool = True
    photo_url: str


class MessageOut(BaseModel):
    success: bool = True
    message: str
