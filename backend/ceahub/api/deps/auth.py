from __future__ import annotations

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ceahub.api.deps.services import get_gateway
from ceahub.core.config import settings
from ceahub.core.errors import Forbidden, InternalError, Unauthorized
from ceahub.core.security import AuthenticatedUser, bearer_scheme, decode_access_token, normalize_token
from ceahub.db.session import get_db
from ceahub.models.agent import Agent
from ceahub.services.supabase_gateway import SupabaseGateway

logger = logging.getLogger(__name__)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    gateway: SupabaseGateway = Depends(get_gateway),
) -> AuthenticatedUser:
    """
    Dependency for protected endpoints.

    With SUPABASE_JWT_SECRET configured the token is verified locally;
    otherwise the identity service resolves it.
    """
    token = normalize_token(credentials.credentials if credentials else None)
    if not token:
        raise Unauthorized("No token provided.")

    if settings.SUPABASE_JWT_SECRET:
        return decode_access_token(token, settings.SUPABASE_JWT_SECRET)

    return await gateway.get_user(token)


async def require_admin(
    db: AsyncSession = Depends(get_db),
    user: AuthenticatedUser = Depends(get_current_user),
) -> Agent:
    try:
        agent = await db.get(Agent, user.id)
    except SQLAlchemyError as e:
        logger.exception("admin role lookup failed for %s", user.id)
        raise InternalError("Failed to verify admin role.") from e

    if agent is None or not agent.is_admin:
        raise Forbidden("Access Denied: Administrator privileges required.")
    return agent
