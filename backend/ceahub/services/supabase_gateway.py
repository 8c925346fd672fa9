"""Supabase Auth + Storage access for the API (rows live in Postgres via SQLAlchemy)."""
from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from typing import Any, Optional

from starlette.concurrency import run_in_threadpool
from supabase import Client, create_client

from ceahub.core.config import settings
from ceahub.core.errors import InternalError, Unauthorized, UpstreamError
from ceahub.core.security import AuthenticatedUser, parse_subject

logger = logging.getLogger(__name__)


class SupabaseGateway:
    """
    Thin async wrapper around the (blocking) supabase-py client.

    The client is created on first use, so deployments that verify tokens
    locally and never upload can run without Supabase credentials.
    Every SDK call runs in the threadpool. SDK error text is logged and
    never returned to clients.
    """

    def __init__(
        self,
        url: Optional[str],
        service_role_key: Optional[str],
        *,
        bucket: str,
        client: Optional[Client] = None,
    ) -> None:
        self._url = url
        self._key = service_role_key
        self._client = client
        self.bucket = bucket

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self._url and self._key)

    def _get_client(self) -> Client:
        if self._client is None:
            if not self.configured:
                raise InternalError(
                    "Identity service is not configured.",
                    details="supabase_not_configured",
                )
            self._client = create_client(self._url, self._key)
        return self._client

    # -----------------------------
    # Auth
    # -----------------------------
    async def get_user(self, token: str) -> AuthenticatedUser:
        client = self._get_client()
        try:
            res = await run_in_threadpool(client.auth.get_user, token)
        except Exception as e:
            logger.info("token rejected by identity service: %s", e)
            raise Unauthorized("Invalid or expired token.")

        user = getattr(res, "user", None) if res is not None else None
        if user is None:
            raise Unauthorized("User not found for this token.")

        return AuthenticatedUser(id=parse_subject(user.id), email=getattr(user, "email", None))

    async def update_user_password(self, user_id: uuid.UUID, new_password: str) -> None:
        client = self._get_client()
        try:
            await run_in_threadpool(
                client.auth.admin.update_user_by_id,
                str(user_id),
                {"password": new_password},
            )
        except Exception as e:
            logger.exception("password update failed for user %s", user_id)
            raise UpstreamError("Failed to update password.") from e

    # -----------------------------
    # Storage
    # -----------------------------
    async def upload_public_file(self, path: str, content: bytes, content_type: str) -> str:
        """
        Upload (upsert) to the configured bucket and return the public URL.
        """
        bucket = self._get_client().storage.from_(self.bucket)
        try:
            await run_in_threadpool(
                bucket.upload,
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"},
            )
            url: Any = await run_in_threadpool(bucket.get_public_url, path)
        except Exception as e:
            logger.exception("upload to bucket %s failed (path=%s)", self.bucket, path)
            raise UpstreamError("Failed to upload profile picture.") from e

        return str(url).rstrip("?")


def build_gateway(
    url: Optional[str] = None,
    service_role_key: Optional[str] = None,
    bucket: Optional[str] = None,
) -> SupabaseGateway:
    return SupabaseGateway(
        url or settings.SUPABASE_URL,
        service_role_key or settings.SUPABASE_SERVICE_ROLE_KEY,
        bucket=bucket or settings.PROFILE_PICTURES_BUCKET,
    )


@lru_cache(maxsize=1)
def get_supabase_gateway() -> SupabaseGateway:
    """
    FastAPI dependency. One gateway per process; tests replace it through
    app.dependency_overrides.
    """
    return build_gateway()
