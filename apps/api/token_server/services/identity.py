"""Caller authentication against the Supabase auth API."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from fastapi import Header, HTTPException, status
from supabase import AsyncClient, AuthApiError, AuthError, acreate_client

from ..core.config import settings

logger = logging.getLogger(__name__)

_supabase_client: AsyncClient | None = None


class IdentityError(RuntimeError):
    """Raised when the bearer token cannot be resolved to a user."""


@dataclass(slots=True)
class AuthenticatedUser:
    id: str
    email: str | None = None


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise IdentityError("Missing authorization header")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        raise IdentityError("Missing or invalid authorization header")
    return credentials.strip()


async def get_supabase_client() -> AsyncClient:
    """Return the shared anon-key Supabase client, creating it on first use."""

    global _supabase_client
    if _supabase_client is None:
        if not settings.has_identity_provider:
            raise RuntimeError("Supabase URL or anon key missing")
        _supabase_client = await acreate_client(settings.supabase_url, settings.supabase_anon_key)
    return _supabase_client


async def fetch_user(access_token: str, client: AsyncClient) -> AuthenticatedUser:
    """Resolve a Supabase access token to its user."""

    try:
        user_response = await client.auth.get_user(jwt=access_token)
    except AuthApiError as exc:
        logger.warning("Supabase rejected token (status %s): %s", exc.status, exc.message)
        raise IdentityError("Unauthorized: Invalid JWT") from exc
    except (AuthError, httpx.HTTPError) as exc:
        logger.warning("Identity provider request failed: %s", exc)
        raise IdentityError("Identity provider unavailable") from exc
    except ValueError as exc:
        # non-JSON body, e.g. a proxy error page
        logger.warning("Identity provider returned an unreadable response: %s", exc)
        raise IdentityError("Unauthorized: Invalid JWT") from exc

    if not user_response or not user_response.user or not user_response.user.id:
        raise IdentityError("Unauthorized: Invalid JWT")
    return AuthenticatedUser(id=str(user_response.user.id), email=user_response.user.email)


async def require_user(authorization: str | None = Header(default=None)) -> AuthenticatedUser:
    """FastAPI dependency returning the authenticated caller."""

    try:
        token = _bearer_token(authorization)
    except IdentityError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    if not settings.has_identity_provider:
        logger.error("Missing Supabase configuration; cannot verify callers")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")

    client = await get_supabase_client()
    try:
        return await fetch_user(token, client)
    except IdentityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
