"""RTC token issuance.

Wraps the ``007`` access-token codec with configuration lookup, role handling
and request logging. The token itself is never logged."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from fastapi import HTTPException, status

from ..core import config
from ..tokens import AccessTokenError, ConfigurationError, Role, build_token_with_uid

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RtcToken:
    token: str
    app_id: str
    channel_name: str
    uid: int
    role: Role
    expires_at: int
    expires_in: int


async def issue_token(
    channel_name: str,
    uid: int = 0,
    role: Role = Role.PUBLISHER,
    *,
    user_id: str | None = None,
    ttl_seconds: int | None = None,
    now: int | None = None,
) -> RtcToken:
    """Produce an RTC access token valid for ``ttl_seconds`` (default ``settings.token_ttl_seconds``)."""

    settings = config.settings
    role = Role(role)
    if not channel_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="channelName is required")

    if not settings.has_agora_credentials:
        logger.error("Missing Agora configuration")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")

    current = int(time.time()) if now is None else now
    expires_in = settings.token_ttl_seconds if ttl_seconds is None else ttl_seconds
    if expires_in <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="ttl must be a positive number of seconds")
    expires_at = current + expires_in

    logger.info(
        "Generating token: user=%s channel=%s uid=%s role=%s expires_at=%s",
        user_id,
        channel_name,
        uid,
        role.name.lower(),
        expires_at,
    )

    try:
        token = build_token_with_uid(
            settings.agora_app_id,
            settings.agora_app_certificate,
            channel_name,
            uid,
            role,
            expires_at,
            created_at=current,
        )
    except ConfigurationError as exc:
        logger.error("Agora configuration rejected: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error") from exc
    except AccessTokenError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info("Token generated for channel %s", channel_name)
    return RtcToken(
        token=token,
        app_id=settings.agora_app_id,
        channel_name=channel_name,
        uid=uid,
        role=role,
        expires_at=expires_at,
        expires_in=expires_in,
    )
