"""RTC token issuance endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.rtc import RtcTokenRequest, RtcTokenResponse
from ..services import rtc as rtc_service
from ..services.identity import AuthenticatedUser, require_user

router = APIRouter()


@router.post("/token", response_model=RtcTokenResponse)
async def create_rtc_token(
    payload: RtcTokenRequest,
    user: AuthenticatedUser = Depends(require_user),
) -> RtcTokenResponse:
    """Return a channel access token for the authenticated caller."""

    token = await rtc_service.issue_token(payload.channel_name, payload.uid, payload.role, user_id=user.id)
    return RtcTokenResponse(
        token=token.token,
        app_id=token.app_id,
        channel_name=token.channel_name,
        uid=token.uid,
        expires_at=token.expires_at,
        expires_in=token.expires_in,
    )
