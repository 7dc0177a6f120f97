"""Data contracts for RTC endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..tokens import Role
from ..tokens.packing import UINT32_MAX

_ROLE_ALIASES = {
    "publisher": Role.PUBLISHER,
    "host": Role.PUBLISHER,
    "subscriber": Role.SUBSCRIBER,
    "audience": Role.SUBSCRIBER,
}


class RtcTokenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    channel_name: str = Field(default="", alias="channelName", max_length=64, description="Channel to join")
    uid: int = Field(default=0, ge=0, le=UINT32_MAX, description="Numeric RTC user id, 0 lets the SDK assign one")
    role: Role = Field(default=Role.PUBLISHER, description="1/publisher or 2/subscriber (audience)")

    @field_validator("uid", mode="before")
    @classmethod
    def _blank_uid(cls, value: object) -> object:
        if value is None or value == "":
            return 0
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> object:
        """Accept role names or numeric codes; anything but subscriber publishes."""

        if value is None:
            return Role.PUBLISHER
        if isinstance(value, str):
            text = value.strip().lower()
            if not text.isdigit():
                return _ROLE_ALIASES.get(text, Role.PUBLISHER)
            value = int(text)
        if isinstance(value, int) and not isinstance(value, bool):
            return Role.SUBSCRIBER if value == Role.SUBSCRIBER else Role.PUBLISHER
        return value


class RtcTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="Version 007 access token")
    app_id: str = Field(..., alias="appId")
    channel_name: str = Field(..., alias="channelName")
    uid: int
    expires_at: int = Field(..., alias="expiresAt", description="Privilege expiry, UNIX seconds")
    expires_in: int = Field(..., alias="expiresIn", ge=1, description="Seconds until expiration")
