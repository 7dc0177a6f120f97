"""Tests for RTC token issuance."""
from __future__ import annotations

import logging

import pytest
from fastapi import HTTPException

from token_server.services import rtc as rtc_service
from token_server.tokens import Role, decode_access_token, verify_access_token


@pytest.fixture
def agora_credentials(monkeypatch):
    monkeypatch.setattr(rtc_service.config.settings, "agora_app_id", "app1")
    monkeypatch.setattr(rtc_service.config.settings, "agora_app_certificate", "cert1")
    monkeypatch.setattr(rtc_service.config.settings, "token_ttl_seconds", 3600)


@pytest.mark.asyncio
async def test_issue_token_for_publisher(agora_credentials):
    issued = await rtc_service.issue_token("room42", 1000, Role.PUBLISHER, user_id="user-1", now=1_699_996_400)

    assert issued.app_id == "app1"
    assert issued.expires_at == 1_700_000_000
    assert issued.expires_in == 3600

    decoded = verify_access_token(issued.token, "cert1", now=1_699_996_400)
    assert decoded.channel_name == "room42"
    assert decoded.uid == 1000
    assert decoded.created_at == 1_699_996_400
    assert decoded.privileges == {1: 1_700_000_000, 2: 1_700_000_000, 3: 1_700_000_000, 4: 1_700_000_000}


@pytest.mark.asyncio
async def test_issue_token_for_subscriber_only_joins(agora_credentials):
    issued = await rtc_service.issue_token("room42", 7, Role.SUBSCRIBER, now=100, ttl_seconds=60)

    assert issued.expires_at == 160
    assert decode_access_token(issued.token).privileges == {1: 160}


@pytest.mark.asyncio
async def test_issue_token_requires_channel(agora_credentials):
    with pytest.raises(HTTPException) as exc:
        await rtc_service.issue_token("")

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_issue_token_without_credentials(monkeypatch):
    monkeypatch.setattr(rtc_service.config.settings, "agora_app_id", "app1")
    monkeypatch.setattr(rtc_service.config.settings, "agora_app_certificate", "")

    with pytest.raises(HTTPException) as exc:
        await rtc_service.issue_token("room42")

    assert exc.value.status_code == 500
    assert exc.value.detail == "Server configuration error"


@pytest.mark.asyncio
async def test_issue_token_never_logs_secrets(agora_credentials, caplog):
    caplog.set_level(logging.INFO, logger=rtc_service.__name__)

    issued = await rtc_service.issue_token("room42", 1000, user_id="user-1")

    assert "room42" in caplog.text
    assert "cert1" not in caplog.text
    assert issued.token not in caplog.text


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl", [0, -60])
async def test_issue_token_rejects_non_positive_ttl(agora_credentials, ttl):
    with pytest.raises(HTTPException) as exc:
        await rtc_service.issue_token("room42", ttl_seconds=ttl)

    assert exc.value.status_code == 400
