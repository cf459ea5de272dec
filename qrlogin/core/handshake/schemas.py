"""Request payloads for the handshake endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PollRequest(_Payload):
    qr_session: Optional[str] = Field(default=None, alias="qrSession", max_length=256)


class RememberRequest(_Payload):
    remember: bool = False


class ProofCallback(_Payload):
    """Query string sent by the agent to the callback endpoint."""

    token: Optional[str] = Field(default=None, max_length=4096)
    request: Optional[str] = Field(default=None, max_length=4096)
    state: Optional[str] = Field(default=None, max_length=256)
    notification_url: Optional[str] = Field(default=None, alias="notificationURL", max_length=2048)

    @field_validator("token", "request", "state", "notification_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


__all__ = ["PollRequest", "RememberRequest", "ProofCallback"]
