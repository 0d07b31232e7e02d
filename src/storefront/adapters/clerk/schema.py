"""Clerk webhook user payloads (``clerk/user.*`` events)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClerkModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ClerkEmailAddress(ClerkModel):
    id: str | None = None
    email_address: str


class ClerkUserData(ClerkModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email_addresses: list[ClerkEmailAddress] = Field(default_factory=list[ClerkEmailAddress])
    primary_email_address_id: str | None = None
    image_url: str = ""


class ClerkDeletedUserData(ClerkModel):
    id: str
    deleted: bool = True
