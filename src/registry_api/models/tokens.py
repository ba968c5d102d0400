from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class AuthToken(BaseModel):
    """Token metadata. The key itself is never part of this record."""

    id: str
    name: str
    user_id: str
    created_at: datetime


class AuthTokenCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=128)


class GeneratedToken(BaseModel):
    key: str
    token: AuthToken


class AuthTokenList(BaseModel):
    items: List[AuthToken] = Field(default_factory=list)
