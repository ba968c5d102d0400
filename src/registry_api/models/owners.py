from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class OwnerUser(BaseModel):
    id: str
    login: str
    name: Optional[str] = None


class OwnerList(BaseModel):
    users: List[OwnerUser] = Field(default_factory=list)


class OwnersAddRequest(BaseModel):
    users: List[str] = Field(min_length=1)


class OwnersAddResponse(BaseModel):
    ok: bool = True
    msg: str
