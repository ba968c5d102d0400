"""Entries of the cargo index served to clients."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class IndexDependency(BaseModel):
    name: str
    req: str
    features: List[str] = Field(default_factory=list)
    optional: bool = False
    default_features: bool = True
    target: Optional[str] = None
    kind: str = "normal"
    registry: Optional[str] = None
    package: Optional[str] = None


class IndexEntry(BaseModel):
    """One line of an index file."""

    name: str
    vers: str
    deps: List[IndexDependency] = Field(default_factory=list)
    cksum: str
    features: Dict[str, List[str]] = Field(default_factory=dict)
    yanked: bool = False
    links: Optional[str] = None
    features2: Optional[Dict[str, List[str]]] = None
    v: Optional[int] = None
    rust_version: Optional[str] = None

    def to_line(self) -> str:
        return self.model_dump_json(exclude_none=True)


def render_index(entries: List[IndexEntry]) -> str:
    return "\n".join(entry.to_line() for entry in entries)
