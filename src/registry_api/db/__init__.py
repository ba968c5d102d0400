"""Registry database helpers."""

from .base import Base
from .session import build_async_engine, build_session_factory, create_schema

__all__ = [
    "Base",
    "build_async_engine",
    "build_session_factory",
    "create_schema",
]
