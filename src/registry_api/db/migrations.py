"""Helpers to apply Alembic migrations programmatically."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

REVISIONS_DIR = Path(__file__).resolve().parent / "revisions"


def _alembic_config() -> Config:
    alembic_cfg = Config()
    # Keep the application logging configuration.
    alembic_cfg.attributes["configure_logger"] = False
    alembic_cfg.set_main_option("script_location", str(REVISIONS_DIR))
    return alembic_cfg


def _run_upgrade(connection: Connection, alembic_cfg: Config) -> None:
    alembic_cfg.attributes["connection"] = connection
    command.upgrade(alembic_cfg, "head")


async def upgrade_database(engine: AsyncEngine) -> None:
    """Run Alembic migrations up to the latest revision on ``engine``."""
    async with engine.begin() as conn:
        await conn.run_sync(_run_upgrade, _alembic_config())


__all__ = ["upgrade_database"]
