"""Health check router: database reachability and migration state."""

import logging
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.config import settings
from talentdesk.core.dependencies import get_db
from talentdesk.services.board_cache import board_cache

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def migration_head() -> Optional[str]:
    """Newest revision shipped under alembic/, None outside a source checkout."""
    ini_path = PROJECT_ROOT / "alembic.ini"
    scripts = PROJECT_ROOT / "alembic"
    if not (ini_path.exists() and scripts.exists()):
        return None

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(scripts))
    return ScriptDirectory.from_config(config).get_current_head()


async def applied_revision(db: AsyncSession) -> Optional[str]:
    """Revision stamped in the database; None when never migrated."""
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError:
        # Schema created from metadata (tests) has no alembic_version table
        await db.rollback()
        return None
    return result.scalar_one_or_none()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report whether the API, the database and the migrations are in order."""
    db_ok = True
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check: database unreachable", exc_info=True)
        await db.rollback()
        db_ok = False

    current = await applied_revision(db) if db_ok else None

    try:
        head = migration_head()
    except Exception:
        logger.warning("Health check: could not read migration head", exc_info=True)
        head = None

    return {
        "app": settings.APP_NAME,
        "api_ok": True,
        "db_ok": db_ok,
        "alembic_head_ok": bool(current and head and current == head),
        "alembic_current": current,
        "alembic_head": head,
        "cached_boards": len(board_cache),
    }
