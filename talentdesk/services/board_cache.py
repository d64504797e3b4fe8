"""
Process-wide cache of projected job boards.

Boards are keyed by (organization_id, job_id). Writes invalidate twice:
immediately, so reads already in flight lose, and again once the writing
session commits, so a board read from the not yet committed rows in between
is never served afterwards.
"""

import logging
from typing import Callable, Hashable, List
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.config import settings
from talentdesk.core.generations import ProjectionCache
from talentdesk.schemas.candidate import BoardEntry

logger = logging.getLogger(__name__)

board_cache: ProjectionCache[List[BoardEntry]] = ProjectionCache(settings.BOARD_CACHE_TTL_SECONDS)


def board_key(organization_id: UUID, job_id: UUID) -> Hashable:
    return (organization_id, job_id)


def _now_and_after_commit(db: AsyncSession, invalidate: Callable[[], None]) -> None:
    invalidate()
    event.listen(db.sync_session, "after_commit", lambda session: invalidate(), once=True)


def invalidate_job_board(db: AsyncSession, organization_id: UUID, job_id: UUID) -> None:
    """Drop the board of one job (candidate added or moved)."""
    key = board_key(organization_id, job_id)
    _now_and_after_commit(db, lambda: board_cache.invalidate(key))


def invalidate_organization_boards(db: AsyncSession, organization_id: UUID) -> None:
    """Drop every board of an organization (its status taxonomy changed)."""

    def invalidate() -> None:
        dropped = board_cache.invalidate_matching(lambda key: key[0] == organization_id)
        if dropped:
            logger.debug("Invalidated %d boards of organization %s", dropped, organization_id)

    _now_and_after_commit(db, invalidate)
