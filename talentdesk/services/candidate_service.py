"""
Candidate business logic service.

The pipeline board of a job (every candidate with its projection) is cached
per (organization, job) in the generation-guarded board_cache. Writes to a
job's candidates invalidate its key now and again after commit, so a board
computed from pre-write rows is never served after the write.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.errors import NotFoundError
from talentdesk.models.candidate import Candidate
from talentdesk.models.candidate_timeline import CandidateTimelineEntry, EVENT_STATUS_CHANGE
from talentdesk.pipeline.projector import filter_projections, project_status, resolve_candidate_status
from talentdesk.pipeline.status_model import build_taxonomy, find_main_status, find_status_pair
from talentdesk.repositories.candidate_repository import CandidateRepository
from talentdesk.repositories.job_status_repository import JobStatusRepository
from talentdesk.schemas.candidate import (
    BoardEntry,
    CandidateCreate,
    CandidateFilter,
    CandidateRead,
    CandidateStatusUpdate,
)
from talentdesk.schemas.job_status import MainStatus
from talentdesk.services.board_cache import board_cache, board_key, invalidate_job_board
from talentdesk.services.status_service import StatusService

logger = logging.getLogger(__name__)


def _status_state(
    taxonomy: List[MainStatus],
    main_status_id: Optional[UUID],
    sub_status_id: Optional[UUID],
) -> Dict[str, Any]:
    """Timeline snapshot of a (main, sub) pair with resolved names."""
    main = find_main_status(taxonomy, main_status_id)
    pair = find_status_pair(taxonomy, sub_status_id)
    return {
        "main_status_id": str(main_status_id) if main_status_id else None,
        "sub_status_id": str(sub_status_id) if sub_status_id else None,
        "main_status_name": main.value.name if main.ok else None,
        "sub_status_name": pair.value[1].name if pair.ok else None,
    }


class CandidateService:
    """Service for candidate business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = CandidateRepository(db)
        self.statuses = StatusService(db)

    async def list_candidates(
        self,
        organization_id: UUID,
        limit: int = 50,
        offset: int = 0,
        job_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> List[Candidate]:
        """List candidates with filters."""
        return await self.repository.list(
            organization_id=organization_id,
            limit=limit,
            offset=offset,
            job_id=job_id,
            status=status,
        )

    async def get_candidate(self, organization_id: UUID, candidate_id: UUID) -> Optional[Candidate]:
        """Get a candidate by ID."""
        return await self.repository.get_by_id(organization_id, candidate_id)

    async def create_candidate(self, organization_id: UUID, data: CandidateCreate) -> Candidate:
        """Create a new candidate."""
        candidate = await self.repository.create(organization_id, data)
        invalidate_job_board(self.db, organization_id, candidate.job_id)
        return candidate

    async def _select_candidates_for_job(self, organization_id: UUID, job_id: UUID) -> List[Candidate]:
        try:
            return await self.repository.select_candidates_for_job(organization_id, job_id)
        except SQLAlchemyError:
            logger.exception("Failed to fetch candidates for job %s", job_id)
            await self.db.rollback()
            return []

    async def _project_board(self, organization_id: UUID, job_id: UUID) -> List[BoardEntry]:
        candidates = await self._select_candidates_for_job(organization_id, job_id)
        if not candidates:
            return []

        taxonomy = await self.statuses.fetch_all_statuses(organization_id)
        board = []
        for candidate in candidates:
            resolved = resolve_candidate_status(candidate, taxonomy)
            if not resolved.ok:
                logger.warning("Candidate %s: %s", candidate.id, resolved.error.describe())
            board.append(
                BoardEntry(
                    candidate=CandidateRead.model_validate(candidate),
                    pipeline=project_status(candidate.id, resolved.value),
                )
            )
        return board

    async def list_board(
        self,
        organization_id: UUID,
        job_id: UUID,
        criteria: Optional[CandidateFilter] = None,
    ) -> List[BoardEntry]:
        """Projected candidates of a job, narrowed by criteria."""
        key = board_key(organization_id, job_id)
        board = board_cache.get(key)
        if board is None:
            generation = board_cache.begin(key)
            try:
                board = await self._project_board(organization_id, job_id)
            except Exception:
                board_cache.abandon(key, generation)
                raise
            board_cache.commit(key, generation, board)

        if criteria is None:
            return list(board)
        kept = {p.candidate_id for p in filter_projections((e.pipeline for e in board), criteria)}
        return [e for e in board if e.candidate.id in kept]

    async def update_candidate_status(
        self,
        organization_id: UUID,
        candidate_id: UUID,
        data: CandidateStatusUpdate,
    ) -> Candidate:
        """
        Move a candidate to a sub status; its main status follows the sub
        status's parent. A status_change timeline entry records the
        previous and new state.
        """
        candidate = await self.repository.get_by_id(organization_id, candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate {candidate_id} not found")

        rows = await JobStatusRepository(self.db).select_statuses(organization_id)
        taxonomy = build_taxonomy(rows)
        main, sub = find_status_pair(taxonomy, data.sub_status_id).unwrap()

        previous_state = None
        if candidate.main_status_id or candidate.sub_status_id:
            previous_state = _status_state(taxonomy, candidate.main_status_id, candidate.sub_status_id)

        updated = await self.repository.update_candidate_status(
            organization_id,
            candidate_id,
            main_status_id=main.id,
            sub_status_id=sub.id,
            updated_by=data.user_id,
        )
        await self.repository.add_timeline_entry(
            organization_id,
            candidate_id,
            event_type=EVENT_STATUS_CHANGE,
            created_by=data.user_id,
            previous_state=previous_state,
            new_state=_status_state(taxonomy, main.id, sub.id),
            event_data={"action": "Status updated"},
        )
        invalidate_job_board(self.db, organization_id, updated.job_id)
        logger.info("Candidate %s moved to %s (%s)", candidate_id, main.name, sub.name)
        return updated

    async def get_timeline(self, organization_id: UUID, candidate_id: UUID) -> List[CandidateTimelineEntry]:
        candidate = await self.repository.get_by_id(organization_id, candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate {candidate_id} not found")
        return await self.repository.list_timeline(organization_id, candidate_id)
