"""
Candidate repository - database operations for Candidate and its timeline.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from talentdesk.models.candidate import Candidate
from talentdesk.models.candidate_timeline import CandidateTimelineEntry
from talentdesk.schemas.candidate import CandidateCreate


class CandidateRepository:
    """Repository for Candidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        organization_id: UUID,
        limit: int = 50,
        offset: int = 0,
        job_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> List[Candidate]:
        """List candidates for an organization with filters."""
        query = select(Candidate).where(Candidate.organization_id == organization_id)

        if job_id is not None:
            query = query.where(Candidate.job_id == job_id)
        if status is not None:
            query = query.where(Candidate.status == status)

        query = query.order_by(
            Candidate.last_name.asc(),
            Candidate.first_name.asc()
        ).limit(limit).offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def select_candidates_for_job(self, organization_id: UUID, job_id: UUID) -> List[Candidate]:
        """Every candidate of one job, newest first."""
        query = (
            select(Candidate)
            .where(
                Candidate.organization_id == organization_id,
                Candidate.job_id == job_id,
            )
            .order_by(Candidate.created_at.desc(), Candidate.id.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, organization_id: UUID, candidate_id: UUID) -> Optional[Candidate]:
        """Get a candidate by ID for a specific organization."""
        result = await self.db.execute(
            select(Candidate).where(
                Candidate.id == candidate_id,
                Candidate.organization_id == organization_id
            )
        )
        return result.scalar_one_or_none()

    async def create(self, organization_id: UUID, data: CandidateCreate) -> Candidate:
        """Create a new candidate."""
        values = data.model_dump(exclude={"metadata"})
        candidate = Candidate(
            id=uuid.uuid4(),
            organization_id=organization_id,
            extra_metadata=data.metadata,
            **values,
        )
        self.db.add(candidate)
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def update_candidate_status(
        self,
        organization_id: UUID,
        candidate_id: UUID,
        main_status_id: Optional[UUID],
        sub_status_id: Optional[UUID],
        updated_by: Optional[str] = None,
    ) -> Optional[Candidate]:
        """Point a candidate at a (main, sub) status pair."""
        candidate = await self.get_by_id(organization_id, candidate_id)
        if not candidate:
            return None

        candidate.main_status_id = main_status_id
        candidate.sub_status_id = sub_status_id
        candidate.updated_by = updated_by
        candidate.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def add_timeline_entry(
        self,
        organization_id: UUID,
        candidate_id: UUID,
        event_type: str,
        created_by: Optional[str],
        previous_state: Optional[Dict[str, Any]] = None,
        new_state: Optional[Dict[str, Any]] = None,
        event_data: Optional[Dict[str, Any]] = None,
    ) -> CandidateTimelineEntry:
        """Append one event to a candidate's timeline."""
        entry = CandidateTimelineEntry(
            id=uuid.uuid4(),
            organization_id=organization_id,
            candidate_id=candidate_id,
            event_type=event_type,
            created_by=created_by or "System",
            previous_state=previous_state,
            new_state=new_state,
            event_data=event_data,
        )
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def list_timeline(self, organization_id: UUID, candidate_id: UUID) -> List[CandidateTimelineEntry]:
        """Timeline of a candidate, oldest first."""
        result = await self.db.execute(
            select(CandidateTimelineEntry)
            .where(
                CandidateTimelineEntry.organization_id == organization_id,
                CandidateTimelineEntry.candidate_id == candidate_id,
            )
            .order_by(CandidateTimelineEntry.created_at.asc())
        )
        return list(result.scalars().all())
