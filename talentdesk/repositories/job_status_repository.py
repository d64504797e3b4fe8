"""
JobStatus repository - database operations for the status taxonomy.
"""

from typing import List, Optional
from uuid import UUID
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.models.job_status import JobStatus, STATUS_TYPE_SUB
from talentdesk.schemas.job_status import JobStatusCreate, JobStatusUpdate


class JobStatusRepository:
    """Repository for JobStatus database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def select_statuses(self, organization_id: UUID) -> List[JobStatus]:
        """All main and sub status rows of an organization."""
        query = (
            select(JobStatus)
            .where(JobStatus.organization_id == organization_id)
            .order_by(JobStatus.display_order.asc(), JobStatus.name.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, organization_id: UUID, status_id: UUID) -> Optional[JobStatus]:
        """Get a status row by ID for a specific organization."""
        result = await self.db.execute(
            select(JobStatus).where(
                JobStatus.id == status_id,
                JobStatus.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, organization_id: UUID, data: JobStatusCreate) -> JobStatus:
        """Create a new status row."""
        job_status = JobStatus(
            id=uuid.uuid4(),
            organization_id=organization_id,
            **data.model_dump(),
        )
        self.db.add(job_status)
        await self.db.flush()
        await self.db.refresh(job_status)
        return job_status

    async def update(
        self,
        organization_id: UUID,
        status_id: UUID,
        data: JobStatusUpdate,
    ) -> Optional[JobStatus]:
        """Update a status row."""
        job_status = await self.get_by_id(organization_id, status_id)
        if not job_status:
            return None

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(job_status, field, value)

        job_status.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(job_status)
        return job_status

    async def delete(self, organization_id: UUID, status_id: UUID) -> bool:
        """Hard delete a status row. Returns False when nothing was deleted."""
        result = await self.db.execute(
            delete(JobStatus).where(
                JobStatus.id == status_id,
                JobStatus.organization_id == organization_id,
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def count_children(self, organization_id: UUID, status_id: UUID) -> int:
        """Number of sub statuses pointing at status_id."""
        result = await self.db.execute(
            select(func.count(JobStatus.id)).where(
                JobStatus.organization_id == organization_id,
                JobStatus.parent_id == status_id,
                JobStatus.type == STATUS_TYPE_SUB,
            )
        )
        return result.scalar_one()
