"""
Status taxonomy business logic service.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.errors import ConflictError, InvariantViolation, NotFoundError
from talentdesk.models.job_status import JobStatus, STATUS_TYPE_MAIN, STATUS_TYPE_SUB
from talentdesk.pipeline.projector import main_status_stage, progress_for
from talentdesk.pipeline.status_model import build_taxonomy, find_owning_main_status
from talentdesk.repositories.job_status_repository import JobStatusRepository
from talentdesk.schemas.job_status import JobStatusCreate, JobStatusUpdate, MainStatus, StatusProgressRead
from talentdesk.services.board_cache import invalidate_organization_boards

logger = logging.getLogger(__name__)


class StatusService:
    """Service for the two-level candidate status taxonomy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = JobStatusRepository(db)

    async def fetch_all_statuses(self, organization_id: UUID) -> List[MainStatus]:
        """
        Main statuses with their sub statuses, both ordered by display_order.

        A failed fetch is logged and yields an empty taxonomy.
        """
        try:
            rows = await self.repository.select_statuses(organization_id)
        except SQLAlchemyError:
            logger.exception("Failed to fetch statuses for organization %s", organization_id)
            await self.db.rollback()
            return []
        return build_taxonomy(rows)

    async def get_status_by_id(self, organization_id: UUID, status_id: UUID) -> Optional[JobStatus]:
        return await self.repository.get_by_id(organization_id, status_id)

    async def _require_main_parent(self, organization_id: UUID, parent_id: Optional[UUID]) -> JobStatus:
        if parent_id is None:
            raise InvariantViolation("A sub status requires a parent main status")
        parent = await self.repository.get_by_id(organization_id, parent_id)
        if parent is None or parent.type != STATUS_TYPE_MAIN:
            raise InvariantViolation(
                f"Parent status {parent_id} is not a main status",
                details={"parent_id": str(parent_id)},
            )
        return parent

    async def create_status(self, organization_id: UUID, data: JobStatusCreate) -> JobStatus:
        """Create a main status, or a sub status under an existing main status."""
        if data.type == STATUS_TYPE_SUB:
            await self._require_main_parent(organization_id, data.parent_id)
        elif data.parent_id is not None:
            raise InvariantViolation("A main status cannot have a parent")

        job_status = await self.repository.create(organization_id, data)
        invalidate_organization_boards(self.db, organization_id)
        logger.info("Created %s status %s (%s)", job_status.type, job_status.id, job_status.name)
        return job_status

    async def update_status(self, organization_id: UUID, status_id: UUID, data: JobStatusUpdate) -> JobStatus:
        existing = await self.repository.get_by_id(organization_id, status_id)
        if existing is None:
            raise NotFoundError(f"Status {status_id} not found")

        if "parent_id" in data.model_fields_set:
            if existing.type == STATUS_TYPE_MAIN:
                if data.parent_id is not None:
                    raise InvariantViolation("A main status cannot have a parent")
            else:
                await self._require_main_parent(organization_id, data.parent_id)

        job_status = await self.repository.update(organization_id, status_id, data)
        # Boards carry status names, colours and progress
        invalidate_organization_boards(self.db, organization_id)
        return job_status

    async def delete_status(self, organization_id: UUID, status_id: UUID) -> None:
        """Delete a status; a main status must not own sub statuses any more."""
        existing = await self.repository.get_by_id(organization_id, status_id)
        if existing is None:
            raise NotFoundError(f"Status {status_id} not found")

        children = await self.repository.count_children(organization_id, status_id)
        if children:
            raise ConflictError(
                f"Status {existing.name} still has {children} sub statuses",
                details={"status_id": str(status_id), "sub_statuses": children},
            )

        await self.repository.delete(organization_id, status_id)
        invalidate_organization_boards(self.db, organization_id)
        logger.info("Deleted status %s (%s)", status_id, existing.name)

    async def progress_for_status(self, organization_id: UUID, status_id: UUID) -> StatusProgressRead:
        """
        Progress vector of the main status owning status_id.

        All positions are false when the id does not resolve.
        """
        taxonomy = await self.fetch_all_statuses(organization_id)
        main = find_owning_main_status(taxonomy, status_id)
        if not main.ok:
            logger.debug("No progress mapping: %s", main.error.describe())
            return StatusProgressRead(status_id=status_id)

        progress = progress_for(main_status_stage(main.value))
        return StatusProgressRead(status_id=status_id, **progress.model_dump())
