"""
Statuses router - the two-level candidate status taxonomy.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.dependencies import get_db, get_organization_id
from talentdesk.errors import NotFoundError
from talentdesk.schemas.job_status import (
    JobStatusCreate,
    JobStatusRead,
    JobStatusUpdate,
    MainStatus,
    StatusProgressRead,
)
from talentdesk.services.status_service import StatusService

router = APIRouter(prefix="/statuses", tags=["statuses"])


@router.get("", response_model=List[MainStatus])
async def list_statuses(
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Main statuses with their ordered sub statuses."""
    service = StatusService(db)
    return await service.fetch_all_statuses(organization_id)


@router.post("", response_model=JobStatusRead, status_code=status.HTTP_201_CREATED)
async def create_status(
    data: JobStatusCreate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a main status, or a sub status under an existing main status."""
    service = StatusService(db)
    return await service.create_status(organization_id, data)


@router.get("/{status_id}", response_model=JobStatusRead)
async def get_status(
    status_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = StatusService(db)
    job_status = await service.get_status_by_id(organization_id, status_id)
    if not job_status:
        raise NotFoundError(f"Status {status_id} not found")
    return job_status


@router.patch("/{status_id}", response_model=JobStatusRead)
async def update_status(
    status_id: UUID,
    data: JobStatusUpdate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = StatusService(db)
    return await service.update_status(organization_id, status_id, data)


@router.delete("/{status_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_status(
    status_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete a status. Refused while a main status still owns sub statuses."""
    service = StatusService(db)
    await service.delete_status(organization_id, status_id)


@router.get("/{status_id}/progress", response_model=StatusProgressRead)
async def get_status_progress(
    status_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Progress vector of the main status owning status_id."""
    service = StatusService(db)
    return await service.progress_for_status(organization_id, status_id)
