"""
Candidates router - candidate records, status changes and the job pipeline board.
"""

from typing import List, Optional, Set
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.config import settings
from talentdesk.core.dependencies import get_db, get_organization_id
from talentdesk.errors import NotFoundError
from talentdesk.schemas.candidate import (
    BoardEntry,
    CandidateCreate,
    CandidateFilter,
    CandidateRead,
    CandidateStatusUpdate,
    CandidateTimelineRead,
)
from talentdesk.services.candidate_service import CandidateService

router = APIRouter(prefix="/candidates", tags=["candidates"])
board_router = APIRouter(prefix="/jobs", tags=["candidates"])


@router.get("", response_model=List[CandidateRead])
async def list_candidates(
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    job_id: Optional[UUID] = None,
    status: Optional[str] = None,
):
    """
    List candidates with pagination and filters.

    Filters: job_id, status (raw legacy value).
    """
    service = CandidateService(db)
    return await service.list_candidates(
        organization_id=organization_id,
        limit=limit,
        offset=offset,
        job_id=job_id,
        status=status,
    )


@router.post("", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: CandidateCreate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = CandidateService(db)
    return await service.create_candidate(organization_id, data)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(
    candidate_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = CandidateService(db)
    candidate = await service.get_candidate(organization_id, candidate_id)
    if not candidate:
        raise NotFoundError(f"Candidate {candidate_id} not found")
    return candidate


@router.put("/{candidate_id}/status", response_model=CandidateRead)
async def update_candidate_status(
    candidate_id: UUID,
    data: CandidateStatusUpdate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Move a candidate to a sub status; its main status follows."""
    service = CandidateService(db)
    return await service.update_candidate_status(organization_id, candidate_id, data)


@router.get("/{candidate_id}/timeline", response_model=List[CandidateTimelineRead])
async def get_candidate_timeline(
    candidate_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = CandidateService(db)
    return await service.get_timeline(organization_id, candidate_id)


@board_router.get("/{job_id}/board", response_model=List[BoardEntry])
async def get_job_board(
    job_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
    status: Optional[str] = None,
    main_status_name: Optional[str] = None,
    status_ids: Optional[List[UUID]] = Query(None),
):
    """
    Candidates of a job with their pipeline projection.

    Filters are ANDed: status (normalized legacy value), main_status_name,
    status_ids (matches either the main or the sub status id).
    """
    ids: Optional[Set[UUID]] = set(status_ids) if status_ids else None
    criteria = CandidateFilter(status=status, main_status_name=main_status_name, status_ids=ids)
    service = CandidateService(db)
    return await service.list_board(organization_id, job_id, criteria)
