"""
Reports router - recruiter performance metrics, funnel and exports.
"""

from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.dependencies import get_db, get_organization_id
from talentdesk.schemas.report import (
    FunnelStage,
    RecruiterActivityCreate,
    RecruiterPerformanceRecord,
    RecruiterReport,
    ReportTable,
)
from talentdesk.services.report_service import ReportService

router = APIRouter(prefix="/reports/recruiters", tags=["reports"])


@router.get("", response_model=RecruiterReport)
async def get_recruiter_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Per-recruiter counters and derived metrics, totals, funnel and outcome splits."""
    service = ReportService(db)
    return await service.recruiter_report(organization_id, start_date, end_date)


@router.get("/funnel", response_model=List[FunnelStage])
async def get_recruiter_funnel(
    start_date: date = Query(...),
    end_date: date = Query(...),
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = ReportService(db)
    return await service.funnel(organization_id, start_date, end_date)


@router.get("/export.csv")
async def export_recruiter_report_csv(
    start_date: date = Query(...),
    end_date: date = Query(...),
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Recruiter counters and metrics as CSV text."""
    service = ReportService(db)
    content = await service.export_csv(organization_id, start_date, end_date)
    filename = f"recruiter-performance-{start_date.isoformat()}-{end_date.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/table", response_model=ReportTable)
async def get_recruiter_report_table(
    start_date: date = Query(...),
    end_date: date = Query(...),
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Fixed-column table used for printable reports."""
    service = ReportService(db)
    return await service.report_table(organization_id, start_date, end_date)


@router.post("/activity", response_model=RecruiterPerformanceRecord, status_code=status.HTTP_201_CREATED)
async def record_recruiter_activity(
    data: RecruiterActivityCreate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Add to a recruiter's daily counters."""
    service = ReportService(db)
    return await service.record_activity(organization_id, data)
