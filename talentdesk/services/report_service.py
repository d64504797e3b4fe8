"""
Recruiter report business logic service.
"""

import logging
from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.errors import InvariantViolation
from talentdesk.reports.export import to_csv, to_report_table
from talentdesk.reports.metrics import (
    funnel_stages,
    joining_outcomes,
    offer_outcomes,
    recruiter_metrics,
    sum_records,
)
from talentdesk.repositories.recruiter_activity_repository import RecruiterActivityRepository, row_to_record
from talentdesk.schemas.report import (
    FunnelStage,
    RecruiterActivityCreate,
    RecruiterPerformanceRecord,
    RecruiterReport,
    ReportTable,
)

logger = logging.getLogger(__name__)


def _check_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise InvariantViolation(
            "end_date must not be before start_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


class ReportService:
    """Service for recruiter performance reporting."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = RecruiterActivityRepository(db)

    async def fetch_records(self, organization_id: UUID, start_date: date, end_date: date) -> List[RecruiterPerformanceRecord]:
        """Per-recruiter counters over an inclusive date range; [] on a failed fetch."""
        _check_range(start_date, end_date)
        try:
            return await self.repository.select_recruiter_counters(organization_id, start_date, end_date)
        except SQLAlchemyError:
            logger.exception(
                "Failed to fetch recruiter counters for organization %s (%s..%s)",
                organization_id, start_date, end_date,
            )
            await self.db.rollback()
            return []

    async def recruiter_report(self, organization_id: UUID, start_date: date, end_date: date) -> RecruiterReport:
        records = await self.fetch_records(organization_id, start_date, end_date)
        return RecruiterReport(
            start_date=start_date,
            end_date=end_date,
            recruiters=[recruiter_metrics(r) for r in records],
            totals=recruiter_metrics(sum_records(records)),
            funnel=funnel_stages(records),
            offer_outcomes=offer_outcomes(records),
            joining_outcomes=joining_outcomes(records),
        )

    async def funnel(self, organization_id: UUID, start_date: date, end_date: date) -> List[FunnelStage]:
        return funnel_stages(await self.fetch_records(organization_id, start_date, end_date))

    async def export_csv(self, organization_id: UUID, start_date: date, end_date: date) -> str:
        return to_csv(await self.fetch_records(organization_id, start_date, end_date))

    async def report_table(self, organization_id: UUID, start_date: date, end_date: date) -> ReportTable:
        return to_report_table(await self.fetch_records(organization_id, start_date, end_date))

    async def record_activity(self, organization_id: UUID, data: RecruiterActivityCreate) -> RecruiterPerformanceRecord:
        """Add to a recruiter's counters for one day; returns that day's totals."""
        activity = await self.repository.record_activity(
            organization_id,
            data.recruiter,
            data.activity_date,
            data.counters,
        )
        return row_to_record(activity)
