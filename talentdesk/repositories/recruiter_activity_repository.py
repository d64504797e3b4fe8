"""
RecruiterActivity repository - counter aggregation for recruiter reports.
"""

from datetime import date
from typing import Any, Dict, List
from uuid import UUID
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.models.recruiter_activity import COUNTER_COLUMNS, RecruiterActivity
from talentdesk.schemas.report import (
    InterviewCounts,
    JoiningCounts,
    OfferCounts,
    RecruiterPerformanceRecord,
)

INTERVIEW_COLUMNS = tuple(InterviewCounts.model_fields)

# Flat activity column -> field of the nested record group
OFFER_COLUMNS = {"offers_made": "made", "offers_accepted": "accepted", "offers_rejected": "rejected"}
JOINING_COLUMNS = {"joined": "joined", "no_show": "no_show"}


def row_to_record(row: Any) -> RecruiterPerformanceRecord:
    """Map a summed activity row onto a RecruiterPerformanceRecord; NULL sums are 0."""
    values = {column: int(getattr(row, column) or 0) for column in COUNTER_COLUMNS}
    nested = set(INTERVIEW_COLUMNS) | set(OFFER_COLUMNS) | set(JOINING_COLUMNS)
    return RecruiterPerformanceRecord(
        recruiter=row.recruiter,
        interviews=InterviewCounts(**{c: values[c] for c in INTERVIEW_COLUMNS}),
        offers=OfferCounts(**{f: values[c] for c, f in OFFER_COLUMNS.items()}),
        joining=JoiningCounts(**{f: values[c] for c, f in JOINING_COLUMNS.items()}),
        **{c: v for c, v in values.items() if c not in nested},
    )


class RecruiterActivityRepository:
    """Repository for RecruiterActivity database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def select_recruiter_counters(
        self,
        organization_id: UUID,
        start_date: date,
        end_date: date,
    ) -> List[RecruiterPerformanceRecord]:
        """
        Sum each recruiter's daily counters over [start_date, end_date].

        One record per recruiter with any activity in the range, ordered by
        recruiter name.
        """
        sums = [func.sum(getattr(RecruiterActivity, column)).label(column) for column in COUNTER_COLUMNS]
        query = (
            select(RecruiterActivity.recruiter, *sums)
            .where(
                RecruiterActivity.organization_id == organization_id,
                RecruiterActivity.activity_date >= start_date,
                RecruiterActivity.activity_date <= end_date,
            )
            .group_by(RecruiterActivity.recruiter)
            .order_by(RecruiterActivity.recruiter.asc())
        )
        result = await self.db.execute(query)
        return [row_to_record(row) for row in result.all()]

    async def record_activity(
        self,
        organization_id: UUID,
        recruiter: str,
        activity_date: date,
        counters: Dict[str, int],
    ) -> RecruiterActivity:
        """
        Add counters to a recruiter's row for one day, creating it if needed.

        Unknown counter names are ignored.
        """
        result = await self.db.execute(
            select(RecruiterActivity).where(
                RecruiterActivity.organization_id == organization_id,
                RecruiterActivity.recruiter == recruiter,
                RecruiterActivity.activity_date == activity_date,
            )
        )
        activity = result.scalar_one_or_none()
        if activity is None:
            activity = RecruiterActivity(
                id=uuid.uuid4(),
                organization_id=organization_id,
                recruiter=recruiter,
                activity_date=activity_date,
                **{column: 0 for column in COUNTER_COLUMNS},
            )
            self.db.add(activity)

        for column, amount in counters.items():
            if column in COUNTER_COLUMNS:
                setattr(activity, column, (getattr(activity, column) or 0) + amount)

        await self.db.flush()
        await self.db.refresh(activity)
        return activity
