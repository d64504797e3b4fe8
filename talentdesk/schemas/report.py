"""
Recruiter report Pydantic schemas.
"""

from datetime import date
from typing import Dict, List

from pydantic import BaseModel, Field, NonNegativeInt, field_validator

from talentdesk.models.recruiter_activity import COUNTER_COLUMNS


class InterviewCounts(BaseModel):
    technical: NonNegativeInt = 0
    technical_selected: NonNegativeInt = 0
    technical_reject: NonNegativeInt = 0
    l1: NonNegativeInt = 0
    l1_selected: NonNegativeInt = 0
    l1_reject: NonNegativeInt = 0
    l2: NonNegativeInt = 0
    l2_reject: NonNegativeInt = 0
    end_client: NonNegativeInt = 0
    end_client_reject: NonNegativeInt = 0


class OfferCounts(BaseModel):
    made: NonNegativeInt = 0
    accepted: NonNegativeInt = 0
    rejected: NonNegativeInt = 0


class JoiningCounts(BaseModel):
    joined: NonNegativeInt = 0
    no_show: NonNegativeInt = 0


class RecruiterPerformanceRecord(BaseModel):
    """
    Pre-aggregated counters for one recruiter over a date range.
    
    Any counter left out is 0.
    """
    
    recruiter: str
    jobs_assigned: NonNegativeInt = 0
    profiles_submitted: NonNegativeInt = 0
    internal_reject: NonNegativeInt = 0
    internal_hold: NonNegativeInt = 0
    sent_to_client: NonNegativeInt = 0
    client_reject: NonNegativeInt = 0
    client_hold: NonNegativeInt = 0
    client_duplicate: NonNegativeInt = 0
    interviews: InterviewCounts = Field(default_factory=InterviewCounts)
    offers: OfferCounts = Field(default_factory=OfferCounts)
    joining: JoiningCounts = Field(default_factory=JoiningCounts)


class DerivedMetric(BaseModel):
    name: str
    formula: str
    value: float
    description: str


class RecruiterMetrics(BaseModel):
    record: RecruiterPerformanceRecord
    metrics: List[DerivedMetric]


class FunnelStage(BaseModel):
    name: str
    value: int
    fill: str


class RecruiterReport(BaseModel):
    start_date: date
    end_date: date
    recruiters: List[RecruiterMetrics]
    totals: RecruiterMetrics
    funnel: List[FunnelStage]
    offer_outcomes: List[FunnelStage]
    joining_outcomes: List[FunnelStage]


class ReportTable(BaseModel):
    """Fixed-column report table."""
    
    title: str
    headers: List[str]
    rows: List[List[str]]


class RecruiterActivityCreate(BaseModel):
    """Counters to add to a recruiter's row for one day."""
    
    recruiter: str = Field(min_length=1, max_length=255)
    activity_date: date
    counters: Dict[str, NonNegativeInt] = Field(default_factory=dict)

    @field_validator("counters")
    @classmethod
    def known_counters(cls, value: Dict[str, int]) -> Dict[str, int]:
        unknown = sorted(set(value) - set(COUNTER_COLUMNS))
        if unknown:
            raise ValueError(f"Unknown counters: {', '.join(unknown)}")
        return value
