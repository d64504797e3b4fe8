"""
RecruiterActivity model.

Daily pre-aggregated pipeline counters per recruiter. Reports sum these
rows over a date range; the counters are written by whatever process
tracks submissions, interviews, offers and joinings.
"""

from datetime import date

from sqlalchemy import Date, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.models.base_model import OrganizationScopedModel

# Counter columns in the order they appear in reports
COUNTER_COLUMNS = (
    "jobs_assigned",
    "profiles_submitted",
    "internal_reject",
    "internal_hold",
    "sent_to_client",
    "client_reject",
    "client_hold",
    "client_duplicate",
    "technical",
    "technical_selected",
    "technical_reject",
    "l1",
    "l1_selected",
    "l1_reject",
    "l2",
    "l2_reject",
    "end_client",
    "end_client_reject",
    "offers_made",
    "offers_accepted",
    "offers_rejected",
    "joined",
    "no_show",
)


def _counter():
    return mapped_column(Integer, nullable=False, default=0)


class RecruiterActivity(OrganizationScopedModel):
    """One recruiter's counters for one day."""
    
    __tablename__ = "recruiter_activity"
    __table_args__ = (
        UniqueConstraint("organization_id", "recruiter", "activity_date", name="uq_recruiter_activity_day"),
    )
    
    recruiter: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    
    activity_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
    )
    
    jobs_assigned: Mapped[int] = _counter()
    profiles_submitted: Mapped[int] = _counter()
    internal_reject: Mapped[int] = _counter()
    internal_hold: Mapped[int] = _counter()
    sent_to_client: Mapped[int] = _counter()
    client_reject: Mapped[int] = _counter()
    client_hold: Mapped[int] = _counter()
    client_duplicate: Mapped[int] = _counter()
    
    # Interview rounds
    technical: Mapped[int] = _counter()
    technical_selected: Mapped[int] = _counter()
    technical_reject: Mapped[int] = _counter()
    l1: Mapped[int] = _counter()
    l1_selected: Mapped[int] = _counter()
    l1_reject: Mapped[int] = _counter()
    l2: Mapped[int] = _counter()
    l2_reject: Mapped[int] = _counter()
    end_client: Mapped[int] = _counter()
    end_client_reject: Mapped[int] = _counter()
    
    # Offers and joining
    offers_made: Mapped[int] = _counter()
    offers_accepted: Mapped[int] = _counter()
    offers_rejected: Mapped[int] = _counter()
    joined: Mapped[int] = _counter()
    no_show: Mapped[int] = _counter()
