"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from talentdesk.models.organization import Organization
from talentdesk.models.job_status import JobStatus
from talentdesk.models.candidate import Candidate
from talentdesk.models.candidate_timeline import CandidateTimelineEntry
from talentdesk.models.team import Team, TeamAuditLog, TeamPermission
from talentdesk.models.recruiter_activity import RecruiterActivity

__all__ = [
    "Organization",
    "JobStatus",
    "Candidate",
    "CandidateTimelineEntry",
    "Team",
    "TeamPermission",
    "TeamAuditLog",
    "RecruiterActivity",
]
