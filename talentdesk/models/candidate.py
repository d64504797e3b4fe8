"""
Candidate model.

Represents a job candidate moving through a job's pipeline.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.models.base_model import JSONType, OrganizationScopedModel


class Candidate(OrganizationScopedModel):
    """
    Candidate table - a person applying to one job.
    
    Two status representations live on the row: the legacy free-text
    `status` and the newer (main_status_id, sub_status_id) pair. They are
    reconciled into one value when the row is read (see
    talentdesk.pipeline.projector.resolve_candidate_status).
    """
    
    __tablename__ = "candidate"
    
    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
    )
    
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )
    
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    
    # List of skill names
    skills: Mapped[Optional[list]] = mapped_column(
        JSONType,
        nullable=True,
    )
    
    # Legacy free-text status: New, Screening, Interviewing, Selected, Rejected, ...
    status: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        default="New",
    )
    
    main_status_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("job_status.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    
    sub_status_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("job_status.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    
    # Free-form metadata ("metadata" is reserved on declarative classes)
    extra_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",
        JSONType,
        nullable=True,
    )
    
    updated_by: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
