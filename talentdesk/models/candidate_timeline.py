"""
CandidateTimelineEntry model.

Append-only history of what happened to a candidate (status changes).
"""

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.models.base_model import JSONType, OrganizationScopedModel

EVENT_STATUS_CHANGE = "status_change"


class CandidateTimelineEntry(OrganizationScopedModel):
    """One timeline event for a candidate."""
    
    __tablename__ = "candidate_timeline"
    
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("candidate.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    event_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    
    created_by: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="System",
    )
    
    previous_state: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
    )
    
    new_state: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
    )
    
    event_data: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
    )
