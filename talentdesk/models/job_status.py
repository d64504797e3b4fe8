"""
JobStatus model.

One self-referential table holds the two-level candidate status taxonomy:
main statuses (type='main', no parent) and their sub statuses
(type='sub', parent_id -> a main status).
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.models.base_model import OrganizationScopedModel

STATUS_TYPE_MAIN = "main"
STATUS_TYPE_SUB = "sub"


class JobStatus(OrganizationScopedModel):
    """
    JobStatus table - a main pipeline stage or one of its sub statuses.
    
    display_order determines ordering within its level.
    """
    
    __tablename__ = "job_status"
    
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    # Display color, e.g. "#3b82f6"
    color: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )
    
    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    
    # 'main' or 'sub'
    type: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
    )
    
    # Set for sub statuses only
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("job_status.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
