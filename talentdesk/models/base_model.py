"""
Base model with common fields.

All organization-scoped tables inherit from this to get:
- id (UUID primary key)
- organization_id (for multi-tenancy)
- created_at (when the record was created)
- updated_at (when the record was last modified)
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (the sqlite engine used in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class OrganizationScopedModel(Base):
    """
    Abstract base class for all organization-scoped models.
    
    This is not a real table - it's a template that other models inherit from.
    Every table that belongs to an organization has these fields automatically.
    """
    
    __abstract__ = True
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    
    # Identifies which customer organization owns this row.
    # Indexed because every query filters on it.
    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
