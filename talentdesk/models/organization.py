"""
Organization model.

An Organization is a customer using the HR/ATS system.
Each organization's data is isolated from other organizations.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.db.base import Base


class Organization(Base):
    """
    Organization table.
    
    Note: Organization doesn't inherit from OrganizationScopedModel because
    the organization row itself doesn't belong to an organization.
    """
    
    __tablename__ = "organization"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    # Status: 'active' or 'inactive'
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
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
