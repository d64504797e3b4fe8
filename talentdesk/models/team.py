"""
Team models.

Teams form a self-referential forest: departments at the roots, teams
under departments, sub teams under teams or other sub teams.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.models.base_model import JSONType, OrganizationScopedModel


class Team(OrganizationScopedModel):
    """
    Team table - a department, team or sub team.
    
    `level` is stored (0 for roots, parent.level + 1 otherwise) and
    recomputed for the whole subtree whenever a team is re-parented.
    """
    
    __tablename__ = "team"
    
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    
    # 'department', 'team' or 'sub_team'
    team_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )
    
    parent_team_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("team.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    
    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    
    department_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
    )
    
    lead_employee_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
    )
    
    # Soft delete flag
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )


class TeamPermission(OrganizationScopedModel):
    """Explicit permission value set on a team; descendants inherit it."""
    
    __tablename__ = "team_permission"
    __table_args__ = (
        UniqueConstraint("team_id", "permission_key", name="uq_team_permission_team_key"),
    )
    
    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("team.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    permission_key: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    
    permission_value: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )


class TeamAuditLog(OrganizationScopedModel):
    """Audit trail of structural changes to teams."""
    
    __tablename__ = "team_audit_log"
    
    team_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("team.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    
    # team_created, team_status_changed, team_reparented
    action_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    
    action_details: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True,
    )
    
    performed_by: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
