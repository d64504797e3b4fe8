"""
Team Pydantic schemas.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from talentdesk.schemas.base import OrganizationScopedRead

TeamType = Literal["department", "team", "sub_team"]
TeamId = Union[UUID, str]


class TeamCreate(BaseModel):
    """Schema for creating a department, team or sub team."""
    
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    team_type: TeamType = "team"
    parent_team_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    lead_employee_id: Optional[UUID] = None
    created_by: Optional[str] = None


class TeamStatusUpdate(BaseModel):
    is_active: bool
    performed_by: Optional[str] = None


class TeamReparent(BaseModel):
    parent_team_id: Optional[UUID] = None
    performed_by: Optional[str] = None


class TeamRead(OrganizationScopedRead):
    """Schema for reading a team row (API response)."""
    
    name: str
    description: Optional[str] = None
    team_type: TeamType
    parent_team_id: Optional[UUID] = None
    level: int
    department_id: Optional[UUID] = None
    lead_employee_id: Optional[UUID] = None
    is_active: bool


class TeamNode(BaseModel):
    """A team inside a reconstructed hierarchy."""
    
    id: TeamId
    name: str = ""
    description: Optional[str] = None
    team_type: TeamType
    parent_team_id: Optional[TeamId] = None
    level: int = 0
    department_id: Optional[UUID] = None
    lead_employee_id: Optional[UUID] = None
    is_active: bool = True
    children: List[TeamNode] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


TeamNode.model_rebuild()


class TeamHierarchyRead(BaseModel):
    roots: List[TeamNode]
    # Teams whose parent is missing or inactive; not reachable from any root
    orphan_ids: List[TeamId] = Field(default_factory=list)


class TeamPermissionSet(BaseModel):
    permission_key: str = Field(min_length=1, max_length=100)
    permission_value: bool = True


class TeamPermissionRead(OrganizationScopedRead):
    team_id: UUID
    permission_key: str
    permission_value: bool


class EffectivePermissionsRead(BaseModel):
    team_id: UUID
    permissions: Dict[str, bool]
