"""
JobStatus Pydantic schemas.
"""

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from talentdesk.schemas.base import OrganizationScopedRead

StatusType = Literal["main", "sub"]


class JobStatusCreate(BaseModel):
    """Schema for creating a main status or a sub status."""
    
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = None
    display_order: int = 0
    type: StatusType
    parent_id: Optional[UUID] = None


class JobStatusUpdate(BaseModel):
    """Schema for updating a status. All fields optional."""
    
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    color: Optional[str] = None
    display_order: Optional[int] = None
    parent_id: Optional[UUID] = None


class JobStatusRead(OrganizationScopedRead):
    """Schema for reading a raw status row (API response)."""
    
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    display_order: int
    type: StatusType
    parent_id: Optional[UUID] = None


class SubStatus(BaseModel):
    """A sub status as seen by the pipeline."""
    
    id: UUID
    main_status_id: UUID
    name: str
    color: Optional[str] = None
    description: Optional[str] = None
    sort_order: int = 0

    model_config = ConfigDict(frozen=True)


class MainStatus(BaseModel):
    """A top-level pipeline stage with its ordered sub statuses."""
    
    id: UUID
    name: str
    color: Optional[str] = None
    description: Optional[str] = None
    sort_order: int = 0
    sub_statuses: List[SubStatus] = Field(default_factory=list)


class StatusProgressRead(BaseModel):
    """Progress vector for a status id."""
    
    status_id: UUID
    screening: bool = False
    interview: bool = False
    offer: bool = False
    hired: bool = False
    joined: bool = False
