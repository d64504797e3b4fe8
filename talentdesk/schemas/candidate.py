"""
Candidate Pydantic schemas.
"""

from typing import Any, Dict, List, Literal, Optional, Set
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from talentdesk.schemas.base import OrganizationScopedRead


class CandidateCreate(BaseModel):
    """Schema for adding a candidate to a job."""
    
    job_id: UUID
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = ""
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    status: Optional[str] = "New"
    metadata: Optional[Dict[str, Any]] = None


class CandidateRead(OrganizationScopedRead):
    """Schema for reading candidate data (API response)."""
    
    job_id: UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: Optional[List[Any]] = None
    status: Optional[str] = None
    main_status_id: Optional[UUID] = None
    sub_status_id: Optional[UUID] = None
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias=AliasChoices("extra_metadata", "metadata"))
    updated_by: Optional[str] = None


class CandidateStatusUpdate(BaseModel):
    """Move a candidate to a sub status (its main status follows)."""
    
    sub_status_id: UUID
    user_id: Optional[str] = None


class Progress(BaseModel):
    """Boolean progress vector rendered as the stage bar."""
    
    screening: bool = False
    interview: bool = False
    offer: bool = False
    hired: bool = False
    joined: bool = False

    model_config = ConfigDict(frozen=True)


class PipelineProjection(BaseModel):
    """Normalized pipeline position of one candidate."""
    
    candidate_id: UUID
    status_source: Literal["legacy", "resolved"]
    # Canonical status value: normalized legacy string or main status name
    status: str
    current_stage: str
    stage_index: Optional[int] = None
    is_terminal: bool = False
    progress: Progress
    completed_stages: List[str] = Field(default_factory=list)
    display_label: str
    color: Optional[str] = None
    main_status_id: Optional[UUID] = None
    main_status_name: Optional[str] = None
    sub_status_id: Optional[UUID] = None
    sub_status_name: Optional[str] = None


class CandidateFilter(BaseModel):
    """
    Independent board filters; every supplied filter must pass.
    
    status_ids passes when either the main or the sub status id is in the set.
    """
    
    status: Optional[str] = None
    main_status_name: Optional[str] = None
    status_ids: Optional[Set[UUID]] = None


class BoardEntry(BaseModel):
    """A candidate together with its pipeline projection."""
    
    candidate: CandidateRead
    pipeline: PipelineProjection


class CandidateTimelineRead(OrganizationScopedRead):
    candidate_id: UUID
    event_type: str
    created_by: str
    previous_state: Optional[Dict[str, Any]] = None
    new_state: Optional[Dict[str, Any]] = None
    event_data: Optional[Dict[str, Any]] = None
