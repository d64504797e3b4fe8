"""
Teams router - departments, teams and sub teams.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.core.dependencies import get_db, get_organization_id
from talentdesk.schemas.team import (
    EffectivePermissionsRead,
    TeamCreate,
    TeamHierarchyRead,
    TeamPermissionRead,
    TeamPermissionSet,
    TeamRead,
    TeamReparent,
    TeamStatusUpdate,
    TeamType,
)
from talentdesk.services.team_service import TeamService

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", response_model=List[TeamRead])
async def list_teams(
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
    active_only: bool = True,
):
    """Flat list of teams ordered by level, then name."""
    service = TeamService(db)
    return await service.list_teams(organization_id, active_only=active_only)


@router.get("/hierarchy", response_model=TeamHierarchyRead)
async def get_team_hierarchy(
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
    active_only: bool = True,
):
    """Teams as a forest rooted at departments."""
    service = TeamService(db)
    return await service.get_hierarchy(organization_id, active_only=active_only)


@router.get("/available-parents", response_model=List[TeamRead])
async def get_available_parents(
    team_type: TeamType = Query(...),
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Teams that may parent a new team of team_type."""
    service = TeamService(db)
    return await service.get_available_parents(organization_id, team_type)


@router.post("", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def create_team(
    data: TeamCreate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = TeamService(db)
    return await service.create_team(organization_id, data)


@router.patch("/{team_id}/status", response_model=TeamRead)
async def update_team_status(
    team_id: UUID,
    data: TeamStatusUpdate,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Activate or deactivate a team."""
    service = TeamService(db)
    return await service.update_team_status(organization_id, team_id, data.is_active, data.performed_by)


@router.patch("/{team_id}/parent", response_model=TeamRead)
async def reparent_team(
    team_id: UUID,
    data: TeamReparent,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Move a team under a new parent; the subtree's levels follow."""
    service = TeamService(db)
    return await service.reparent_team(organization_id, team_id, data.parent_team_id, data.performed_by)


@router.put("/{team_id}/permissions", response_model=TeamPermissionRead)
async def set_team_permission(
    team_id: UUID,
    data: TeamPermissionSet,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = TeamService(db)
    return await service.set_permission(organization_id, team_id, data)


@router.get("/{team_id}/permissions/effective", response_model=EffectivePermissionsRead)
async def get_effective_permissions(
    team_id: UUID,
    organization_id: UUID = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    service = TeamService(db)
    return await service.get_effective_permissions(organization_id, team_id)
