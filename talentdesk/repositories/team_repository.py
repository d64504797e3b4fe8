"""
Team repository - database operations for Team, TeamPermission and TeamAuditLog.
"""

from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from talentdesk.models.team import Team, TeamAuditLog, TeamPermission
from talentdesk.schemas.team import TeamCreate


class TeamRepository:
    """Repository for Team database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def select_teams(self, organization_id: UUID, active_only: bool = True) -> List[Team]:
        """Flat team rows ordered by level, then name."""
        query = select(Team).where(Team.organization_id == organization_id)

        if active_only:
            query = query.where(Team.is_active.is_(True))

        query = query.order_by(Team.level.asc(), Team.name.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, organization_id: UUID, team_id: UUID) -> Optional[Team]:
        """Get a team by ID for a specific organization."""
        result = await self.db.execute(
            select(Team).where(
                Team.id == team_id,
                Team.organization_id == organization_id
            )
        )
        return result.scalar_one_or_none()

    async def insert_team(self, organization_id: UUID, data: TeamCreate, level: int) -> Team:
        """Insert a team; level is computed by the caller."""
        team = Team(
            id=uuid.uuid4(),
            organization_id=organization_id,
            level=level,
            is_active=True,
            **data.model_dump(exclude={"created_by"}),
        )
        self.db.add(team)
        await self.db.flush()
        await self.db.refresh(team)
        return team

    async def update_team_status(self, organization_id: UUID, team_id: UUID, is_active: bool) -> Optional[Team]:
        """Activate or soft-delete a team."""
        team = await self.get_by_id(organization_id, team_id)
        if not team:
            return None

        team.is_active = is_active
        team.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(team)
        return team

    async def update_parent(self, organization_id: UUID, team_id: UUID, parent_team_id: Optional[UUID]) -> Optional[Team]:
        team = await self.get_by_id(organization_id, team_id)
        if not team:
            return None

        team.parent_team_id = parent_team_id
        team.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(team)
        return team

    async def update_levels(self, organization_id: UUID, levels: Mapping[UUID, int]) -> List[Team]:
        """Write recomputed levels for several teams."""
        teams = []
        for team_id, level in levels.items():
            team = await self.get_by_id(organization_id, team_id)
            if team is None:
                continue
            team.level = level
            team.updated_at = func.now()
            teams.append(team)

        await self.db.flush()
        for team in teams:
            await self.db.refresh(team)
        return teams

    async def select_permissions(
        self,
        organization_id: UUID,
        team_ids: Optional[List[UUID]] = None,
    ) -> List[TeamPermission]:
        """Explicit permission rows, optionally limited to some teams."""
        query = select(TeamPermission).where(TeamPermission.organization_id == organization_id)

        if team_ids is not None:
            query = query.where(TeamPermission.team_id.in_(team_ids))

        query = query.order_by(TeamPermission.permission_key.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def upsert_permission(
        self,
        organization_id: UUID,
        team_id: UUID,
        permission_key: str,
        permission_value: bool,
    ) -> TeamPermission:
        """Set an explicit permission value on a team."""
        result = await self.db.execute(
            select(TeamPermission).where(
                TeamPermission.organization_id == organization_id,
                TeamPermission.team_id == team_id,
                TeamPermission.permission_key == permission_key,
            )
        )
        permission = result.scalar_one_or_none()

        if permission is None:
            permission = TeamPermission(
                id=uuid.uuid4(),
                organization_id=organization_id,
                team_id=team_id,
                permission_key=permission_key,
                permission_value=permission_value,
            )
            self.db.add(permission)
        else:
            permission.permission_value = permission_value
            permission.updated_at = func.now()

        await self.db.flush()
        await self.db.refresh(permission)
        return permission

    async def add_audit_log(
        self,
        organization_id: UUID,
        team_id: UUID,
        action_type: str,
        action_details: Optional[Dict[str, Any]] = None,
        performed_by: Optional[str] = None,
    ) -> TeamAuditLog:
        entry = TeamAuditLog(
            id=uuid.uuid4(),
            organization_id=organization_id,
            team_id=team_id,
            action_type=action_type,
            action_details=action_details,
            performed_by=performed_by,
        )
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def list_audit_log(self, organization_id: UUID, team_id: UUID) -> List[TeamAuditLog]:
        result = await self.db.execute(
            select(TeamAuditLog)
            .where(
                TeamAuditLog.organization_id == organization_id,
                TeamAuditLog.team_id == team_id,
            )
            .order_by(TeamAuditLog.created_at.asc())
        )
        return list(result.scalars().all())
