"""
Team business logic service.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentdesk.errors import NotFoundError
from talentdesk.models.team import Team, TeamPermission
from talentdesk.repositories.team_repository import TeamRepository
from talentdesk.schemas.team import (
    EffectivePermissionsRead,
    TeamCreate,
    TeamHierarchyRead,
    TeamPermissionSet,
)
from talentdesk.teams.hierarchy import (
    ancestor_chain,
    available_parents,
    build_forest,
    effective_permissions,
    level_for_parent,
    reparent_levels,
    validate_parent,
)

logger = logging.getLogger(__name__)

ACTION_TEAM_CREATED = "team_created"
ACTION_TEAM_STATUS_CHANGED = "team_status_changed"
ACTION_TEAM_REPARENTED = "team_reparented"


class TeamService:
    """Service for team hierarchy business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = TeamRepository(db)

    async def list_teams(self, organization_id: UUID, active_only: bool = True) -> List[Team]:
        """Flat team rows; a failed fetch is logged and yields no teams."""
        try:
            return await self.repository.select_teams(organization_id, active_only=active_only)
        except SQLAlchemyError:
            logger.exception("Failed to fetch teams for organization %s", organization_id)
            await self.db.rollback()
            return []

    async def get_hierarchy(self, organization_id: UUID, active_only: bool = True) -> TeamHierarchyRead:
        forest = build_forest(await self.list_teams(organization_id, active_only=active_only))
        return TeamHierarchyRead(roots=forest.roots, orphan_ids=[n.id for n in forest.orphans])

    async def get_available_parents(self, organization_id: UUID, team_type: str) -> List[Team]:
        """Active teams that may parent a new team of team_type."""
        return available_parents(team_type, await self.list_teams(organization_id))

    async def _get_team(self, organization_id: UUID, team_id: UUID) -> Team:
        team = await self.repository.get_by_id(organization_id, team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    async def create_team(self, organization_id: UUID, data: TeamCreate) -> Team:
        """
        Create a team under a valid parent.

        The level is derived from the parent and a team_created audit entry
        is written.
        """
        parent = None
        if data.parent_team_id is not None:
            parent = await self._get_team(organization_id, data.parent_team_id)
        validate_parent(data.team_type, parent)

        team = await self.repository.insert_team(organization_id, data, level=level_for_parent(parent))
        await self.repository.add_audit_log(
            organization_id,
            team.id,
            ACTION_TEAM_CREATED,
            action_details={
                "team_name": team.name,
                "team_type": team.team_type,
                "parent_team_id": str(team.parent_team_id) if team.parent_team_id else None,
                "level": team.level,
            },
            performed_by=data.created_by,
        )
        logger.info("Created %s %s (%s) at level %s", team.team_type, team.id, team.name, team.level)
        return team

    async def update_team_status(
        self,
        organization_id: UUID,
        team_id: UUID,
        is_active: bool,
        performed_by: Optional[str] = None,
    ) -> Team:
        """Activate or soft-delete a team."""
        existing = await self._get_team(organization_id, team_id)
        previous = existing.is_active

        team = await self.repository.update_team_status(organization_id, team_id, is_active)
        await self.repository.add_audit_log(
            organization_id,
            team_id,
            ACTION_TEAM_STATUS_CHANGED,
            action_details={"previous": previous, "is_active": is_active},
            performed_by=performed_by,
        )
        return team

    async def reparent_team(
        self,
        organization_id: UUID,
        team_id: UUID,
        parent_team_id: Optional[UUID],
        performed_by: Optional[str] = None,
    ) -> Team:
        """
        Move a team under a new parent.

        Levels of the team and its whole subtree are recomputed. Placement
        rules apply to the moved team; moving a team under itself or one of
        its descendants is rejected.
        """
        team = await self._get_team(organization_id, team_id)
        parent = None
        if parent_team_id is not None:
            parent = await self._get_team(organization_id, parent_team_id)
        validate_parent(team.team_type, parent)

        teams = await self.repository.select_teams(organization_id, active_only=False)
        changes = reparent_levels(teams, team_id, parent_team_id)
        previous_parent = team.parent_team_id

        team = await self.repository.update_parent(organization_id, team_id, parent_team_id)
        if changes:
            await self.repository.update_levels(organization_id, changes)
            await self.db.refresh(team)

        await self.repository.add_audit_log(
            organization_id,
            team_id,
            ACTION_TEAM_REPARENTED,
            action_details={
                "previous_parent_team_id": str(previous_parent) if previous_parent else None,
                "parent_team_id": str(parent_team_id) if parent_team_id else None,
                "relevelled": len(changes),
            },
            performed_by=performed_by,
        )
        logger.info("Moved team %s under %s, %d levels changed", team_id, parent_team_id, len(changes))
        return team

    async def set_permission(self, organization_id: UUID, team_id: UUID, data: TeamPermissionSet) -> TeamPermission:
        await self._get_team(organization_id, team_id)
        return await self.repository.upsert_permission(
            organization_id,
            team_id,
            data.permission_key,
            data.permission_value,
        )

    async def get_effective_permissions(self, organization_id: UUID, team_id: UUID) -> EffectivePermissionsRead:
        """Permissions inherited along the ancestor chain; nearest explicit value wins."""
        await self._get_team(organization_id, team_id)
        teams = await self.repository.select_teams(organization_id, active_only=False)

        chain_ids = [t.id for t in ancestor_chain(team_id, teams)]

        explicit: Dict[UUID, Dict[str, bool]] = defaultdict(dict)
        for permission in await self.repository.select_permissions(organization_id, team_ids=chain_ids):
            explicit[permission.team_id][permission.permission_key] = permission.permission_value

        return EffectivePermissionsRead(
            team_id=team_id,
            permissions=effective_permissions(team_id, teams, explicit),
        )
