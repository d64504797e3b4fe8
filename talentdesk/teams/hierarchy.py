"""
Team hierarchy builder.

Teams are stored flat with a parent reference and a stored `level`. This
module rebuilds the forest, answers which teams may parent a new team,
recomputes levels after a re-parent and resolves inherited permissions.

Placement rules:
    department  -> no parent (always a root, level 0)
    team        -> parent must be a department
    sub_team    -> parent must be a team or another sub_team
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional

from talentdesk.errors import InvariantViolation
from talentdesk.schemas.team import TeamNode

logger = logging.getLogger(__name__)

DEPARTMENT = "department"
TEAM = "team"
SUB_TEAM = "sub_team"

TEAM_TYPES = (DEPARTMENT, TEAM, SUB_TEAM)

ALLOWED_PARENT_TYPES = {
    DEPARTMENT: (),
    TEAM: (DEPARTMENT,),
    SUB_TEAM: (TEAM, SUB_TEAM),
}


class TeamPlacementError(InvariantViolation):
    code = "invalid_team_placement"


@dataclass
class TeamForest:
    roots: List[TeamNode] = field(default_factory=list)
    # Teams whose declared parent is not in the input
    orphans: List[TeamNode] = field(default_factory=list)
    nodes: Dict[Hashable, TeamNode] = field(default_factory=dict)


def _attr(row: Any, name: str, default: Any = None) -> Any:
    if isinstance(row, Mapping):
        return row.get(name, default)
    return getattr(row, name, default)


def to_node(row: Any) -> TeamNode:
    """Clone a team row into a fresh node with no children."""
    if isinstance(row, TeamNode):
        return row.model_copy(update={"children": []})
    if isinstance(row, Mapping):
        data = {k: v for k, v in row.items() if k != "children"}
        return TeamNode.model_validate(data)
    return TeamNode.model_validate(row, from_attributes=True)


def build_forest(teams: Iterable[Any]) -> TeamForest:
    """
    Rebuild the forest from flat rows.

    Children keep the input order; callers pre-sort (typically by level,
    then name). Input rows are never mutated.
    """
    forest = TeamForest()
    ordered: List[TeamNode] = []
    for row in teams:
        node = to_node(row)
        forest.nodes[node.id] = node
        ordered.append(node)

    for node in ordered:
        if node.parent_team_id is None:
            forest.roots.append(node)
            continue
        parent = forest.nodes.get(node.parent_team_id)
        if parent is None:
            forest.orphans.append(node)
        else:
            parent.children.append(node)

    if forest.orphans:
        logger.debug(
            "Teams with missing parents left out of hierarchy: %s",
            [n.id for n in forest.orphans],
        )
    return forest


def build_hierarchy(teams: Iterable[Any]) -> List[TeamNode]:
    """Roots of the rebuilt forest; teams with a missing parent are dropped."""
    return build_forest(teams).roots


def iter_subtree(node: TeamNode) -> Iterator[TeamNode]:
    """Depth-first walk of node and all of its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def available_parents(team_type: str, teams: Iterable[Any]) -> List[Any]:
    """Active teams that may parent a new team of team_type."""
    allowed = ALLOWED_PARENT_TYPES.get(team_type, ())
    if not allowed:
        return []
    return [t for t in teams if _attr(t, "team_type") in allowed and _attr(t, "is_active", True)]


def level_for_parent(parent: Optional[Any]) -> int:
    if parent is None:
        return 0
    return (_attr(parent, "level") or 0) + 1


def validate_parent(team_type: str, parent: Optional[Any]) -> None:
    """Raise TeamPlacementError when parent cannot hold a team of team_type."""
    if team_type not in TEAM_TYPES:
        raise TeamPlacementError(f"Unknown team type '{team_type}'", details={"team_type": team_type})

    allowed = ALLOWED_PARENT_TYPES[team_type]
    if parent is None:
        if allowed:
            raise TeamPlacementError(
                f"A {team_type} requires a parent of type {' or '.join(allowed)}",
                details={"team_type": team_type},
            )
        return

    parent_type = _attr(parent, "team_type")
    if parent_type not in allowed:
        if not allowed:
            message = "A department cannot have a parent"
        else:
            message = f"A {team_type} cannot be placed under a {parent_type}"
        raise TeamPlacementError(
            message,
            details={"team_type": team_type, "parent_team_type": parent_type, "parent_team_id": str(_attr(parent, "id"))},
        )

    if not _attr(parent, "is_active", True):
        # Inactive teams are never offered by available_parents
        raise TeamPlacementError(
            f"Parent team {_attr(parent, 'name')} is inactive",
            details={"parent_team_id": str(_attr(parent, "id"))},
        )


def relevel(node: TeamNode, level: int) -> Dict[Hashable, int]:
    """
    Assign level to node and parent.level + 1 to every descendant.

    Returns only the ids whose level actually changed.
    """
    changes: Dict[Hashable, int] = {}
    stack = [(node, level)]
    while stack:
        current, new_level = stack.pop()
        if current.level != new_level:
            changes[current.id] = new_level
            current.level = new_level
        stack.extend((child, new_level + 1) for child in current.children)
    return changes


def reparent_levels(teams: Iterable[Any], team_id: Any, new_parent_id: Optional[Any]) -> Dict[Hashable, int]:
    """
    Levels that must change when team_id moves under new_parent_id.

    Raises TeamPlacementError when the move would create a cycle.
    """
    forest = build_forest(teams)
    node = forest.nodes.get(team_id)
    if node is None:
        raise TeamPlacementError(f"Team {team_id} not found", details={"team_id": str(team_id)})

    new_parent = None
    if new_parent_id is not None:
        new_parent = forest.nodes.get(new_parent_id)
        if new_parent is None:
            raise TeamPlacementError(
                f"Parent team {new_parent_id} not found",
                details={"parent_team_id": str(new_parent_id)},
            )
        if any(n.id == new_parent_id for n in iter_subtree(node)):
            raise TeamPlacementError(
                "A team cannot be moved under itself or one of its descendants",
                details={"team_id": str(team_id), "parent_team_id": str(new_parent_id)},
            )

    return relevel(node, level_for_parent(new_parent))


def ancestor_chain(team_id: Any, teams: Iterable[Any]) -> List[Any]:
    """Teams from the root down to team_id (inclusive); empty when unknown."""
    by_id = {_attr(t, "id"): t for t in teams}
    chain: List[Any] = []
    seen = set()
    current = by_id.get(team_id)
    while current is not None and _attr(current, "id") not in seen:
        seen.add(_attr(current, "id"))
        chain.append(current)
        parent_id = _attr(current, "parent_team_id")
        current = by_id.get(parent_id) if parent_id is not None else None
    chain.reverse()
    return chain


def effective_permissions(
    team_id: Any,
    teams: Iterable[Any],
    explicit: Mapping[Any, Mapping[str, bool]],
) -> Dict[str, bool]:
    """
    Permissions a team ends up with.

    Values set on an ancestor flow down; the nearest explicit value wins.
    """
    resolved: Dict[str, bool] = {}
    for team in ancestor_chain(team_id, teams):
        resolved.update(explicit.get(_attr(team, "id"), {}))
    return resolved
