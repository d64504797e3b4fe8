import pytest

from talentdesk.schemas.team import TeamNode
from talentdesk.teams.hierarchy import (
    TeamPlacementError,
    available_parents,
    build_forest,
    build_hierarchy,
    effective_permissions,
    level_for_parent,
    reparent_levels,
    validate_parent,
)

pytestmark = pytest.mark.unit


def team(id, team_type, parent=None, level=0, name=None):
    return {
        "id": id,
        "name": name or id,
        "team_type": team_type,
        "parent_team_id": parent,
        "level": level,
    }


@pytest.fixture
def org_teams():
    return [
        team("ENG", "department"),
        team("OPS", "department"),
        team("PLATFORM", "team", parent="ENG", level=1),
        team("DATA", "team", parent="ENG", level=1),
        team("INFRA", "sub_team", parent="PLATFORM", level=2),
        team("DBA", "sub_team", parent="INFRA", level=3),
    ]


def test_single_department_with_team():
    teams = [
        {"id": "A", "parent_team_id": None, "level": 0, "team_type": "department"},
        {"id": "B", "parent_team_id": "A", "level": 1, "team_type": "team"},
    ]

    roots = build_hierarchy(teams)

    assert [r.id for r in roots] == ["A"]
    assert [c.id for c in roots[0].children] == ["B"]
    assert roots[0].children[0].children == []


def test_build_hierarchy_is_idempotent(org_teams):
    first = build_hierarchy(org_teams)
    second = build_hierarchy(org_teams)

    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]
    # input rows are never mutated
    assert "children" not in org_teams[0]


def test_rebuilding_from_nodes_does_not_duplicate_children(org_teams):
    forest = build_forest(org_teams)
    nodes = list(forest.nodes.values())

    rebuilt = build_hierarchy(nodes)

    eng = next(r for r in rebuilt if r.id == "ENG")
    assert [c.id for c in eng.children] == ["PLATFORM", "DATA"]


def test_children_keep_input_order(org_teams):
    reordered = [org_teams[0], org_teams[3], org_teams[2]]

    roots = build_hierarchy(reordered)

    assert [c.id for c in roots[0].children] == ["DATA", "PLATFORM"]


def test_team_with_missing_parent_is_reported_not_rooted():
    teams = [team("ENG", "department"), team("GHOST", "team", parent="GONE", level=1)]

    forest = build_forest(teams)

    assert [r.id for r in forest.roots] == ["ENG"]
    assert [o.id for o in forest.orphans] == ["GHOST"]
    assert [r.id for r in build_hierarchy(teams)] == ["ENG"]


def test_accepts_team_nodes_and_objects(org_teams):
    nodes = [TeamNode.model_validate(t) for t in org_teams]

    roots = build_hierarchy(nodes)

    assert {r.id for r in roots} == {"ENG", "OPS"}


def test_available_parents(org_teams):
    assert available_parents("department", org_teams) == []
    assert [t["id"] for t in available_parents("team", org_teams)] == ["ENG", "OPS"]
    assert [t["id"] for t in available_parents("sub_team", org_teams)] == ["PLATFORM", "DATA", "INFRA", "DBA"]


def test_level_for_parent():
    assert level_for_parent(None) == 0
    assert level_for_parent(team("PLATFORM", "team", parent="ENG", level=1)) == 2


@pytest.mark.parametrize(
    "team_type,parent_type",
    [
        ("department", None),
        ("team", "department"),
        ("sub_team", "team"),
        ("sub_team", "sub_team"),
    ],
)
def test_valid_placements(team_type, parent_type):
    parent = team("P", parent_type) if parent_type else None

    validate_parent(team_type, parent)


@pytest.mark.parametrize(
    "team_type,parent_type",
    [
        ("department", "department"),
        ("team", None),
        ("team", "team"),
        ("team", "sub_team"),
        ("sub_team", None),
        ("sub_team", "department"),
    ],
)
def test_invalid_placements(team_type, parent_type):
    parent = team("P", parent_type) if parent_type else None

    with pytest.raises(TeamPlacementError) as exc_info:
        validate_parent(team_type, parent)

    assert exc_info.value.status_code == 422
    assert exc_info.value.code == "invalid_team_placement"


def test_unknown_team_type_is_rejected():
    with pytest.raises(TeamPlacementError):
        validate_parent("squad", None)


def test_reparent_cascades_levels(org_teams):
    # same depth: nothing changes
    assert reparent_levels(org_teams, "INFRA", "DATA") == {}

    # one level deeper: the whole subtree shifts
    teams = org_teams + [team("QA", "sub_team", parent="DATA", level=2)]
    changes = reparent_levels(teams, "INFRA", "QA")

    assert changes == {"INFRA": 3, "DBA": 4}


def test_reparent_under_own_descendant_is_rejected(org_teams):
    with pytest.raises(TeamPlacementError):
        reparent_levels(org_teams, "INFRA", "DBA")
    with pytest.raises(TeamPlacementError):
        reparent_levels(org_teams, "INFRA", "INFRA")


def test_reparent_to_missing_parent_is_rejected(org_teams):
    with pytest.raises(TeamPlacementError):
        reparent_levels(org_teams, "INFRA", "NOPE")


def test_reparent_does_not_mutate_input(org_teams):
    teams = org_teams + [team("QA", "sub_team", parent="DATA", level=2)]

    reparent_levels(teams, "INFRA", "QA")

    assert next(t for t in teams if t["id"] == "DBA")["level"] == 3


def test_inactive_parent_is_rejected_and_not_offered(org_teams):
    retired = dict(team("LEGACY", "department"), is_active=False)

    with pytest.raises(TeamPlacementError) as exc_info:
        validate_parent("team", retired)

    assert exc_info.value.details == {"parent_team_id": "LEGACY"}
    assert [t["id"] for t in available_parents("team", org_teams + [retired])] == ["ENG", "OPS"]


def test_effective_permissions_nearest_value_wins(org_teams):
    explicit = {
        "ENG": {"view_candidates": True, "edit_jobs": False},
        "PLATFORM": {"edit_jobs": True},
        "DBA": {"view_candidates": False},
    }

    assert effective_permissions("DBA", org_teams, explicit) == {
        "view_candidates": False,
        "edit_jobs": True,
    }
    assert effective_permissions("DATA", org_teams, explicit) == {
        "view_candidates": True,
        "edit_jobs": False,
    }
    assert effective_permissions("OPS", org_teams, explicit) == {}
    assert effective_permissions("NOPE", org_teams, explicit) == {}
