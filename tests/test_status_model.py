import uuid
from types import SimpleNamespace

import pytest

from talentdesk.pipeline.status_model import (
    build_taxonomy,
    find_main_status,
    find_owning_main_status,
    find_status_pair,
)

pytestmark = pytest.mark.unit


def status_row(name, type_, display_order=0, parent_id=None, color=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        name=name,
        type=type_,
        display_order=display_order,
        parent_id=parent_id,
        color=color,
        description=None,
    )


def sample_rows():
    interview = status_row("Interview", "main", display_order=2, color="#8b5cf6")
    screening = status_row("Screening", "main", display_order=1, color="#3b82f6")
    rows = [
        interview,
        screening,
        status_row("L1", "sub", display_order=2, parent_id=interview.id),
        status_row("Technical", "sub", display_order=1, parent_id=interview.id),
        status_row("Phone screen", "sub", display_order=1, parent_id=screening.id),
    ]
    return screening, interview, rows


def test_build_taxonomy_orders_both_levels():
    screening, interview, rows = sample_rows()

    taxonomy = build_taxonomy(rows)

    assert [m.name for m in taxonomy] == ["Screening", "Interview"]
    assert [s.name for s in taxonomy[1].sub_statuses] == ["Technical", "L1"]
    assert all(s.main_status_id == interview.id for s in taxonomy[1].sub_statuses)
    assert taxonomy[0].color == "#3b82f6"


def test_build_taxonomy_ties_broken_by_name():
    rows = [status_row("Offer", "main"), status_row("Hired", "main")]

    assert [m.name for m in build_taxonomy(rows)] == ["Hired", "Offer"]


def test_sub_status_without_main_is_left_out():
    _, _, rows = sample_rows()
    rows.append(status_row("Lost", "sub", parent_id=uuid.uuid4()))

    taxonomy = build_taxonomy(rows)

    names = [s.name for m in taxonomy for s in m.sub_statuses]
    assert "Lost" not in names
    assert len(names) == 3


def test_find_status_pair_scans_every_main_status():
    _, interview, rows = sample_rows()
    taxonomy = build_taxonomy(rows)
    l1 = taxonomy[1].sub_statuses[1]

    result = find_status_pair(taxonomy, l1.id)

    assert result.ok
    main, sub = result.value
    assert main.id == interview.id
    assert sub.name == "L1"


def test_find_status_pair_reports_missing_reference():
    _, _, rows = sample_rows()
    missing_id = uuid.uuid4()

    result = find_status_pair(build_taxonomy(rows), missing_id)

    assert not result.ok
    assert result.value is None
    assert result.error.kind == "sub_status"
    assert result.error.reference_id == missing_id


def test_find_main_status():
    screening, _, rows = sample_rows()
    taxonomy = build_taxonomy(rows)

    assert find_main_status(taxonomy, screening.id).value.name == "Screening"
    assert not find_main_status(taxonomy, None).ok


def test_find_owning_main_status_accepts_main_or_sub_ids():
    screening, interview, rows = sample_rows()
    taxonomy = build_taxonomy(rows)
    technical = taxonomy[1].sub_statuses[0]

    assert find_owning_main_status(taxonomy, screening.id).value.id == screening.id
    assert find_owning_main_status(taxonomy, technical.id).value.id == interview.id
    assert find_owning_main_status(taxonomy, uuid.uuid4()).error.kind == "status"
