import uuid
from types import SimpleNamespace

import pytest

from talentdesk.pipeline.projector import (
    STAGE_ORDER,
    InProgress,
    LegacyStatus,
    ResolvedStatus,
    Terminal,
    completed_stages,
    filter_projections,
    legacy_stage,
    normalize_legacy_status,
    progress_for,
    project_candidate,
    resolve_candidate_status,
)
from talentdesk.schemas.candidate import CandidateFilter
from talentdesk.schemas.job_status import MainStatus, SubStatus

pytestmark = pytest.mark.unit


def make_main(name, *sub_names, color=None):
    main_id = uuid.uuid4()
    subs = [
        SubStatus(id=uuid.uuid4(), main_status_id=main_id, name=sub_name, sort_order=i)
        for i, sub_name in enumerate(sub_names)
    ]
    return MainStatus(id=main_id, name=name, color=color, sub_statuses=subs)


@pytest.fixture
def taxonomy():
    return [
        make_main("Screening", "Phone screen", color="#3b82f6"),
        make_main("Interview", "Technical", "L1", color="#8b5cf6"),
        make_main("Offer", "Offer made"),
        make_main("Rejected", "Client reject"),
        make_main("Sourcing", "Longlist"),
    ]


def candidate(status=None, main_status_id=None, sub_status_id=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        status=status,
        main_status_id=main_status_id,
        sub_status_id=sub_status_id,
    )


def test_interviewing_maps_to_in_review():
    projection = project_candidate(candidate("Interviewing"), [])

    assert projection.current_stage == "InReview"
    assert projection.progress.model_dump() == {
        "screening": True,
        "interview": True,
        "offer": False,
        "hired": False,
        "joined": False,
    }
    assert projection.completed_stages == ["New"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Screening", "New"),
        ("Interviewing", "InReview"),
        ("Selected", "Hired"),
        ("Engaged", "Engaged"),
        ("Rejected", "Rejected"),
        ("", "New"),
        (None, "New"),
    ],
)
def test_legacy_remap(raw, expected):
    assert normalize_legacy_status(raw) == expected


def test_unknown_legacy_value_degrades_to_first_stage():
    projection = project_candidate(candidate("Parked"), [])

    assert projection.status == "Parked"
    assert projection.current_stage == "New"
    assert projection.stage_index == 0
    assert projection.completed_stages == []
    assert projection.progress.screening and not projection.progress.interview


def test_completed_stages_is_prefix_of_stage_order():
    for index, name in enumerate(STAGE_ORDER):
        stage = legacy_stage(name)
        assert stage == InProgress(index, name)
        assert completed_stages(stage) == list(STAGE_ORDER[:index])


def test_progress_is_monotonic_prefix():
    for name in STAGE_ORDER:
        flags = list(progress_for(legacy_stage(name)).model_dump().values())
        # once a position is false, every later one is false too
        assert flags == sorted(flags, reverse=True)


def test_available_sets_hired_but_not_joined():
    progress = progress_for(legacy_stage("Available"))

    assert progress.hired
    assert not progress.joined


def test_rejected_is_terminal():
    projection = project_candidate(candidate("Rejected"), [])

    assert legacy_stage("Rejected") == Terminal("Rejected")
    assert projection.is_terminal
    assert projection.stage_index is None
    assert projection.completed_stages == []
    assert projection.progress.model_dump() == {
        "screening": True,
        "interview": False,
        "offer": False,
        "hired": False,
        "joined": False,
    }


def test_withdrawn_and_on_hold_are_terminal():
    assert isinstance(legacy_stage("Withdrawn"), Terminal)
    assert isinstance(legacy_stage("On Hold"), Terminal)


def test_main_status_label_wins_over_stale_legacy_value(taxonomy):
    interview = taxonomy[1]
    technical = interview.sub_statuses[0]
    row = candidate("Screening", main_status_id=technical.id)

    projection = project_candidate(row, taxonomy)

    assert projection.status_source == "resolved"
    assert projection.display_label == "Interview"
    assert projection.display_label != "New"
    assert projection.main_status_id == interview.id


def test_resolved_sub_status_label_and_progress(taxonomy):
    interview = taxonomy[1]
    l1 = interview.sub_statuses[1]
    row = candidate("Screening", main_status_id=interview.id, sub_status_id=l1.id)

    projection = project_candidate(row, taxonomy)

    assert projection.display_label == "Interview (L1)"
    assert projection.current_stage == "Interview"
    assert projection.stage_index == 1
    assert projection.completed_stages == ["Screening"]
    assert projection.progress.interview and not projection.progress.offer
    assert projection.color == "#8b5cf6"
    assert projection.sub_status_name == "L1"


def test_sub_status_determines_main_status(taxonomy):
    offer_made = taxonomy[2].sub_statuses[0]
    # main column points elsewhere; the sub status's own parent wins
    row = candidate(main_status_id=taxonomy[0].id, sub_status_id=offer_made.id)

    resolved = resolve_candidate_status(row, taxonomy)

    assert resolved.ok
    assert resolved.value == ResolvedStatus(taxonomy[2], offer_made)


def test_rejected_main_status_is_terminal(taxonomy):
    rejected = taxonomy[3]
    projection = project_candidate(candidate(main_status_id=rejected.id), taxonomy)

    assert projection.is_terminal
    assert projection.completed_stages == []


def test_unknown_main_status_name_degrades_to_first_stage(taxonomy):
    sourcing = taxonomy[4]
    projection = project_candidate(candidate(main_status_id=sourcing.id), taxonomy)

    assert projection.stage_index == 0
    assert projection.current_stage == "Screening"
    assert projection.display_label == "Sourcing"


def test_unresolvable_ids_fall_back_to_legacy(taxonomy):
    row = candidate("Interviewing", main_status_id=uuid.uuid4(), sub_status_id=uuid.uuid4())

    resolved = resolve_candidate_status(row, taxonomy)
    projection = project_candidate(row, taxonomy)

    assert not resolved.ok
    assert resolved.error.kind == "sub_status"
    assert resolved.value == LegacyStatus("InReview")
    assert projection.status_source == "legacy"
    assert projection.current_stage == "InReview"


def test_unresolvable_sub_keeps_known_main(taxonomy):
    offer = taxonomy[2]
    row = candidate(main_status_id=offer.id, sub_status_id=uuid.uuid4())

    resolved = resolve_candidate_status(row, taxonomy)

    assert not resolved.ok
    assert resolved.value == ResolvedStatus(offer)


def test_filters_are_anded(taxonomy):
    interview = taxonomy[1]
    technical = interview.sub_statuses[0]
    projections = [
        project_candidate(candidate("Screening"), taxonomy),
        project_candidate(candidate("Interviewing"), taxonomy),
        project_candidate(candidate(main_status_id=interview.id, sub_status_id=technical.id), taxonomy),
        project_candidate(candidate(main_status_id=taxonomy[2].id), taxonomy),
    ]

    by_status = filter_projections(projections, CandidateFilter(status="New"))
    assert [p.candidate_id for p in by_status] == [projections[0].candidate_id]

    # the legacy filter compares against the normalized value
    assert filter_projections(projections, CandidateFilter(status="Screening")) == []

    by_main = filter_projections(projections, CandidateFilter(main_status_name="Interview"))
    assert [p.candidate_id for p in by_main] == [projections[2].candidate_id]

    by_sub_id = filter_projections(projections, CandidateFilter(status_ids={technical.id}))
    by_main_id = filter_projections(projections, CandidateFilter(status_ids={interview.id}))
    assert by_sub_id == by_main_id == [projections[2]]

    combined = CandidateFilter(main_status_name="Interview", status_ids={taxonomy[2].id})
    assert filter_projections(projections, combined) == []

    assert filter_projections(projections, None) == projections
