"""
Candidate pipeline projector.

Normalizes a candidate's status into one canonical stage, a monotonic
progress vector and the list of already-passed stages.

A candidate row carries two status representations (the legacy free-text
`status` and the main/sub status ids). They are reconciled exactly once,
in resolve_candidate_status(), into a CandidateStatus:

    LegacyStatus(value)                      -> legacy stage order
    ResolvedStatus(main_status, sub_status)  -> main status order

Everything downstream works on that single value.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Union

from talentdesk.errors import LookupResult
from talentdesk.pipeline.status_model import find_owning_main_status, find_status_pair
from talentdesk.schemas.candidate import CandidateFilter, PipelineProjection, Progress
from talentdesk.schemas.job_status import MainStatus, SubStatus

DEFAULT_STATUS = "New"

# Ordered stages of the legacy status string
STAGE_ORDER = ("New", "InReview", "Engaged", "Available", "Offered", "Hired")

LEGACY_REMAP = {
    "Screening": "New",
    "Interviewing": "InReview",
    "Selected": "Hired",
}

# Ordered main status names that map onto the progress bar
MAIN_STATUS_ORDER = ("Screening", "Interview", "Offer", "Hired", "Joined")

# Outside the linear ordering: never behind or ahead of other stages
TERMINAL_STAGES = ("Rejected", "Withdrawn", "On Hold")

PROGRESS_FIELDS = ("screening", "interview", "offer", "hired", "joined")


@dataclass(frozen=True)
class InProgress:
    index: int
    name: str


@dataclass(frozen=True)
class Terminal:
    name: str


Stage = Union[InProgress, Terminal]


@dataclass(frozen=True)
class LegacyStatus:
    value: str


@dataclass(frozen=True)
class ResolvedStatus:
    main_status: MainStatus
    sub_status: Optional[SubStatus] = None


CandidateStatus = Union[LegacyStatus, ResolvedStatus]


def normalize_legacy_status(value: Optional[str]) -> str:
    """Apply the legacy remap table; empty values become "New"."""
    value = (value or "").strip()
    if not value:
        return DEFAULT_STATUS
    return LEGACY_REMAP.get(value, value)


def _stage_in(order: Sequence[str], name: str) -> Stage:
    if name in TERMINAL_STAGES:
        return Terminal(name)
    if name in order:
        return InProgress(order.index(name), name)
    # Unknown values degrade to the first stage
    return InProgress(0, order[0])


def legacy_stage(value: Optional[str]) -> Stage:
    return _stage_in(STAGE_ORDER, normalize_legacy_status(value))


def main_status_stage(main_status: MainStatus) -> Stage:
    return _stage_in(MAIN_STATUS_ORDER, (main_status.name or "").strip())


def stage_for(status: CandidateStatus) -> Stage:
    if isinstance(status, ResolvedStatus):
        return main_status_stage(status.main_status)
    return legacy_stage(status.value)


def stage_order_for(status: CandidateStatus) -> Sequence[str]:
    return MAIN_STATUS_ORDER if isinstance(status, ResolvedStatus) else STAGE_ORDER


def progress_for(stage: Stage) -> Progress:
    """Every position up to and including the stage index is set."""
    if isinstance(stage, Terminal):
        return Progress(screening=True)
    return Progress(**{field: stage.index >= i for i, field in enumerate(PROGRESS_FIELDS)})


def completed_stages(stage: Stage, order: Sequence[str] = STAGE_ORDER) -> List[str]:
    """Stage names strictly before the current one."""
    if isinstance(stage, Terminal):
        return []
    return list(order[: stage.index])


def resolve_candidate_status(row: Any, taxonomy: Iterable[MainStatus]) -> LookupResult[CandidateStatus]:
    """
    Reconcile a candidate row's legacy string and status ids.

    A resolvable sub status wins (its main status comes from the taxonomy);
    otherwise a resolvable main status; otherwise the legacy string. Ids
    that are set but do not resolve are reported on the result while its
    value still carries the best available fallback.
    """
    taxonomy = list(taxonomy)
    sub_status_id = getattr(row, "sub_status_id", None)
    main_status_id = getattr(row, "main_status_id", None)
    legacy = LegacyStatus(normalize_legacy_status(getattr(row, "status", None)))

    if sub_status_id is None and main_status_id is None:
        return LookupResult.found(legacy)

    if sub_status_id is not None:
        pair = find_status_pair(taxonomy, sub_status_id)
        if pair.ok:
            main, sub = pair.value
            return LookupResult.found(ResolvedStatus(main, sub))

    # find_owning_main_status also accepts a sub status id stored in the main column
    main = find_owning_main_status(taxonomy, main_status_id)
    if main.ok:
        resolved = ResolvedStatus(main.value)
        if sub_status_id is not None:
            return LookupResult.missing("sub_status", sub_status_id, fallback=resolved)
        return LookupResult.found(resolved)

    missing_kind, missing_id = (
        ("sub_status", sub_status_id) if sub_status_id is not None else ("main_status", main_status_id)
    )
    return LookupResult.missing(missing_kind, missing_id, fallback=legacy)


def project_status(candidate_id: Any, status: CandidateStatus) -> PipelineProjection:
    stage = stage_for(status)
    order = stage_order_for(status)

    if isinstance(status, ResolvedStatus):
        main, sub = status.main_status, status.sub_status
        label = f"{main.name} ({sub.name})" if sub is not None else main.name
        return PipelineProjection(
            candidate_id=candidate_id,
            status_source="resolved",
            status=main.name,
            current_stage=stage.name,
            stage_index=stage.index if isinstance(stage, InProgress) else None,
            is_terminal=isinstance(stage, Terminal),
            progress=progress_for(stage),
            completed_stages=completed_stages(stage, order),
            display_label=label,
            color=main.color,
            main_status_id=main.id,
            main_status_name=main.name,
            sub_status_id=sub.id if sub is not None else None,
            sub_status_name=sub.name if sub is not None else None,
        )

    return PipelineProjection(
        candidate_id=candidate_id,
        status_source="legacy",
        status=status.value,
        current_stage=stage.name,
        stage_index=stage.index if isinstance(stage, InProgress) else None,
        is_terminal=isinstance(stage, Terminal),
        progress=progress_for(stage),
        completed_stages=completed_stages(stage, order),
        display_label=status.value,
    )


def project_candidate(row: Any, taxonomy: Iterable[MainStatus]) -> PipelineProjection:
    """Project one candidate row; unresolvable ids degrade to the fallback."""
    resolved = resolve_candidate_status(row, taxonomy)
    return project_status(row.id, resolved.value)


def matches_filter(projection: PipelineProjection, criteria: Optional[CandidateFilter]) -> bool:
    if criteria is None:
        return True
    if criteria.status is not None:
        if projection.status_source != "legacy" or projection.status != criteria.status:
            return False
    if criteria.main_status_name is not None:
        if projection.main_status_name != criteria.main_status_name:
            return False
    if criteria.status_ids is not None:
        if projection.main_status_id not in criteria.status_ids and projection.sub_status_id not in criteria.status_ids:
            return False
    return True


def filter_projections(
    projections: Iterable[PipelineProjection],
    criteria: Optional[CandidateFilter],
) -> List[PipelineProjection]:
    return [p for p in projections if matches_filter(p, criteria)]
