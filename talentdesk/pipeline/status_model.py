"""
Two-level status taxonomy.

Raw `job_status` rows (main and sub statuses in one table) are grouped into
MainStatus objects carrying their ordered sub statuses. Resolution of a sub
status id is a linear scan: the taxonomy is small and rarely changes.
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple
from uuid import UUID

from talentdesk.errors import LookupResult
from talentdesk.models.job_status import STATUS_TYPE_MAIN, STATUS_TYPE_SUB
from talentdesk.schemas.job_status import MainStatus, SubStatus

logger = logging.getLogger(__name__)

StatusPair = Tuple[MainStatus, SubStatus]


def _sort_key(row: Any) -> Tuple[int, str]:
    return (getattr(row, "display_order", None) or 0, (getattr(row, "name", None) or "").lower())


def build_taxonomy(rows: Iterable[Any]) -> List[MainStatus]:
    """
    Group flat status rows into main statuses with nested sub statuses.

    Both levels are ordered by display_order, then name. Sub statuses whose
    parent is not among the main rows are left out.
    """
    rows = list(rows)
    mains = sorted((r for r in rows if r.type == STATUS_TYPE_MAIN), key=_sort_key)
    subs = sorted((r for r in rows if r.type == STATUS_TYPE_SUB), key=_sort_key)

    taxonomy: List[MainStatus] = []
    for main in mains:
        children = [
            SubStatus(
                id=sub.id,
                main_status_id=main.id,
                name=sub.name,
                color=sub.color,
                description=sub.description,
                sort_order=sub.display_order or 0,
            )
            for sub in subs
            if sub.parent_id == main.id
        ]
        taxonomy.append(
            MainStatus(
                id=main.id,
                name=main.name,
                color=main.color,
                description=main.description,
                sort_order=main.display_order or 0,
                sub_statuses=children,
            )
        )

    main_ids = {m.id for m in mains}
    orphaned = [s.id for s in subs if s.parent_id not in main_ids]
    if orphaned:
        logger.warning("Ignoring %d sub statuses without a main status: %s", len(orphaned), orphaned)
    return taxonomy


def find_status_pair(taxonomy: Iterable[MainStatus], sub_status_id: Optional[UUID]) -> LookupResult[StatusPair]:
    """Find the (main, sub) pair owning sub_status_id."""
    if sub_status_id is None:
        return LookupResult.missing("sub_status", None)
    for main in taxonomy:
        for sub in main.sub_statuses:
            if sub.id == sub_status_id:
                return LookupResult.found((main, sub))
    return LookupResult.missing("sub_status", sub_status_id)


def find_main_status(taxonomy: Iterable[MainStatus], main_status_id: Optional[UUID]) -> LookupResult[MainStatus]:
    if main_status_id is None:
        return LookupResult.missing("main_status", None)
    for main in taxonomy:
        if main.id == main_status_id:
            return LookupResult.found(main)
    return LookupResult.missing("main_status", main_status_id)


def find_owning_main_status(taxonomy: Iterable[MainStatus], status_id: Optional[UUID]) -> LookupResult[MainStatus]:
    """Resolve any status id (main or sub) to the main status it belongs to."""
    taxonomy = list(taxonomy)
    main = find_main_status(taxonomy, status_id)
    if main.ok:
        return main
    pair = find_status_pair(taxonomy, status_id)
    if pair.ok:
        return LookupResult.found(pair.value[0])
    return LookupResult.missing("status", status_id)
