"""
Recruiter funnel metrics.

Pure functions over RecruiterPerformanceRecord snapshots. Ratios are not
clamped (a value above 1 is meaningful, e.g. several interview rounds per
submission) and any division by zero yields 0.0.
"""

from typing import Callable, Iterable, List, NamedTuple

from talentdesk.schemas.report import (
    DerivedMetric,
    FunnelStage,
    InterviewCounts,
    JoiningCounts,
    OfferCounts,
    RecruiterMetrics,
    RecruiterPerformanceRecord,
)

Counter = Callable[[RecruiterPerformanceRecord], int]

FLAT_COUNTERS = (
    "jobs_assigned",
    "profiles_submitted",
    "internal_reject",
    "internal_hold",
    "sent_to_client",
    "client_reject",
    "client_hold",
    "client_duplicate",
)


def ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def total_interviews(record: RecruiterPerformanceRecord) -> int:
    """Interview rounds counted towards client acceptance and conversion."""
    i = record.interviews
    return i.technical + i.technical_selected + i.l1 + i.l1_selected + i.l2 + i.end_client


class MetricDefinition(NamedTuple):
    name: str
    formula: str
    description: str
    numerator: Counter
    denominator: Counter


METRIC_DEFINITIONS = (
    MetricDefinition(
        "Submission-to-Client Ratio",
        "Sent to Client / Profiles Submitted",
        "Ratio of profiles sent to client vs total submitted",
        lambda r: r.sent_to_client,
        lambda r: r.profiles_submitted,
    ),
    MetricDefinition(
        "Client Acceptance Rate",
        "(Interviews + Offers + Joins) / Sent to Client",
        "Percentage of client-submitted profiles that move forward",
        lambda r: total_interviews(r) + r.offers.made + r.joining.joined,
        lambda r: r.sent_to_client,
    ),
    MetricDefinition(
        "Interview Conversion Rate",
        "Total Interviews / Sent to Client",
        "Percentage of client-submitted profiles that get interviews",
        total_interviews,
        lambda r: r.sent_to_client,
    ),
    MetricDefinition(
        "Technical→L1 Conversion",
        "L1 / Technical Selected",
        "Percentage of technical selected that progress to L1",
        lambda r: r.interviews.l1,
        lambda r: r.interviews.technical_selected,
    ),
    MetricDefinition(
        "L1→L2 Conversion",
        "L2 / L1 Selected",
        "Percentage of L1 selected that progress to L2",
        lambda r: r.interviews.l2,
        lambda r: r.interviews.l1_selected,
    ),
    MetricDefinition(
        "L2→End Client",
        "End Client / L2",
        "Percentage of L2 interviews that progress to End Client",
        lambda r: r.interviews.end_client,
        lambda r: r.interviews.l2,
    ),
    MetricDefinition(
        "End Client→Offer",
        "Offer Made / End Client",
        "Percentage of End Client interviews that result in offers",
        lambda r: r.offers.made,
        lambda r: r.interviews.end_client,
    ),
    MetricDefinition(
        "Offer Acceptance Rate",
        "Offer Accepted / Offer Made",
        "Percentage of offers that are accepted",
        lambda r: r.offers.accepted,
        lambda r: r.offers.made,
    ),
    MetricDefinition(
        "Join Rate",
        "Joined / Offer Accepted",
        "Percentage of accepted offers that result in joining",
        lambda r: r.joining.joined,
        lambda r: r.offers.accepted,
    ),
    MetricDefinition(
        "Funnel Efficiency",
        "Joined / Profiles Submitted",
        "Overall efficiency of the recruitment funnel",
        lambda r: r.joining.joined,
        lambda r: r.profiles_submitted,
    ),
    MetricDefinition(
        "Client Reject Rate",
        "Client Reject / Sent to Client",
        "Percentage of client-submitted profiles rejected by client",
        lambda r: r.client_reject,
        lambda r: r.sent_to_client,
    ),
)

METRIC_NAMES = tuple(d.name for d in METRIC_DEFINITIONS)


def derive_metrics(record: RecruiterPerformanceRecord) -> List[DerivedMetric]:
    return [
        DerivedMetric(
            name=d.name,
            formula=d.formula,
            value=ratio(d.numerator(record), d.denominator(record)),
            description=d.description,
        )
        for d in METRIC_DEFINITIONS
    ]


def recruiter_metrics(record: RecruiterPerformanceRecord) -> RecruiterMetrics:
    return RecruiterMetrics(record=record, metrics=derive_metrics(record))


def _sum_model(models, model_cls):
    fields = model_cls.model_fields
    return model_cls(**{name: sum(getattr(m, name) for m in models) for name in fields})


def sum_records(records: Iterable[RecruiterPerformanceRecord], label: str = "All Recruiters") -> RecruiterPerformanceRecord:
    """Sum every counter across recruiters."""
    records = list(records)
    flat = {name: sum(getattr(r, name) for r in records) for name in FLAT_COUNTERS}
    return RecruiterPerformanceRecord(
        recruiter=label,
        interviews=_sum_model([r.interviews for r in records], InterviewCounts),
        offers=_sum_model([r.offers for r in records], OfferCounts),
        joining=_sum_model([r.joining for r in records], JoiningCounts),
        **flat,
    )


FUNNEL_DEFINITIONS = (
    ("Profiles Submitted", "#4f46e5", lambda r: r.profiles_submitted),
    ("Sent to Client", "#3b82f6", lambda r: r.sent_to_client),
    ("Technical Interview", "#10b981", lambda r: r.interviews.technical),
    ("Technical Selected", "#14b8a6", lambda r: r.interviews.technical_selected),
    ("L1 Interview", "#8b5cf6", lambda r: r.interviews.l1),
    ("L1 Selected", "#a855f7", lambda r: r.interviews.l1_selected),
    ("L2 Interview", "#f97316", lambda r: r.interviews.l2),
    ("End Client Interview", "#ec4899", lambda r: r.interviews.end_client),
    ("Offers Made", "#eab308", lambda r: r.offers.made),
    ("Offers Accepted", "#14b8a6", lambda r: r.offers.accepted),
    ("Joined", "#f43f5e", lambda r: r.joining.joined),
)


def funnel_stages(records: Iterable[RecruiterPerformanceRecord]) -> List[FunnelStage]:
    """
    Aggregate funnel across recruiters, in pipeline order.

    Values are expected to shrink stage by stage but that is not enforced;
    double-counted source data shows up as is.
    """
    totals = sum_records(records)
    return [FunnelStage(name=name, value=get(totals), fill=fill) for name, fill, get in FUNNEL_DEFINITIONS]


def offer_outcomes(records: Iterable[RecruiterPerformanceRecord]) -> List[FunnelStage]:
    totals = sum_records(records)
    return [
        FunnelStage(name="Accepted", value=totals.offers.accepted, fill="#10b981"),
        FunnelStage(name="Rejected", value=totals.offers.rejected, fill="#f43f5e"),
    ]


def joining_outcomes(records: Iterable[RecruiterPerformanceRecord]) -> List[FunnelStage]:
    totals = sum_records(records)
    return [
        FunnelStage(name="Joined", value=totals.joining.joined, fill="#10b981"),
        FunnelStage(name="No Show", value=totals.joining.no_show, fill="#f43f5e"),
    ]
