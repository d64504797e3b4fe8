import math

import pytest

from talentdesk.reports.metrics import (
    METRIC_NAMES,
    derive_metrics,
    funnel_stages,
    joining_outcomes,
    offer_outcomes,
    ratio,
    sum_records,
)
from talentdesk.schemas.report import RecruiterPerformanceRecord

pytestmark = pytest.mark.unit


def metric(record, name):
    return next(m for m in derive_metrics(record) if m.name == name).value


def busy_record(name="Asha"):
    return RecruiterPerformanceRecord.model_validate(
        {
            "recruiter": name,
            "jobs_assigned": 4,
            "profiles_submitted": 100,
            "sent_to_client": 50,
            "client_reject": 10,
            "interviews": {
                "technical": 20,
                "technical_selected": 12,
                "l1": 9,
                "l1_selected": 6,
                "l2": 4,
                "end_client": 3,
            },
            "offers": {"made": 2, "accepted": 2, "rejected": 0},
            "joining": {"joined": 1, "no_show": 1},
        }
    )


def test_empty_record_yields_zero_metrics():
    record = RecruiterPerformanceRecord(recruiter="Nobody", profiles_submitted=0, sent_to_client=0)

    metrics = derive_metrics(record)

    assert len(metrics) == 11
    assert all(m.value == 0 for m in metrics)


def test_division_by_zero_falls_back_to_zero():
    record = RecruiterPerformanceRecord.model_validate(
        {
            "recruiter": "Ravi",
            "sent_to_client": 50,
            "interviews": {"technical": 20},
            "offers": {"made": 10},
            "joining": {"joined": 8},
        }
    )

    assert record.offers.accepted == 0
    assert metric(record, "Join Rate") == 0
    assert metric(record, "Offer Acceptance Rate") == 0


def test_metric_order_and_names():
    assert METRIC_NAMES == (
        "Submission-to-Client Ratio",
        "Client Acceptance Rate",
        "Interview Conversion Rate",
        "Technical→L1 Conversion",
        "L1→L2 Conversion",
        "L2→End Client",
        "End Client→Offer",
        "Offer Acceptance Rate",
        "Join Rate",
        "Funnel Efficiency",
        "Client Reject Rate",
    )


def test_formulas():
    record = busy_record()

    assert metric(record, "Submission-to-Client Ratio") == pytest.approx(0.5)
    # interviews = 20 + 12 + 9 + 6 + 4 + 3 = 54
    assert metric(record, "Interview Conversion Rate") == pytest.approx(54 / 50)
    assert metric(record, "Client Acceptance Rate") == pytest.approx((54 + 2 + 1) / 50)
    assert metric(record, "Technical→L1 Conversion") == pytest.approx(9 / 12)
    assert metric(record, "L1→L2 Conversion") == pytest.approx(4 / 6)
    assert metric(record, "L2→End Client") == pytest.approx(3 / 4)
    assert metric(record, "End Client→Offer") == pytest.approx(2 / 3)
    assert metric(record, "Offer Acceptance Rate") == pytest.approx(1.0)
    assert metric(record, "Join Rate") == pytest.approx(0.5)
    assert metric(record, "Funnel Efficiency") == pytest.approx(0.01)
    assert metric(record, "Client Reject Rate") == pytest.approx(0.2)


def test_ratios_are_not_clamped():
    # several interview rounds per client submission
    assert metric(busy_record(), "Interview Conversion Rate") > 1


def test_metrics_are_always_finite():
    records = [
        RecruiterPerformanceRecord(recruiter="a"),
        busy_record(),
        RecruiterPerformanceRecord.model_validate({"recruiter": "b", "offers": {"accepted": 3}}),
    ]

    for record in records:
        for m in derive_metrics(record):
            assert math.isfinite(m.value)


def test_ratio():
    assert ratio(3, 0) == 0.0
    assert ratio(0, 0) == 0.0
    assert ratio(1, 4) == 0.25


def test_negative_counters_are_rejected():
    with pytest.raises(ValueError):
        RecruiterPerformanceRecord(recruiter="x", profiles_submitted=-1)


def test_sum_records():
    total = sum_records([busy_record("a"), busy_record("b")])

    assert total.recruiter == "All Recruiters"
    assert total.profiles_submitted == 200
    assert total.interviews.technical == 40
    assert total.offers.made == 4
    assert total.joining.no_show == 2


def test_funnel_stages_in_pipeline_order():
    stages = funnel_stages([busy_record("a"), busy_record("b")])

    assert [s.name for s in stages] == [
        "Profiles Submitted",
        "Sent to Client",
        "Technical Interview",
        "Technical Selected",
        "L1 Interview",
        "L1 Selected",
        "L2 Interview",
        "End Client Interview",
        "Offers Made",
        "Offers Accepted",
        "Joined",
    ]
    assert stages[0].value == 200
    assert stages[-1].value == 2


def test_funnel_is_not_validated_for_monotonicity():
    record = RecruiterPerformanceRecord(recruiter="x", profiles_submitted=1, sent_to_client=5)

    stages = funnel_stages([record])

    assert stages[1].value > stages[0].value


def test_outcome_splits():
    records = [busy_record("a")]

    assert [(s.name, s.value) for s in offer_outcomes(records)] == [("Accepted", 2), ("Rejected", 0)]
    assert [(s.name, s.value) for s in joining_outcomes(records)] == [("Joined", 1), ("No Show", 1)]


def test_empty_input_gives_zero_funnel():
    assert all(s.value == 0 for s in funnel_stages([]))
