"""
Export projections of the recruiter report.

Both formats are pure views of the raw record plus derive_metrics(); no
additional computation happens here.
"""

import csv
import io
from typing import Iterable, List

from talentdesk.reports.metrics import METRIC_NAMES, derive_metrics
from talentdesk.schemas.report import RecruiterPerformanceRecord, ReportTable

CSV_COUNTER_HEADERS = [
    "Recruiter",
    "Jobs Assigned",
    "Profiles Submitted",
    "Internal Reject",
    "Client Reject",
    "Sent to Client",
    "Client Duplicate",
    "Technical",
    "Technical Selected",
    "Technical Reject",
    "L1",
    "L1 Selected",
    "L1 Reject",
    "L2",
    "L2 Reject",
    "End Client",
    "End Client Reject",
    "Offers Made",
    "Offers Accepted",
    "Offers Rejected",
    "Joined",
    "No Show",
]

CSV_HEADERS = CSV_COUNTER_HEADERS + list(METRIC_NAMES)

REPORT_TITLE = "Recruiter Performance Report"

REPORT_HEADERS = [
    "Recruiter",
    "Jobs",
    "Submitted",
    "To Client",
    "Tech (P/F)",
    "L1 (P/F)",
    "L2 (P/F)",
    "EC (P/F)",
    "Offers (M/A)",
    "Joined (J/NS)",
    "Sub Ratio",
    "Client Acc",
    "Client Rej",
    "Offer Acc",
    "Funnel Eff",
]

# Positions in METRIC_DEFINITIONS shown in the fixed report table
_SUB_RATIO, _CLIENT_ACC, _OFFER_ACC, _FUNNEL_EFF, _CLIENT_REJ = 0, 1, 7, 9, 10


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def csv_row(record: RecruiterPerformanceRecord) -> List[str]:
    i, o, j = record.interviews, record.offers, record.joining
    counters = [
        record.recruiter,
        record.jobs_assigned,
        record.profiles_submitted,
        record.internal_reject,
        record.client_reject,
        record.sent_to_client,
        record.client_duplicate,
        i.technical,
        i.technical_selected,
        i.technical_reject,
        i.l1,
        i.l1_selected,
        i.l1_reject,
        i.l2,
        i.l2_reject,
        i.end_client,
        i.end_client_reject,
        o.made,
        o.accepted,
        o.rejected,
        j.joined,
        j.no_show,
    ]
    return [str(c) for c in counters] + [_fmt(m.value) for m in derive_metrics(record)]


def to_csv(records: Iterable[RecruiterPerformanceRecord]) -> str:
    """Row-oriented text: raw counters followed by the eleven metrics."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow(csv_row(record))
    return output.getvalue()


def report_row(record: RecruiterPerformanceRecord) -> List[str]:
    i, o, j = record.interviews, record.offers, record.joining
    metrics = derive_metrics(record)
    return [
        record.recruiter,
        str(record.jobs_assigned),
        str(record.profiles_submitted),
        str(record.sent_to_client),
        f"{i.technical}/{i.technical_reject}",
        f"{i.l1}/{i.l1_reject}",
        f"{i.l2}/{i.l2_reject}",
        f"{i.end_client}/{i.end_client_reject}",
        f"{o.made}/{o.accepted}",
        f"{j.joined}/{j.no_show}",
        _fmt(metrics[_SUB_RATIO].value),
        _fmt(metrics[_CLIENT_ACC].value),
        _fmt(metrics[_CLIENT_REJ].value),
        _fmt(metrics[_OFFER_ACC].value),
        _fmt(metrics[_FUNNEL_EFF].value),
    ]


def to_report_table(records: Iterable[RecruiterPerformanceRecord]) -> ReportTable:
    """Fixed 15-column table, one row per recruiter."""
    return ReportTable(
        title=REPORT_TITLE,
        headers=list(REPORT_HEADERS),
        rows=[report_row(r) for r in records],
    )
