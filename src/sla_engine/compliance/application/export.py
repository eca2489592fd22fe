"""
CSV export of a compliance report.

Columns: metric, value, tickets, period, sector. Values are display
strings (percentages with one decimal, durations as "3d 2h").
"""

import csv
import io
from typing import List

from sla_engine.compliance.application.services import ComplianceReport
from sla_engine.compliance.domain import format_duration

CSV_HEADER = ["metric", "value", "tickets", "period", "sector"]


def _pct(value: float) -> str:
    return f"{value:.1f}"


def report_rows(report: ComplianceReport) -> List[List[str]]:
    """Rows of the export, header excluded."""
    current = report.current
    resolution = report.resolution_times
    period = report.period_label
    sector = report.sector_label

    def row(metric: str, value, tickets: int) -> List[str]:
        return [metric, str(value), str(tickets), period, sector]

    rows = [
        row("total_tickets", current.total, current.total),
        row("compliant_tickets", current.compliant_count, current.resolved_total),
        row("overdue_tickets", current.overdue_count, current.total),
        row("compliance_pct", _pct(current.compliance_pct), current.resolved_total),
        row("overdue_pct", _pct(current.overdue_pct), current.total),
        row(
            "average_resolution_time",
            format_duration(current.average_resolution_seconds),
            current.lead_time_samples
        ),
    ]

    for priority in current.ordered_priorities():
        counters = current.by_priority[priority]
        rows.append(row(f"compliance_pct_{priority}", _pct(counters.compliance_pct), counters.resolved_total))
        rows.append(row(
            f"average_resolution_time_{priority}",
            format_duration(counters.average_resolution_seconds),
            counters.lead_time_samples
        ))

    rows.append(row("average_work_time", resolution.average_formatted, resolution.ticket_count))
    for priority, bucket in resolution.by_priority.items():
        rows.append(row(f"average_work_time_{priority}", bucket.average_formatted, bucket.count))
    for tag, bucket in resolution.by_tag.items():
        rows.append(row(f"average_work_time_tag_{tag}", bucket.average_formatted, bucket.count))

    return rows


def export_report_csv(report: ComplianceReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(report_rows(report))
    return buffer.getvalue()
