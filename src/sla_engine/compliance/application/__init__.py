"""
Compliance Application Layer
=============================

Contains:
- Services: select tickets into windows, run the engine, report data quality
- DTOs: Data transfer objects for API serialization
- Export: CSV rendering of reports

This layer depends on the domain layer and the policy provider interface,
but not on concrete infrastructure implementations.
"""

from sla_engine.compliance.application.dto import (
    TicketRecordDTO,
    ComplianceRequest,
    ReportRequest,
    ClassificationResponse,
    SnapshotResponse,
    ReportResponse,
    PoliciesResponse,
    ensure_utc,
    parse_instant,
)
from sla_engine.compliance.application.services import (
    ComplianceReport,
    ComplianceReportService,
    IPolicyProvider,
    StaticPolicyProvider,
    resolve_window,
)
from sla_engine.compliance.application.export import export_report_csv, report_rows

__all__ = [
    # DTOs
    "TicketRecordDTO",
    "ComplianceRequest",
    "ReportRequest",
    "ClassificationResponse",
    "SnapshotResponse",
    "ReportResponse",
    "PoliciesResponse",
    "ensure_utc",
    "parse_instant",
    # Services
    "ComplianceReport",
    "ComplianceReportService",
    "resolve_window",
    # Provider Interfaces
    "IPolicyProvider",
    "StaticPolicyProvider",
    # Export
    "export_report_csv",
    "report_rows",
]
