"""
Compliance Controllers (API Routes)
====================================

FastAPI routes for SLA compliance endpoints.

Controllers are thin - they resolve the reference clock and policy source,
then delegate to the application service. The engine itself never reads
the clock; when a request carries no `now`, it is read here, once.
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response

from sla_engine.config import Settings, SYSTEM_DEFAULT_POLICY_HOURS, get_settings
from sla_engine.compliance.application import (
    ClassificationResponse,
    ComplianceReport,
    ComplianceReportService,
    ComplianceRequest,
    IPolicyProvider,
    PoliciesResponse,
    ReportRequest,
    ReportResponse,
    SnapshotResponse,
    StaticPolicyProvider,
    ensure_utc,
    export_report_csv,
    resolve_window,
)
from sla_engine.compliance.domain import Policy
from sla_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/compliance", tags=["SLA Compliance"])


# ========== Example payloads for Swagger ==========

REPORT_REQUEST_EXAMPLE = {
    "tickets": [
        {
            "id": "TICKET-001",
            "priority": "P1",
            "status": "resolved",
            "sector_id": "billing",
            "created_at": "2024-01-15T10:00:00Z",
            "first_in_progress_at": "2024-01-15T11:00:00Z",
            "resolved_at": "2024-01-15T15:00:00Z",
            "tags": ["billing", "urgent"]
        }
    ],
    "period": "30days",
    "now": "2024-01-20T00:00:00Z"
}


# ========== Dependencies ==========

def get_app_settings(request: Request) -> Settings:
    """Settings attached at startup, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_policy_provider(request: Request) -> IPolicyProvider:
    """Policy manager loaded from the configured YAML file."""
    manager = getattr(request.app.state, "policy_manager", None)
    if manager is None:
        return StaticPolicyProvider()
    return manager


def _provider_for(
    policies: Optional[List[Policy]],
    configured: IPolicyProvider
) -> IPolicyProvider:
    if policies is not None:
        return StaticPolicyProvider(policies)
    return configured


def _reference_now(requested: Optional[datetime]) -> datetime:
    return ensure_utc(requested) or datetime.now(timezone.utc)


def _build_report(
    body: ReportRequest,
    provider: IPolicyProvider,
    settings: Settings
) -> ComplianceReport:
    now = _reference_now(body.now)
    window, label = resolve_window(
        now,
        period=body.period,
        period_days=body.period_days,
        window_start=body.window_start,
        window_end=body.window_end,
        default_days=settings.default_period_days,
    )
    service = ComplianceReportService(
        _provider_for(body.policies, provider),
        reporting_floor=settings.reporting_floor,
    )
    return service.build_report(
        body.domain_tickets(),
        now,
        window,
        period_label=label,
        sector_id=body.sector_id,
        sector_label=body.sector_label,
    )


# ========== Route Handlers ==========

@router.post(
    "/classify",
    response_model=ClassificationResponse,
    summary="Classify tickets against their SLA deadlines",
    description="""
    Resolve each ticket's binding deadline and classify it at the reference
    instant.

    - An `explicit_deadline` always wins over the sector policy.
    - Resolved/closed tickets are compliant when `resolved_at <= deadline`.
    - Open/in-progress tickets are overdue when `now > deadline`.
    """
)
def classify_tickets(
    body: ComplianceRequest,
    provider: IPolicyProvider = Depends(get_policy_provider)
):
    now = _reference_now(body.now)
    service = ComplianceReportService(_provider_for(body.policies, provider))
    tickets = body.domain_tickets()
    issues = service.inspect(tickets)

    return ClassificationResponse.model_validate({
        "classifications": [c.to_dict() for c in service.classify(tickets, now)],
        "issues": [issue.to_dict() for issue in issues],
    })


@router.post(
    "/snapshot",
    response_model=SnapshotResponse,
    summary="Aggregate compliance for a ticket set",
    description="""
    Aggregate the submitted tickets as-is: status counts, currently overdue
    tickets, compliance percentage, and breakdowns by priority and sector.

    Compliance is 0 when no ticket is resolved or closed.
    """
)
def compliance_snapshot(
    body: ComplianceRequest,
    provider: IPolicyProvider = Depends(get_policy_provider)
):
    now = _reference_now(body.now)
    service = ComplianceReportService(_provider_for(body.policies, provider))
    snapshot, issues = service.snapshot(body.domain_tickets(), now)

    return SnapshotResponse.model_validate({
        "snapshot": snapshot.to_dict(),
        "issues": [issue.to_dict() for issue in issues],
    })


@router.post(
    "/report",
    response_model=ReportResponse,
    summary="Compliance report with period-over-period trends",
    description="""
    Select tickets created in the reporting window and in the equal-length
    window before it, aggregate both, and compare.

    **Window**: `window_start`/`window_end`, else `period` (`7days`,
    `30days`, `90days`), else `period_days`, else the configured default.

    Trends are null for metrics whose previous value is zero.
    """,
    responses={
        200: {"description": "Compliance report"},
        422: {"description": "Invalid window or period"}
    },
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"example": REPORT_REQUEST_EXAMPLE}}
        }
    }
)
def compliance_report(
    body: ReportRequest,
    provider: IPolicyProvider = Depends(get_policy_provider),
    settings: Settings = Depends(get_app_settings)
):
    report = _build_report(body, provider, settings)
    return ReportResponse.model_validate(report.to_dict())


@router.post(
    "/report.csv",
    summary="Export a compliance report as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}}
)
def export_compliance_report(
    request: Request,
    body: ReportRequest,
    provider: IPolicyProvider = Depends(get_policy_provider),
    settings: Settings = Depends(get_app_settings)
):
    report = _build_report(body, provider, settings)
    filename = f"sla-compliance-{report.period_label}-{report.window.end:%Y-%m-%d}.csv"
    csv_body = export_report_csv(report)

    logger.info(
        "Compliance report exported",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "period": report.period_label,
            "sector": report.sector_label,
            "rows": len(csv_body.splitlines()) - 1,
        }
    )

    return Response(
        content=csv_body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get(
    "/policies",
    response_model=PoliciesResponse,
    summary="List sector SLA policies",
    description="Policies loaded from the policy file, plus the system defaults used when a sector has none."
)
def list_policies(provider: IPolicyProvider = Depends(get_policy_provider)):
    return PoliciesResponse(
        policies=provider.get_policies(),
        system_default=dict(SYSTEM_DEFAULT_POLICY_HOURS),
    )


# Export router for inclusion in main app
compliance_router = router
