"""
SLA Compliance Engine - Main Application
=========================================

HTTP surface for the SLA deadline and compliance engine.

Modules:
- Compliance: deadline resolution, status classification, aggregation,
  period-over-period trends and resolution-time analysis

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, value objects and the pure engine
- Infrastructure: YAML policy file with hot reload
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from sla_engine.config import settings
from sla_engine.core import ApplicationException

# Compliance Module
from sla_engine.compliance.infrastructure import PolicyConfigManager
from sla_engine.compliance.interfaces import compliance_router

# Shared
from sla_engine.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from sla_engine.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Load sector SLA policies
    3. Start watching the policy file

    SHUTDOWN:
    1. Stop the policy file watcher
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting SLA Compliance Engine", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    policy_manager = PolicyConfigManager()
    policy_manager.load(settings.sla_policy_path)
    if settings.watch_policy_file:
        policy_manager.start_watching()

    # Store services in app state for dependency injection
    app.state.settings = settings
    app.state.policy_manager = policy_manager

    logger.info("SLA Compliance Engine started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down SLA Compliance Engine")
    policy_manager.stop_watching()
    logger.info("SLA Compliance Engine shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="SLA Compliance Engine API",
    description="""
    ## SLA Deadline & Compliance Engine

    Computes SLA deadlines, compliance and trends for support tickets.
    Callers submit tickets and get back classifications and reports; the
    service holds no ticket data of its own.

    ---

    ### Compliance Module

    **Endpoints:**
    - `POST /compliance/classify` - Deadline and overdue/compliant state per ticket
    - `POST /compliance/snapshot` - Aggregate counters for a ticket set
    - `POST /compliance/report` - Period report with trends and resolution times
    - `POST /compliance/report.csv` - The same report as CSV
    - `GET /compliance/policies` - Sector policies and system defaults

    ---

    ### Configuration

    **System default budgets (hours):**

    | Priority | Hours |
    |----------|-------|
    | P0       | 4     |
    | P1       | 24    |
    | P2       | 72    |
    | P3       | 168   |

    Sector budgets come from the YAML file at `SLA_POLICY_PATH`.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(ApplicationException, application_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(compliance_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "sla_policies": "loaded (3 sectors)",
                        "policy_watcher": "running"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Returns service health status including:
    - Policy file status
    - Policy watcher state
    """
    manager = getattr(request.app.state, "policy_manager", None)
    checks = {
        "sla_policies": "not_loaded",
        "policy_watcher": "stopped",
    }

    if manager is not None:
        checks["sla_policies"] = f"loaded ({len(manager.get_policies())} sectors)"
        checks["policy_watcher"] = "running" if manager.is_watching else "stopped"

    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": "SLA Compliance Engine",
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "compliance": {
                "prefix": "/compliance",
                "endpoints": [
                    "POST /compliance/classify - Classify tickets",
                    "POST /compliance/snapshot - Aggregate a ticket set",
                    "POST /compliance/report - Period report with trends",
                    "POST /compliance/report.csv - Export report as CSV",
                    "GET /compliance/policies - List sector policies"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sla_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
