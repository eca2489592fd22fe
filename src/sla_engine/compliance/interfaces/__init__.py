"""
Compliance Interfaces Layer
============================

Interface adapters (controllers) for the compliance engine.

This is the outermost layer - handles HTTP requests/responses and
delegates to application services.
"""

from sla_engine.compliance.interfaces.controllers import compliance_router

__all__ = ["compliance_router"]
