"""
Compliance Infrastructure Layer
================================

Infrastructure implementations for the compliance engine:
- External: YAML policy file with hot reload
"""

from sla_engine.compliance.infrastructure.external import (
    PolicyConfigManager,
    PolicyFileHandler,
)

__all__ = [
    "PolicyConfigManager",
    "PolicyFileHandler",
]
