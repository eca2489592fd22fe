"""
SLA Compliance Engine
=====================

Deadline, compliance and trend computation for support tickets.
"""

__version__ = "1.0.0"
