"""
Shared Kernel Module
====================

Generic infrastructure shared by the compliance bounded context and the
HTTP application: structured logging and API middleware.

DO NOT add SLA business rules to the shared kernel.
"""
