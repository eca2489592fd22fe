"""
SLA Compliance Module
=====================

Bounded Context for SLA deadline and compliance evaluation.

Responsibilities:
- Resolve the hour budget for a (sector, priority) pair
- Compute binding deadlines, honouring operator overrides
- Classify tickets as overdue / compliant at a reference instant
- Aggregate compliance, overdue counts and resolution times
- Compare reporting windows period over period

The engine is a pure function of tickets, policies and an injected clock;
it neither fetches nor persists data.
"""

__version__ = "1.0.0"
