"""
Serverless entry point for the SLA Compliance Engine API
"""
import os

# Set environment variables for serverless
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("WATCH_POLICY_FILE", "false")  # No file watcher in serverless

from mangum import Mangum

from sla_engine.main import app

# Lambda handler for ASGI app (disable lifespan for serverless)
handler = Mangum(app, lifespan="off")
