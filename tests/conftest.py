"""Test configuration and fixtures."""

import os

import logfire
import pytest

# Settings are read lazily from the environment, so these must be in place
# before any container resolves them.
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTH__JWT_SECRET"] = "test-secret-with-enough-bytes-for-hs256"
os.environ["AUTH__GOOGLE__CLIENT_ID"] = "google-client-id"
os.environ["AUTH__GOOGLE__CLIENT_SECRET"] = "google-client-secret"
os.environ["AUTH__LINE__CLIENT_ID"] = "1650000000"
os.environ["AUTH__LINE__CLIENT_SECRET"] = "line-channel-secret"

logfire.configure(send_to_logfire=False, console=False)


def pytest_collection_modifyitems(config, items):
    """Skip PostgreSQL tests unless TRACKER_INTEGRATION=1."""
    if os.environ.get("TRACKER_INTEGRATION") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="needs PostgreSQL; set TRACKER_INTEGRATION=1 and DATABASE__URL"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
