"""
Test Configuration

Environment setup MUST happen before any application import: settings and the
loguru sinks are built at import time.

Architecture:
- Unit tests (test/**/unit/): pure, collaborators replaced by AsyncMock or
  httpx.MockTransport, shared factories in the unit conftest.py
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DEPLOY_ENV', 'test')
    os.environ.setdefault('API_BASE_URL', 'http://ticketing.test')
    os.environ.setdefault('ALLOW_MOCK_SEATS', 'true')


# Call immediately to set env vars before any imports
_early_setup_test_environment()
