"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── smarttask_identity/    # Identity engine tests
    │   ├── unit/              # Fast, isolated tests with mocks
    │   └── integration/       # Real stores on in-memory SQLite
    ├── smarttask_config/      # Settings tests
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_SLOW=1           Run @pytest.mark.slow tests (production hash cost)

Pytest Options:
    --run-slow           Run slow tests
"""

import os

import pytest

from smarttask_config import clear_settings_cache

from tests.shared.fixtures.config import TEST_DATABASE_URL, TEST_JWT_SECRET


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.slow",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that exercise real stores on SQLite",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second (auto-skipped)",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip slow tests unless explicitly enabled."""
    run_slow = config.getoption("--run-slow") or os.environ.get(
        "RUN_SLOW",
        "",
    ).lower() in ("1", "true", "yes")

    if run_slow:
        return

    skip_slow = pytest.mark.skip(reason="Slow test - run with --run-slow or RUN_SLOW=1")
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "slow" in item_markers:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def configure_app_settings(monkeypatch):
    """Point settings at a test secret and a throwaway database."""
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_JWT_SECRET)
    monkeypatch.setenv("DATABASE_URL", TEST_DATABASE_URL)
    clear_settings_cache()
    yield
    clear_settings_cache()
