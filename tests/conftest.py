"""
Pytest configuration for PM Copilot tests.

Test Tier System:
- fast (default): Pure unit tests, no I/O
- medium: API TestClient, filesystem ops (config files, CLI input files)
- slow: Large end-to-end runs

Run tiers:
- pytest                          # Everything
- pytest -m fast                  # Fast only (quick feedback)
- pytest -m "not slow"            # Fast + Medium (pre-merge)

Note: Unmarked tests are auto-assigned to 'fast' tier. To add a new test:
- No marker needed for fast (unit) tests
- Add @pytest.mark.medium for API TestClient / filesystem tests
- Add @pytest.mark.slow for large end-to-end runs
- Tests marked @pytest.mark.integration (without tier) default to 'medium'
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pm_copilot.models import ThemeDefinition, ThemesConfig  # noqa: E402


# =============================================================================
# Tier Auto-Assignment
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """
    Automatically assign tier markers to unmarked tests.

    Tests are fast by default unless explicitly marked as medium or slow.
    Tests marked with @pytest.mark.integration (but no tier) are assigned to
    'medium'.
    """
    for item in items:
        has_tier = (
            list(item.iter_markers(name='fast')) or
            list(item.iter_markers(name='medium')) or
            list(item.iter_markers(name='slow'))
        )
        if has_tier:
            continue

        if list(item.iter_markers(name='skip')):
            continue

        if list(item.iter_markers(name='integration')):
            item.add_marker(pytest.mark.medium)
            continue

        item.add_marker(pytest.mark.fast)


# =============================================================================
# Session-Scoped Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def project_root():
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def default_config_path(project_root):
    """Path of the shipped theme config."""
    return project_root / "config" / "themes.config.json"


# =============================================================================
# Shared Fixtures
# =============================================================================

FIXED_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for recency decay."""
    return FIXED_NOW


@pytest.fixture
def calendar_theme():
    return ThemeDefinition(
        id="calendar",
        label="Calendar",
        category="integrations",
        keywords=["calendar"],
    )


@pytest.fixture
def themes_config():
    """Small config covering the common scenarios."""
    return ThemesConfig(
        version=7,
        themes=[
            ThemeDefinition(
                id="calendar",
                label="Calendar sync",
                category="integrations",
                keywords=["calendar", "google sync"],
            ),
            ThemeDefinition(
                id="billing",
                label="Billing",
                category="billing",
                keywords=["invoice", "refund"],
            ),
            ThemeDefinition(
                id="bugs",
                label="Bug reports",
                category="quality",
                keywords=["bug"],
            ),
        ],
        stop_words=["the", "and", "please", "would", "with", "for", "this"],
        emerging_theme_min_frequency=3,
    )


@pytest.fixture
def days_ago(now):
    """Return a function producing timestamps N days before `now`."""
    def _days_ago(days):
        return now - timedelta(days=days)
    return _days_ago
