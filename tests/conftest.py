"""
Shared pytest fixtures and configuration for buildversion tests.

This module provides:
- Logging configured to stderr so stdout assertions stay clean
- A fake git metadata directory with a known revision
- A fixed clock for deterministic build dates
"""

import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Ensure buildversion package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildversion.logging import configure_logging, reset_logging

REVISION = "abcdef0123456789abcdef0123456789abcdef01"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def configured_logging():
    """Route all log output to stderr for every test, then reset."""
    configure_logging(verbose=True, force=True)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer BUILDVERSION_* variables out of the tests."""
    monkeypatch.delenv("BUILDVERSION_LOG_FORMAT", raising=False)
    monkeypatch.delenv("BUILDVERSION_PROGRAM_NAME", raising=False)


# =============================================================================
# Git Fixtures
# =============================================================================


def make_git_dir(root: Path, revision: str = REVISION, branch: str = "main") -> Path:
    """Create ``root/.git`` with HEAD pointing at a loose branch ref."""
    git_dir = root / ".git"
    ref_dir = git_dir / "refs" / "heads"
    ref_dir.mkdir(parents=True)
    (git_dir / "HEAD").write_text(f"ref: refs/heads/{branch}\n", encoding="utf-8")
    (ref_dir / branch).write_text(f"{revision}\n", encoding="utf-8")
    return git_dir


@pytest.fixture
def revision() -> str:
    return REVISION


@pytest.fixture
def git_dir(tmp_path: Path) -> Path:
    """Git metadata directory whose HEAD resolves to ``REVISION``."""
    return make_git_dir(tmp_path)


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2026-10-17 12:00 UTC."""
    return lambda: datetime(2026, 10, 17, 12, 0, tzinfo=UTC)
