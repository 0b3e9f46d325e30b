"""Pytest fixtures for infrastructure tests."""

import sys
from pathlib import Path

import pytest

from resolver.core.resolver import resolve
from resolver.models.intent import DeployIntent


@pytest.fixture(scope="session", autouse=True)
def add_iac_to_path():
    """Add project root to Python path so IAC is importable."""
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))
    yield
    sys.path.remove(str(project_root))


@pytest.fixture
def iac_project_root():
    """Return the IAC project root directory."""
    return Path(__file__).parent.parent.parent / "IAC"


@pytest.fixture
def iac_plan(settings):
    """Resolved IAM-auth plan for applier tests."""
    return resolve(DeployIntent(enable_cloudfront=True, use_iam_auth=True), settings=settings)
