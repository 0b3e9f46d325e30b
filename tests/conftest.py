"""
Shared test fixtures and configuration for entire test suite.

Provides: Deploy intents for the three reference deployments, resolver
settings isolation, temporary reference data files
Dependencies: pytest, pydantic
System role: Test infrastructure and fixture management
"""

import json
import logging
from pathlib import Path

import pytest

from resolver.configs.settings import ResolverSettings, get_settings
from resolver.core import reference_data
from resolver.models.intent import DeployIntent


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Drop DEPLOY_RESOLVER_* variables and reset cached settings around each test.

    Yields:
        None
    """
    for key in ("GITHUB_IP_RANGES_FILE", "SECRET_LENGTH", "LOG_LEVEL"):
        monkeypatch.delenv(f"DEPLOY_RESOLVER_{key}", raising=False)
    get_settings.cache_clear()
    reference_data._load.cache_clear()
    yield
    get_settings.cache_clear()
    reference_data._load.cache_clear()


@pytest.fixture
def settings():
    """Default resolver settings without reading a .env file."""
    return ResolverSettings(_env_file=None)


@pytest.fixture
def direct_intent():
    """Function URL only: no CloudFront, no WAF."""
    return DeployIntent(
        enable_cloudfront=False,
        enable_waf=False,
        use_iam_auth=False,
        retention_days=7,
        untagged_image_keep_count=3,
        environment_variables={"DATABASE_URL": "postgres://db"},
    )


@pytest.fixture
def header_waf_intent():
    """CloudFront with header verification and a WAF allow list."""
    return DeployIntent(
        enable_cloudfront=True,
        enable_waf=True,
        use_iam_auth=False,
        allowed_ip_cidrs=["203.0.113.0/24"],
        retention_days=7,
        untagged_image_keep_count=3,
    )


@pytest.fixture
def iam_intent():
    """CloudFront signing requests to an IAM-protected function URL."""
    return DeployIntent(
        enable_cloudfront=True,
        enable_waf=False,
        use_iam_auth=True,
        retention_days=30,
        untagged_image_keep_count=5,
    )


@pytest.fixture
def ip_ranges_file(tmp_path) -> Path:
    """
    Write a small GitHub IP range file.

    Returns:
        Path: Path to the JSON file
    """
    path = tmp_path / "github_ip_ranges.json"
    path.write_text(json.dumps({
        "version": "test",
        "cidrs": ["192.0.2.0/24", "198.51.100.0/24"],
    }))
    return path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo configure_logging() calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
