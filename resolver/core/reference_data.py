"""
GitHub IP range reference data.

The ranges GitHub publishes change over time, so they ship as a versioned
JSON file rather than a constant. A different file can be supplied per call
or through DEPLOY_RESOLVER_GITHUB_IP_RANGES_FILE without code changes.

Dependencies: pydantic
System role: Versioned input data for the WAF IP allow list
"""

import ipaddress
import json
from functools import lru_cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from resolver.configs.settings import get_settings
from resolver.core.exceptions import ReferenceDataError
from resolver.observability.logger import get_logger

logger = get_logger(__name__)

PACKAGED_FILE = "github_ip_ranges.json"


class GithubIpRanges(BaseModel):
    """A versioned snapshot of GitHub service IP ranges."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(description="Snapshot date or revision")
    source: str | None = Field(default=None, description="Where the ranges were taken from")
    cidrs: tuple[str, ...] = Field(min_length=1, description="IPv4 CIDR blocks")

    @field_validator("cidrs")
    @classmethod
    def _check_cidrs(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for cidr in value:
            network = ipaddress.ip_network(cidr, strict=False)
            if network.version != 4:
                raise ValueError(f"Only IPv4 ranges are supported: {cidr}")
        return value


def _read_text(path: Path | None) -> tuple[str, str]:
    if path is None:
        ref = resources.files("resolver.data").joinpath(PACKAGED_FILE)
        return ref.read_text(encoding="utf-8"), f"resolver.data/{PACKAGED_FILE}"
    return Path(path).read_text(encoding="utf-8"), str(path)


@lru_cache(maxsize=8)
def _load(path: Path | None) -> GithubIpRanges:
    try:
        text, origin = _read_text(path)
    except OSError as e:
        raise ReferenceDataError(
            f"Cannot read GitHub IP ranges: {e}", path=str(path) if path else None
        ) from e

    try:
        ranges = GithubIpRanges.model_validate(json.loads(text))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise ReferenceDataError(f"Invalid GitHub IP ranges: {e}", path=origin) from e

    logger.debug(
        "Loaded GitHub IP ranges version=%s count=%d from %s",
        ranges.version, len(ranges.cidrs), origin,
    )
    return ranges


def load_github_ip_ranges(path: Path | str | None = None) -> GithubIpRanges:
    """
    Load the GitHub IP range reference data.

    Args:
        path: Explicit file to read. Falls back to the settings override,
            then to the packaged file.

    Returns:
        GithubIpRanges: Parsed and validated snapshot

    Raises:
        ReferenceDataError: If the file is missing or malformed
    """
    if path is None:
        path = get_settings().github_ip_ranges_file
    return _load(Path(path) if path is not None else None)
