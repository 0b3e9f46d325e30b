"""
ECR lifecycle rule models.

Dependencies: pydantic
System role: Typed lifecycle rules and their ECR policy JSON shape
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TagStatus(str, Enum):
    """ECR tagStatus selector values."""
    TAGGED = "tagged"
    UNTAGGED = "untagged"
    ANY = "any"


class CountType(str, Enum):
    """ECR countType values."""
    IMAGE_COUNT_MORE_THAN = "imageCountMoreThan"
    SINCE_IMAGE_PUSHED = "sinceImagePushed"


class TagSelector(BaseModel):
    """Which images a rule applies to."""

    model_config = ConfigDict(frozen=True)

    tag_status: TagStatus
    # Exact tags (no wildcard) for tagPatternList
    tag_patterns: tuple[str, ...] = ()
    tag_prefixes: tuple[str, ...] = ()

    def to_selection(self) -> dict[str, Any]:
        selection: dict[str, Any] = {"tagStatus": self.tag_status.value}
        if self.tag_patterns:
            selection["tagPatternList"] = list(self.tag_patterns)
        if self.tag_prefixes:
            selection["tagPrefixList"] = list(self.tag_prefixes)
        return selection


class RetentionPolicy(BaseModel):
    """How many images, or how old, before the rule expires them."""

    model_config = ConfigDict(frozen=True)

    count_type: CountType
    count_number: int = Field(gt=0)

    def to_selection(self) -> dict[str, Any]:
        selection: dict[str, Any] = {
            "countType": self.count_type.value,
            "countNumber": self.count_number,
        }
        if self.count_type is CountType.SINCE_IMAGE_PUSHED:
            selection["countUnit"] = "days"
        return selection


class LifecycleRule(BaseModel):
    """One priority-ranked expiration rule for the container registry."""

    model_config = ConfigDict(frozen=True)

    priority: int = Field(ge=1, le=4)
    description: str
    tag_selector: TagSelector
    retention: RetentionPolicy

    def to_ecr_rule(self) -> dict[str, Any]:
        """Render this rule in the ECR lifecycle policy document shape."""
        return {
            "rulePriority": self.priority,
            "description": self.description,
            "selection": {
                **self.tag_selector.to_selection(),
                **self.retention.to_selection(),
            },
            "action": {"type": "expire"},
        }
