"""
Lifecycle policy compiler.

Translates the image keep count into the four ECR expiration rules. ECR
evaluates rules by ascending priority and an image is handled by the first
rule that selects it, so both the partition and the order are fixed:

1. "latest" tag: keep the N most recent
2. commit tags starting with 0-9: expire after IMAGE_EXPIRY_DAYS
3. commit tags starting with a-f: expire after IMAGE_EXPIRY_DAYS
4. untagged images: keep the N most recent

Rule 1 takes the untagged keep count as its N; the parameter is shared by
rules 1 and 4.

Dependencies: pydantic
System role: Registry lifecycle policy for the resource graph
"""

import json

from resolver.configs.constants import (
    DIGIT_TAG_PREFIXES,
    HEX_LETTER_TAG_PREFIXES,
    IMAGE_EXPIRY_DAYS,
    LATEST_TAG,
)
from resolver.models.lifecycle import (
    CountType,
    LifecycleRule,
    RetentionPolicy,
    TagSelector,
    TagStatus,
)


def compile_rules(untagged_keep_count: int) -> tuple[LifecycleRule, ...]:
    """
    Build the ordered lifecycle rules.

    Args:
        untagged_keep_count: Images to keep for the "latest" and untagged rules

    Returns:
        tuple[LifecycleRule, ...]: Exactly four rules, priorities 1..4
    """
    if untagged_keep_count < 1:
        raise ValueError(f"untagged_keep_count must be positive, got {untagged_keep_count}")

    keep_recent = RetentionPolicy(
        count_type=CountType.IMAGE_COUNT_MORE_THAN,
        count_number=untagged_keep_count,
    )
    expire_old = RetentionPolicy(
        count_type=CountType.SINCE_IMAGE_PUSHED,
        count_number=IMAGE_EXPIRY_DAYS,
    )

    return (
        LifecycleRule(
            priority=1,
            description=f"Keep last {untagged_keep_count} {LATEST_TAG} images",
            tag_selector=TagSelector(tag_status=TagStatus.TAGGED, tag_patterns=(LATEST_TAG,)),
            retention=keep_recent,
        ),
        LifecycleRule(
            priority=2,
            description=f"Expire commit tags starting with a digit after {IMAGE_EXPIRY_DAYS} days",
            tag_selector=TagSelector(tag_status=TagStatus.TAGGED, tag_prefixes=DIGIT_TAG_PREFIXES),
            retention=expire_old,
        ),
        LifecycleRule(
            priority=3,
            description=f"Expire commit tags starting with a-f after {IMAGE_EXPIRY_DAYS} days",
            tag_selector=TagSelector(tag_status=TagStatus.TAGGED, tag_prefixes=HEX_LETTER_TAG_PREFIXES),
            retention=expire_old,
        ),
        LifecycleRule(
            priority=4,
            description=f"Keep last {untagged_keep_count} untagged images",
            tag_selector=TagSelector(tag_status=TagStatus.UNTAGGED),
            retention=keep_recent,
        ),
    )


def compile_policy_document(untagged_keep_count: int) -> str:
    """
    Render the ECR lifecycle policy JSON.

    Keys are sorted so equal inputs give byte-identical documents.
    """
    rules = compile_rules(untagged_keep_count)
    return json.dumps(
        {"rules": [rule.to_ecr_rule() for rule in rules]},
        sort_keys=True,
        separators=(",", ":"),
    )
