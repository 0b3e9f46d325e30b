"""Tests for ECR lifecycle rule compilation."""

import json

import pytest

from resolver.core.lifecycle_compiler import compile_policy_document, compile_rules
from resolver.models.lifecycle import CountType, TagStatus


class TestCompileRules:
    """Tests for compile_rules()."""

    def test_four_rules_in_priority_order(self) -> None:
        """Exactly four rules with priorities 1..4."""
        rules = compile_rules(3)
        assert [r.priority for r in rules] == [1, 2, 3, 4]

    def test_latest_rule_keeps_n_images(self) -> None:
        """Rule 1 keeps the N most recent images tagged latest."""
        rule = compile_rules(5)[0]

        assert rule.tag_selector.tag_status is TagStatus.TAGGED
        assert rule.tag_selector.tag_patterns == ("latest",)
        assert rule.retention.count_type is CountType.IMAGE_COUNT_MORE_THAN
        assert rule.retention.count_number == 5

    def test_commit_tag_rules_expire_after_90_days(self) -> None:
        """Rules 2 and 3 partition hex commit tags by first character."""
        _, digits, letters, _ = compile_rules(3)

        assert digits.tag_selector.tag_prefixes == tuple("0123456789")
        assert letters.tag_selector.tag_prefixes == tuple("abcdef")
        for rule in (digits, letters):
            assert rule.tag_selector.tag_status is TagStatus.TAGGED
            assert rule.retention.count_type is CountType.SINCE_IMAGE_PUSHED
            assert rule.retention.count_number == 90

    def test_untagged_rule_keeps_n_images(self) -> None:
        """Rule 4 keeps the N most recent untagged images."""
        rule = compile_rules(7)[3]

        assert rule.tag_selector.tag_status is TagStatus.UNTAGGED
        assert rule.retention.count_number == 7

    def test_every_rule_expires(self) -> None:
        """Every rendered rule has the expire action."""
        for rule in compile_rules(3):
            assert rule.to_ecr_rule()["action"] == {"type": "expire"}

    @pytest.mark.parametrize("count", [0, -1])
    def test_rejects_non_positive_count(self, count: int) -> None:
        """Counts below one are refused."""
        with pytest.raises(ValueError):
            compile_rules(count)


class TestCompilePolicyDocument:
    """Tests for compile_policy_document()."""

    def test_ecr_shape(self) -> None:
        """Rendered rules use the ECR lifecycle policy field names."""
        document = json.loads(compile_policy_document(3))
        first, second, _, fourth = document["rules"]

        assert first["selection"] == {
            "tagStatus": "tagged",
            "tagPatternList": ["latest"],
            "countType": "imageCountMoreThan",
            "countNumber": 3,
        }
        assert second["selection"]["countUnit"] == "days"
        assert second["selection"]["tagPrefixList"][0] == "0"
        assert fourth["selection"] == {
            "tagStatus": "untagged",
            "countType": "imageCountMoreThan",
            "countNumber": 3,
        }

    def test_deterministic(self) -> None:
        """Equal inputs give byte-identical documents."""
        assert compile_policy_document(4) == compile_policy_document(4)
