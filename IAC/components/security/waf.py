"""
WAF component guarding the CloudFront distribution.

Creates, in us-east-1 (required for CLOUDFRONT scope):
- IP set holding the resolver's allow list (caller CIDRs + GitHub ranges)
- Web ACL that blocks by default and allows only the IP set

Outputs (Pass to CloudFrontComponent):
  - web_acl_arn: used as the distribution's web_acl_id
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from resolver.models.plan import ResourceDescriptor
from IAC.configs.constants import CLOUDFRONT_REGION, COMPONENT_TYPES
from IAC.utils.tags import create_tags


def _metric_name(name: str) -> str:
    return "".join(part.capitalize() for part in name.replace("_", "-").split("-"))


@dataclass
class WafOutputs:
    """Output values from WAF component."""
    web_acl_arn: pulumi.Output[str]
    ip_set_arn: pulumi.Output[str]


class WafComponent(pulumi.ComponentResource):
    """IP allow-list web ACL for the dashboard distribution."""

    def __init__(
        self,
        name: str,
        environment: str,
        ip_allow_list: ResourceDescriptor,
        web_acl: ResourceDescriptor,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["waf"], name, None, opts)

        self.provider = aws.Provider(
            f"{name}-{CLOUDFRONT_REGION}",
            region=CLOUDFRONT_REGION,
            opts=pulumi.ResourceOptions(parent=self),
        )
        child_opts = pulumi.ResourceOptions(parent=self, provider=self.provider)

        ip_props = ip_allow_list.properties
        self.ip_set = aws.wafv2.IpSet(
            f"{name}-ip-set",
            name=ip_props["name"],
            scope=ip_props["scope"],
            ip_address_version=ip_props["ip_address_version"],
            addresses=ip_props["addresses"],
            tags=create_tags(environment, ip_props["name"], ip_allow_list.id),
            opts=child_opts,
        )

        acl_props = web_acl.properties
        ip_sets = {ip_allow_list.id: self.ip_set}
        rules = []
        for rule in acl_props["rules"]:
            rules.append(aws.wafv2.WebAclRuleArgs(
                name=rule["name"],
                priority=rule["priority"],
                action=aws.wafv2.WebAclRuleActionArgs(**{rule["action"]: {}}),
                statement=aws.wafv2.WebAclRuleStatementArgs(
                    ip_set_reference_statement=aws.wafv2.WebAclRuleStatementIpSetReferenceStatementArgs(
                        arn=ip_sets[rule["ip_set"]].arn,
                    ),
                ),
                visibility_config=aws.wafv2.WebAclRuleVisibilityConfigArgs(
                    cloudwatch_metrics_enabled=True,
                    metric_name=_metric_name(rule["name"]),
                    sampled_requests_enabled=True,
                ),
            ))

        self.web_acl = aws.wafv2.WebAcl(
            f"{name}-web-acl",
            name=acl_props["name"],
            scope=acl_props["scope"],
            default_action=aws.wafv2.WebAclDefaultActionArgs(**{acl_props["default_action"]: {}}),
            rules=rules,
            visibility_config=aws.wafv2.WebAclVisibilityConfigArgs(
                cloudwatch_metrics_enabled=True,
                metric_name=_metric_name(acl_props["name"]),
                sampled_requests_enabled=True,
            ),
            tags=create_tags(environment, acl_props["name"], web_acl.id),
            opts=child_opts,
        )

        self.register_outputs({
            "web_acl_arn": self.web_acl.arn,
            "ip_set_arn": self.ip_set.arn,
        })

    def get_outputs(self) -> WafOutputs:
        """Get WAF output values."""
        return WafOutputs(
            web_acl_arn=self.web_acl.arn,
            ip_set_arn=self.ip_set.arn,
        )
