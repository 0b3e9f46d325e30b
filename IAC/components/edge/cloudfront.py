"""
CloudFront CDN Component in front of the Lambda function URL.

Origin verification, decided by the resolver:
1. "sigv4": an Origin Access Control signs every origin request and the
   function URL uses AWS_IAM auth. The function keeps its public invoke
   permission, so any principal with valid SigV4 credentials and
   lambda:InvokeFunctionUrl may still call the URL directly; the
   distribution gets its own permission scoped by source ARN.
2. "header": the function URL stays public (auth NONE) and CloudFront adds
   a secret custom header the dashboard checks, so direct hits to the URL
   can be rejected.

Caching is disabled and all viewer headers except Host are forwarded;
Lambda function URLs reject requests whose Host is not their own domain.

Optionally attaches the WAF web ACL (IP allow list).
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from resolver.models.plan import ResourceDescriptor
from IAC.components.security.iam_roles import inline_policy_document, service_trust_policy
from IAC.configs.constants import COMPONENT_TYPES
from IAC.utils.secrets import to_pulumi_input
from IAC.utils.tags import create_tags


@dataclass
class CloudFrontOutputs:
    """Output values from CloudFront component."""
    distribution_id: pulumi.Output[str]
    distribution_arn: pulumi.Output[str]
    domain_name: pulumi.Output[str]


class CloudFrontComponent(pulumi.ComponentResource):
    """
    CloudFront distribution with the function URL as its only origin.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        cdn: ResourceDescriptor,
        function_url_domain: pulumi.Input[str],
        function_name: pulumi.Input[str],
        function_arn: pulumi.Input[str],
        origin_access_control: ResourceDescriptor | None = None,
        invoke_permission: ResourceDescriptor | None = None,
        invoke_role: ResourceDescriptor | None = None,
        web_acl_arn: pulumi.Input[str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["cloudfront"], name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        props = cdn.properties
        signed = props["origin_verification"] == "sigv4"

        self.oac = None
        if signed:
            if origin_access_control is None:
                raise ValueError("sigv4 origin verification needs an origin access control")
            oac_props = origin_access_control.properties
            self.oac = aws.cloudfront.OriginAccessControl(
                f"{name}-oac",
                name=oac_props["name"],
                origin_access_control_origin_type=oac_props["origin_type"],
                signing_behavior=oac_props["signing_behavior"],
                signing_protocol=oac_props["signing_protocol"],
                opts=child_opts,
            )

        custom_headers = [
            aws.cloudfront.DistributionOriginCustomHeaderArgs(
                name=header["name"],
                value=to_pulumi_input(header["value"]),
            )
            for header in props.get("custom_headers", [])
        ]

        self.distribution = aws.cloudfront.Distribution(
            f"{name}-distribution",
            enabled=True,
            is_ipv6_enabled=True,
            comment=props["comment"],
            price_class=props["price_class"],
            web_acl_id=web_acl_arn,
            origins=[
                aws.cloudfront.DistributionOriginArgs(
                    domain_name=function_url_domain,
                    origin_id=props["origin_id"],
                    origin_access_control_id=self.oac.id if self.oac else None,
                    custom_headers=custom_headers or None,
                    custom_origin_config=aws.cloudfront.DistributionOriginCustomOriginConfigArgs(
                        http_port=80,
                        https_port=443,
                        origin_protocol_policy=props["origin_protocol_policy"],
                        origin_ssl_protocols=["TLSv1.2"],
                    ),
                ),
            ],
            default_cache_behavior=aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
                target_origin_id=props["origin_id"],
                viewer_protocol_policy=props["viewer_protocol_policy"],
                allowed_methods=props["allowed_methods"],
                cached_methods=props["cached_methods"],
                cache_policy_id=props["cache_policy_id"],
                origin_request_policy_id=props["origin_request_policy_id"],
                compress=True,
            ),
            restrictions=aws.cloudfront.DistributionRestrictionsArgs(
                geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                    restriction_type="none",
                ),
            ),
            viewer_certificate=aws.cloudfront.DistributionViewerCertificateArgs(
                cloudfront_default_certificate=True,
            ),
            tags=create_tags(environment, f"{name}-distribution", cdn.id),
            opts=child_opts,
        )

        if signed:
            self._grant_distribution_invoke(
                name, environment, function_name, function_arn,
                invoke_permission, invoke_role,
            )

        self.register_outputs({
            "distribution_id": self.distribution.id,
            "distribution_domain": self.distribution.domain_name,
        })

    def _grant_distribution_invoke(
        self,
        name: str,
        environment: str,
        function_name: pulumi.Input[str],
        function_arn: pulumi.Input[str],
        invoke_permission: ResourceDescriptor | None,
        invoke_role: ResourceDescriptor | None,
    ) -> None:
        """Grant this distribution invoke rights on the IAM-protected function URL."""
        if invoke_permission is None or invoke_role is None:
            raise ValueError("sigv4 origin verification needs an invoke permission and role")

        child_opts = pulumi.ResourceOptions(parent=self)
        perm = invoke_permission.properties
        aws.lambda_.Permission(
            f"{name}-cloudfront-invoke",
            action=perm["action"],
            function=function_name,
            principal=perm["principal"],
            source_arn=self.distribution.arn,
            function_url_auth_type=perm["function_url_auth_type"],
            opts=child_opts,
        )

        role_props = invoke_role.properties
        self.invoke_role = aws.iam.Role(
            f"{name}-invoke-role",
            name=role_props["name"],
            assume_role_policy=service_trust_policy(role_props["principal"]),
            tags=create_tags(environment, role_props["name"], invoke_role.id),
            opts=child_opts,
        )
        aws.iam.RolePolicy(
            f"{name}-invoke-policy",
            role=self.invoke_role.id,
            policy=inline_policy_document(
                [role_props["inline_policy"]],
                {perm["function"]: function_arn},
            ),
            opts=child_opts,
        )

    def get_outputs(self) -> CloudFrontOutputs:
        """Get CloudFront output values."""
        return CloudFrontOutputs(
            distribution_id=self.distribution.id,
            distribution_arn=self.distribution.arn,
            domain_name=self.distribution.domain_name,
        )
