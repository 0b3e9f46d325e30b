"""
Apply a ResolvedPlan as Pulumi component resources.

The resolver decides what exists; this module only maps descriptors onto
components. Components are created in plan order, so every descriptor's
dependencies already exist when it is reached:
1. ECR repository + lifecycle policy
2. Lambda execution role
3. Log group, function, function URL, public permission
4. WAF (optional, us-east-1)
5. CloudFront (optional)
6. GitHub deploy role (optional)
"""

from dataclasses import dataclass

import pulumi

from resolver.core import graph_builder as ids
from resolver.models.plan import ResolvedPlan, ResourceKind
from IAC.components.compute.lambda_function import LambdaFunctionComponent
from IAC.components.edge.cloudfront import CloudFrontComponent
from IAC.components.security.iam_roles import GithubDeployRoleComponent, IamRolesComponent
from IAC.components.security.waf import WafComponent
from IAC.components.storage.ecr_repository import EcrRepositoryComponent
from IAC.utils.naming import ResourceNamer


@dataclass
class StackOutputs:
    """Values exported from the stack."""
    repository_url: pulumi.Output[str]
    function_name: pulumi.Output[str]
    function_url: pulumi.Output[str]
    cloudfront_domain: pulumi.Output[str] | None = None
    web_acl_arn: pulumi.Output[str] | None = None
    github_deploy_role_arn: pulumi.Output[str] | None = None

    def exports(self) -> dict[str, pulumi.Output[str]]:
        """Non-empty outputs keyed by export name."""
        return {key: value for key, value in vars(self).items() if value is not None}


class PlanApplier:
    """
    Creates the components a resolved plan describes.

    Attributes:
        plan: Resolved plan to apply
        environment: Environment name used for tags
        namer: Logical name factory for the plan's base name
    """

    def __init__(self, plan: ResolvedPlan, environment: str, namer: ResourceNamer) -> None:
        self.plan = plan
        self.environment = environment
        self.namer = namer

    def apply(self) -> StackOutputs:
        """
        Create all components.

        Returns:
            StackOutputs: Outputs for pulumi.export

        Raises:
            KeyError: If a required core descriptor is missing from the plan
        """
        plan = self.plan

        ecr = EcrRepositoryComponent(
            name=self.namer.name(ids.CONTAINER_REGISTRY),
            environment=self.environment,
            registry=plan.get(ids.CONTAINER_REGISTRY),
            lifecycle_policy=plan.get(ids.REGISTRY_LIFECYCLE_POLICY),
        )
        ecr_outputs = ecr.get_outputs()

        iam = IamRolesComponent(
            name=self.namer.name(ids.EXECUTION_ROLE),
            environment=self.environment,
            role=plan.get(ids.EXECUTION_ROLE),
            role_policy=plan.get(ids.EXECUTION_ROLE_POLICY),
        )
        iam_outputs = iam.get_outputs()

        function = LambdaFunctionComponent(
            name=self.namer.name(ids.COMPUTE_FUNCTION),
            environment=self.environment,
            log_sink=plan.get(ids.LOG_SINK),
            function=plan.get(ids.COMPUTE_FUNCTION),
            endpoint=plan.get(ids.FUNCTION_ENDPOINT),
            public_permission=plan.get(ids.PUBLIC_INVOKE_PERMISSION),
            role_arn=iam_outputs.lambda_role_arn,
            repository_url=ecr_outputs.repository_url,
            opts=pulumi.ResourceOptions(depends_on=[iam]),
        )
        lambda_outputs = function.get_outputs()

        outputs = StackOutputs(
            repository_url=ecr_outputs.repository_url,
            function_name=lambda_outputs.function_name,
            function_url=lambda_outputs.function_url,
        )

        if plan.has_kind(ResourceKind.WEB_ACL):
            waf = WafComponent(
                name=self.namer.name(ids.WEB_ACL),
                environment=self.environment,
                ip_allow_list=plan.get(ids.IP_ALLOW_LIST),
                web_acl=plan.get(ids.WEB_ACL),
            )
            outputs.web_acl_arn = waf.get_outputs().web_acl_arn

        if plan.has_kind(ResourceKind.CDN):
            cdn = CloudFrontComponent(
                name=self.namer.name(ids.CDN),
                environment=self.environment,
                cdn=plan.get(ids.CDN),
                function_url_domain=lambda_outputs.function_url_domain,
                function_name=lambda_outputs.function_name,
                function_arn=lambda_outputs.function_arn,
                origin_access_control=plan.find(ids.CDN_ORIGIN_ACCESS_CONTROL),
                invoke_permission=plan.find(ids.CDN_INVOKE_PERMISSION),
                invoke_role=plan.find(ids.CDN_INVOKE_ROLE),
                web_acl_arn=outputs.web_acl_arn,
            )
            outputs.cloudfront_domain = cdn.get_outputs().domain_name

        deploy_role = plan.find(ids.GITHUB_DEPLOY_ROLE)
        if deploy_role is not None:
            github = GithubDeployRoleComponent(
                name=self.namer.name(ids.GITHUB_DEPLOY_ROLE),
                environment=self.environment,
                role=deploy_role,
                role_policy=plan.get(ids.GITHUB_DEPLOY_ROLE_POLICY),
                resource_arns={
                    ids.CONTAINER_REGISTRY: ecr_outputs.repository_arn,
                    ids.COMPUTE_FUNCTION: lambda_outputs.function_arn,
                },
            )
            outputs.github_deploy_role_arn = github.role.arn

        return outputs
