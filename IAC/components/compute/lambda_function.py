"""
Lambda function component for the dashboard container.

Creates:
- CloudWatch log group with the intent's retention
- Lambda function from the ECR image (Lambda Web Adapter wraps the HTTP server)
- Function URL (auth NONE, or AWS_IAM when CloudFront signs requests)
- Public invoke permission for the function URL
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from resolver.models.plan import ResourceDescriptor
from IAC.configs.constants import COMPONENT_TYPES
from IAC.utils.secrets import to_pulumi_input
from IAC.utils.tags import create_tags


@dataclass
class LambdaOutputs:
    """Output values from Lambda component."""
    function_arn: pulumi.Output[str]
    function_name: pulumi.Output[str]
    function_url: pulumi.Output[str]
    function_url_domain: pulumi.Output[str]


def url_domain(url: str) -> str:
    """Strip scheme and trailing slash: CloudFront origins take a bare domain."""
    return url.split("://", 1)[-1].rstrip("/")


class LambdaFunctionComponent(pulumi.ComponentResource):
    """
    Container-image Lambda function serving the dashboard over a function URL.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        log_sink: ResourceDescriptor,
        function: ResourceDescriptor,
        endpoint: ResourceDescriptor,
        public_permission: ResourceDescriptor,
        role_arn: pulumi.Input[str],
        repository_url: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["lambda"], name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        props = function.properties

        self.log_group = aws.cloudwatch.LogGroup(
            f"{name}-logs",
            name=log_sink.properties["name"],
            retention_in_days=log_sink.properties["retention_in_days"],
            tags=create_tags(environment, log_sink.properties["name"], log_sink.id),
            opts=child_opts,
        )

        self.function = aws.lambda_.Function(
            f"{name}-function",
            name=props["function_name"],
            role=role_arn,
            package_type=props["package_type"],
            image_uri=pulumi.Output.concat(repository_url, ":", props["image_tag"]),
            memory_size=props["memory_size"],
            timeout=props["timeout"],
            architectures=[props["architecture"]],
            environment=aws.lambda_.FunctionEnvironmentArgs(
                variables=to_pulumi_input(props["environment"]),
            ),
            tags=create_tags(environment, props["function_name"], function.id),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[self.log_group],
            ),
        )

        self.function_url = aws.lambda_.FunctionUrl(
            f"{name}-url",
            function_name=self.function.name,
            authorization_type=endpoint.properties["auth_mode"],
            invoke_mode=endpoint.properties["invoke_mode"],
            opts=child_opts,
        )

        perm = public_permission.properties
        self.public_permission = aws.lambda_.Permission(
            f"{name}-public-url-invoke",
            action=perm["action"],
            function=self.function.name,
            principal=perm["principal"],
            function_url_auth_type=perm["function_url_auth_type"],
            opts=child_opts,
        )

        self.register_outputs({
            "function_arn": self.function.arn,
            "function_name": self.function.name,
            "function_url": self.function_url.function_url,
        })

    def get_outputs(self) -> LambdaOutputs:
        """Get Lambda output values."""
        return LambdaOutputs(
            function_arn=self.function.arn,
            function_name=self.function.name,
            function_url=self.function_url.function_url,
            function_url_domain=self.function_url.function_url.apply(url_domain),
        )
