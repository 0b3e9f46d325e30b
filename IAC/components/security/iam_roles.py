"""
IAM roles component for the dashboard deployment.

Creates:
- Lambda execution role with the basic execution managed policy
- GitHub Actions deploy role trusted through the OIDC provider, allowed to
  push images to the registry and update the function

Roles are built from TrustRole / RolePolicy plan descriptors. Inline
statements name their resource by descriptor id ("compute_function") or
"*", and are resolved to ARNs here.
"""

import json
from dataclasses import dataclass
from typing import Any

import pulumi
import pulumi_aws as aws

from resolver.models.plan import ResourceDescriptor
from IAC.configs.constants import COMPONENT_TYPES
from IAC.utils.tags import create_tags


def service_trust_policy(principal: dict[str, Any]) -> str:
    """Assume-role policy for an AWS service principal."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": principal["identifier"]},
            "Action": "sts:AssumeRole",
        }],
    })


def github_trust_policy(principal: dict[str, Any], account_id: str) -> str:
    """Assume-role policy for GitHub Actions web identity tokens."""
    host = principal["identifier"]
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Federated": f"arn:aws:iam::{account_id}:oidc-provider/{host}"},
            "Action": "sts:AssumeRoleWithWebIdentity",
            "Condition": {
                "StringEquals": {f"{host}:aud": principal["audience"]},
                "StringLike": {f"{host}:sub": principal["subject"]},
            },
        }],
    })


def inline_policy_document(
    statements: list[dict[str, Any]],
    resource_arns: dict[str, pulumi.Input[str]],
) -> pulumi.Output[str]:
    """
    Render inline policy statements, resolving descriptor ids to ARNs.

    Args:
        statements: [{"actions": [...], "resource": "*" | descriptor id}]
        resource_arns: ARN input for each descriptor id the statements use

    Returns:
        pulumi.Output[str]: Policy JSON
    """
    ids = sorted({s["resource"] for s in statements if s["resource"] != "*"})
    missing = [i for i in ids if i not in resource_arns]
    if missing:
        raise ValueError(f"No ARN supplied for policy resources: {missing}")

    def render(arns: list[str]) -> str:
        lookup = dict(zip(ids, arns))
        return json.dumps({
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Action": statement["actions"],
                    "Resource": lookup.get(statement["resource"], "*"),
                }
                for statement in statements
            ],
        })

    return pulumi.Output.all(*[resource_arns[i] for i in ids]).apply(render)


@dataclass
class IamRoleOutputs:
    """Output values from IAM roles component."""
    lambda_role_arn: pulumi.Output[str]
    lambda_role_name: pulumi.Output[str]


class IamRolesComponent(pulumi.ComponentResource):
    """
    Lambda execution role.

    Follows least-privilege principle: only the basic execution policy
    (CloudWatch Logs) is attached.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        role: ResourceDescriptor,
        role_policy: ResourceDescriptor,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["iam"], name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        role_name = role.properties["name"]

        self.lambda_role = aws.iam.Role(
            f"{name}-lambda-role",
            name=role_name,
            assume_role_policy=service_trust_policy(role.properties["principal"]),
            tags=create_tags(environment, role_name, role.id),
            opts=child_opts,
        )

        aws.iam.RolePolicyAttachment(
            f"{name}-lambda-basic-execution",
            role=self.lambda_role.name,
            policy_arn=role_policy.properties["policy_arn"],
            opts=child_opts,
        )

        self.register_outputs({
            "lambda_role_arn": self.lambda_role.arn,
        })

    def get_outputs(self) -> IamRoleOutputs:
        """Get IAM role output values."""
        return IamRoleOutputs(
            lambda_role_arn=self.lambda_role.arn,
            lambda_role_name=self.lambda_role.name,
        )


class GithubDeployRoleComponent(pulumi.ComponentResource):
    """
    Role assumed by GitHub Actions to push images and roll the function.

    The OIDC provider for token.actions.githubusercontent.com must already
    exist in the account.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        role: ResourceDescriptor,
        role_policy: ResourceDescriptor,
        resource_arns: dict[str, pulumi.Input[str]],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__(COMPONENT_TYPES["github"], name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        role_name = role.properties["name"]
        principal = role.properties["principal"]
        account_id = aws.get_caller_identity_output().account_id

        self.role = aws.iam.Role(
            f"{name}-role",
            name=role_name,
            assume_role_policy=account_id.apply(
                lambda account: github_trust_policy(principal, account)
            ),
            tags=create_tags(environment, role_name, role.id),
            opts=child_opts,
        )

        aws.iam.RolePolicy(
            f"{name}-policy",
            role=self.role.id,
            policy=inline_policy_document(role_policy.properties["statements"], resource_arns),
            opts=child_opts,
        )

        self.register_outputs({
            "role_arn": self.role.arn,
        })
