"""
Detailed tests for individual IAC components.

Validates:
1. Each component class has required attributes
2. Components are properly organized in packages
3. Output dataclasses have required fields
4. Policy and naming helpers render what AWS expects
"""

import json
from pathlib import Path

import pytest


class TestSecurityComponents:
    """Tests for security infrastructure components."""

    def test_iam_roles_component_attributes(self):
        """IamRolesComponent should have essential attributes."""
        from IAC.components.security.iam_roles import IamRolesComponent

        assert hasattr(IamRolesComponent, "__init__")
        assert hasattr(IamRolesComponent, "get_outputs")

    def test_iam_role_outputs_has_lambda_role_arn(self):
        """IamRoleOutputs should include Lambda role ARN."""
        from IAC.components.security.iam_roles import IamRoleOutputs

        fields = {f.name for f in IamRoleOutputs.__dataclass_fields__.values()}
        assert "lambda_role_arn" in fields

    def test_waf_outputs_has_web_acl_arn(self):
        """WafOutputs should include the web ACL ARN for CloudFront."""
        from IAC.components.security.waf import WafComponent, WafOutputs

        fields = {f.name for f in WafOutputs.__dataclass_fields__.values()}
        assert "web_acl_arn" in fields
        assert hasattr(WafComponent, "get_outputs")

    def test_service_trust_policy(self):
        """Service principals assume the role with sts:AssumeRole."""
        from IAC.components.security.iam_roles import service_trust_policy

        policy = json.loads(service_trust_policy(
            {"type": "Service", "identifier": "lambda.amazonaws.com"}
        ))

        statement = policy["Statement"][0]
        assert statement["Principal"] == {"Service": "lambda.amazonaws.com"}
        assert statement["Action"] == "sts:AssumeRole"

    def test_github_trust_policy(self):
        """GitHub tokens are scoped by audience and repository subject."""
        from IAC.components.security.iam_roles import github_trust_policy

        principal = {
            "type": "Federated",
            "identifier": "token.actions.githubusercontent.com",
            "audience": "sts.amazonaws.com",
            "subject": "repo:acme/dashboard:*",
        }

        statement = json.loads(github_trust_policy(principal, "123456789012"))["Statement"][0]

        assert statement["Principal"]["Federated"] == (
            "arn:aws:iam::123456789012:oidc-provider/token.actions.githubusercontent.com"
        )
        assert statement["Action"] == "sts:AssumeRoleWithWebIdentity"
        assert statement["Condition"]["StringLike"] == {
            "token.actions.githubusercontent.com:sub": "repo:acme/dashboard:*"
        }

    def test_inline_policy_requires_every_arn(self):
        """Statements naming an unknown descriptor are refused."""
        from IAC.components.security.iam_roles import inline_policy_document

        with pytest.raises(ValueError):
            inline_policy_document(
                [{"actions": ["lambda:GetFunction"], "resource": "compute_function"}], {}
            )


class TestStorageComponents:
    """Tests for storage infrastructure components."""

    def test_ecr_component_attributes(self):
        """EcrRepositoryComponent should have essential attributes."""
        from IAC.components.storage.ecr_repository import EcrRepositoryComponent

        assert hasattr(EcrRepositoryComponent, "__init__")
        assert hasattr(EcrRepositoryComponent, "get_outputs")

    def test_ecr_outputs_fields(self):
        """EcrRepositoryOutputs should include URL and ARN."""
        from IAC.components.storage.ecr_repository import EcrRepositoryOutputs

        fields = {f.name for f in EcrRepositoryOutputs.__dataclass_fields__.values()}
        assert {"repository_url", "repository_arn"}.issubset(fields)


class TestComputeComponents:
    """Tests for compute infrastructure components."""

    def test_lambda_component_attributes(self):
        """LambdaFunctionComponent should have essential attributes."""
        from IAC.components.compute.lambda_function import LambdaFunctionComponent

        assert hasattr(LambdaFunctionComponent, "__init__")
        assert hasattr(LambdaFunctionComponent, "get_outputs")

    def test_lambda_outputs_has_url_domain(self):
        """LambdaOutputs should expose the bare URL domain for CloudFront."""
        from IAC.components.compute.lambda_function import LambdaOutputs

        fields = {f.name for f in LambdaOutputs.__dataclass_fields__.values()}
        assert {"function_name", "function_url", "function_url_domain"}.issubset(fields)

    @pytest.mark.parametrize(
        "url",
        [
            "https://abc123.lambda-url.eu-west-1.on.aws/",
            "https://abc123.lambda-url.eu-west-1.on.aws",
        ],
    )
    def test_url_domain(self, url):
        """Scheme and trailing slash are stripped."""
        from IAC.components.compute.lambda_function import url_domain

        assert url_domain(url) == "abc123.lambda-url.eu-west-1.on.aws"


class TestEdgeComponents:
    """Tests for edge infrastructure components."""

    def test_cloudfront_component_attributes(self):
        """CloudFrontComponent should have essential attributes."""
        from IAC.components.edge.cloudfront import CloudFrontComponent

        assert hasattr(CloudFrontComponent, "__init__")
        assert hasattr(CloudFrontComponent, "get_outputs")

    def test_cloudfront_outputs_has_domain(self):
        """CloudFrontOutputs should include the distribution domain."""
        from IAC.components.edge.cloudfront import CloudFrontOutputs

        fields = {f.name for f in CloudFrontOutputs.__dataclass_fields__.values()}
        assert "domain_name" in fields

    def test_sigv4_mode_keeps_public_iam_permission(self, iac_plan):
        """Signed origin mode plans a public AWS_IAM permission beside the CloudFront-scoped one."""
        from resolver.core import graph_builder as ids

        public = iac_plan.get(ids.PUBLIC_INVOKE_PERMISSION).properties
        scoped = iac_plan.get(ids.CDN_INVOKE_PERMISSION).properties

        assert public["principal"] == "*"
        assert public["function_url_auth_type"] == "AWS_IAM"
        assert scoped["principal"] == "cloudfront.amazonaws.com"
        assert scoped["source"] == ids.CDN

    def test_module_doc_describes_url_access(self):
        """The module documentation does not claim the URL is exclusive to the distribution."""
        from IAC.components.edge import cloudfront

        doc = " ".join(cloudfront.__doc__.split())
        assert "only this distribution may invoke" not in doc
        assert "any principal with valid SigV4 credentials" in doc


class TestComponentPackageStructure:
    """Tests for component package organization."""

    def test_all_component_packages_have_init(self):
        """All component packages should have __init__.py."""
        iac_dir = Path(__file__).parent.parent.parent / "IAC"
        for package in ("security", "storage", "compute", "edge"):
            init_file = iac_dir / "components" / package / "__init__.py"
            assert init_file.exists(), f"Missing __init__.py in {package}"

    def test_config_packages_have_init(self):
        """Config and utils packages should have __init__.py."""
        iac_dir = Path(__file__).parent.parent.parent / "IAC"
        for package in ("configs", "utils", "components"):
            assert (iac_dir / package / "__init__.py").exists()


class TestComponentExports:
    """Tests for component __init__ files."""

    def test_security_exports_components(self):
        from IAC.components.security import (
            GithubDeployRoleComponent,
            IamRolesComponent,
            WafComponent,
        )

        assert IamRolesComponent is not None
        assert GithubDeployRoleComponent is not None
        assert WafComponent is not None

    def test_storage_exports_components(self):
        from IAC.components.storage import EcrRepositoryComponent

        assert EcrRepositoryComponent is not None

    def test_compute_exports_components(self):
        from IAC.components.compute import LambdaFunctionComponent

        assert LambdaFunctionComponent is not None

    def test_edge_exports_components(self):
        from IAC.components.edge import CloudFrontComponent

        assert CloudFrontComponent is not None
