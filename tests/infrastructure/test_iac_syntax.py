"""
Test suite for IAC syntax and structure validation.

Validates:
1. All Python modules have valid syntax
2. All imports can be resolved correctly
3. Component classes inherit from pulumi.ComponentResource
4. Output dataclasses are properly defined
5. Config and utility helpers behave as documented
"""

import ast
from dataclasses import is_dataclass
from pathlib import Path

import pytest

IAC_DIR = Path(__file__).parent.parent.parent / "IAC"


class TestIacSyntaxValidation:
    """Validate Python syntax in all IAC modules."""

    def test_all_iac_files_have_valid_syntax(self):
        """All Python files in IAC directory should parse without syntax errors."""
        errors = []

        for py_file in IAC_DIR.rglob("*.py"):
            if "__pycache__" in str(py_file):
                continue
            try:
                ast.parse(py_file.read_text())
            except SyntaxError as e:
                errors.append(f"{py_file}: {e.msg} (line {e.lineno})")

        assert not errors, "Syntax errors found:\n" + "\n".join(errors)


class TestIacImports:
    """Validate that all IAC imports are correctly structured."""

    def test_all_components_are_component_resources(self):
        """Every component class should subclass pulumi.ComponentResource."""
        import pulumi
        from IAC.components.compute.lambda_function import LambdaFunctionComponent
        from IAC.components.edge.cloudfront import CloudFrontComponent
        from IAC.components.security.iam_roles import GithubDeployRoleComponent, IamRolesComponent
        from IAC.components.security.waf import WafComponent
        from IAC.components.storage.ecr_repository import EcrRepositoryComponent

        for cls in (
            EcrRepositoryComponent,
            IamRolesComponent,
            GithubDeployRoleComponent,
            WafComponent,
            LambdaFunctionComponent,
            CloudFrontComponent,
        ):
            assert issubclass(cls, pulumi.ComponentResource), cls.__name__

    def test_output_dataclasses_are_dataclasses(self):
        """All output classes should be proper dataclasses."""
        from IAC.components.compute.lambda_function import LambdaOutputs
        from IAC.components.edge.cloudfront import CloudFrontOutputs
        from IAC.components.security.iam_roles import IamRoleOutputs
        from IAC.components.security.waf import WafOutputs
        from IAC.components.storage.ecr_repository import EcrRepositoryOutputs
        from IAC.plan_applier import StackOutputs

        for cls in (
            LambdaOutputs, CloudFrontOutputs, IamRoleOutputs,
            WafOutputs, EcrRepositoryOutputs, StackOutputs,
        ):
            assert is_dataclass(cls), cls.__name__

    def test_main_entry_point_has_main_function(self):
        """Main entry point should define a documented main function."""
        # __main__.py calls main() on import, which needs a Pulumi stack
        tree = ast.parse((IAC_DIR / "__main__.py").read_text())

        main_func = next(
            (n for n in ast.walk(tree) if isinstance(n, ast.FunctionDef) and n.name == "main"),
            None,
        )

        assert main_func is not None, "main() function not found in __main__.py"
        assert ast.get_docstring(main_func) is not None
        assert ast.get_docstring(tree) is not None


class TestPlanApplier:
    """Validate the plan-to-component mapping."""

    def test_stack_outputs_skip_absent_values(self):
        """Optional outputs are not exported when the plan lacks them."""
        from IAC.plan_applier import StackOutputs

        outputs = StackOutputs(
            repository_url="repo", function_name="fn", function_url="https://fn/"
        )

        assert outputs.exports() == {
            "repository_url": "repo",
            "function_name": "fn",
            "function_url": "https://fn/",
        }

    def test_applier_holds_plan(self, iac_plan):
        """PlanApplier keeps the plan and namer it was given."""
        from IAC.plan_applier import PlanApplier
        from IAC.utils.naming import ResourceNamer

        applier = PlanApplier(iac_plan, "prod", ResourceNamer("metrics-prod"))

        assert applier.plan is iac_plan
        assert applier.namer.name("cdn") == "metrics-prod-cdn"


class TestIacConfiguration:
    """Validate configuration loading and structure."""

    def test_constants_are_defined(self):
        """Configuration constants should be defined."""
        from IAC.configs.constants import CLOUDFRONT_REGION, COMPONENT_TYPES, DEFAULT_TAGS

        assert CLOUDFRONT_REGION == "us-east-1"
        assert isinstance(DEFAULT_TAGS, dict)
        assert {"ecr", "iam", "github", "waf", "lambda", "cloudfront"} == set(COMPONENT_TYPES)

    def test_get_intent_reads_stack_config(self, monkeypatch):
        """get_intent maps stack config keys onto a DeployIntent."""
        import pulumi
        from IAC.configs import environment

        class FakeConfig:
            values = {
                "enable_cloudfront": True,
                "use_iam_auth": True,
                "retention_days": 30,
                "environment": "staging",
            }

            def get(self, key):
                return self.values.get(key)

            get_bool = get_int = get_object = get

        monkeypatch.setattr(pulumi, "get_stack", lambda: "dev")

        intent = environment.get_intent(FakeConfig())

        assert intent.enable_cloudfront is True
        assert intent.use_iam_auth is True
        assert intent.retention_days == 30
        assert intent.environment == "staging"
        assert intent.base_name == "metrics-staging"

    def test_get_intent_defaults_environment_to_stack(self, monkeypatch):
        """Without an environment key the stack name is used."""
        import pulumi
        from IAC.configs import environment

        class EmptyConfig:
            def get(self, key):
                return None

            get_bool = get_int = get_object = get

        monkeypatch.setattr(pulumi, "get_stack", lambda: "dev")

        assert environment.get_intent(EmptyConfig()).environment == "dev"

    @pytest.mark.parametrize(
        "key, constraint",
        [
            ("untagged_image_keep_count", "invalid_untagged_image_keep_count"),
            ("retention_days", "invalid_retention_days"),
        ],
    )
    def test_configured_zero_reaches_validation(self, monkeypatch, settings, key, constraint):
        """An explicit 0 is kept rather than replaced by the default, so resolve rejects it."""
        import pulumi
        from IAC.configs import environment
        from resolver.core.exceptions import ConstraintViolation
        from resolver.core.resolver import resolve

        class ZeroConfig:
            values = {key: 0}

            def get(self, name):
                return self.values.get(name)

            get_bool = get_int = get_object = get

        monkeypatch.setattr(pulumi, "get_stack", lambda: "dev")

        intent = environment.get_intent(ZeroConfig())

        assert getattr(intent, key) == 0
        with pytest.raises(ConstraintViolation) as exc_info:
            resolve(intent, settings=settings)
        assert exc_info.value.constraint == constraint

    def test_unset_keys_keep_intent_defaults(self, monkeypatch):
        """Keys missing from stack config fall back to DeployIntent defaults."""
        import pulumi
        from IAC.configs import environment
        from resolver.models.intent import DeployIntent

        class EmptyConfig:
            def get(self, key):
                return None

            get_bool = get_int = get_object = get

        monkeypatch.setattr(pulumi, "get_stack", lambda: "dev")
        defaults = DeployIntent()

        intent = environment.get_intent(EmptyConfig())

        assert intent.retention_days == defaults.retention_days
        assert intent.untagged_image_keep_count == defaults.untagged_image_keep_count
        assert intent.memory_size == defaults.memory_size
        assert intent.timeout == defaults.timeout
        assert intent.allowed_ip_cidrs == frozenset()
        assert intent.enable_cloudfront is False

    def test_entry_point_passes_log_level_from_settings(self):
        """The Pulumi entry point configures logging with the settings log level."""
        tree = ast.parse((IAC_DIR / "__main__.py").read_text())
        main_def = next(
            node for node in tree.body if isinstance(node, ast.FunctionDef) and node.name == "main"
        )
        calls = [node for node in ast.walk(main_def) if isinstance(node, ast.Call)]
        configure = next(
            call for call in calls
            if isinstance(call.func, ast.Name) and call.func.id == "configure_logging"
        )

        assert len(configure.args) == 1
        assert "get_settings().log_level" == ast.unparse(configure.args[0])


class TestIacUtilities:
    """Validate utility functions."""

    def test_resource_naming(self):
        """ResourceNamer should prefix the base name and dash the descriptor id."""
        from IAC.utils.naming import ResourceNamer

        namer = ResourceNamer("metrics-prod")
        assert namer.name("compute_function") == "metrics-prod-compute-function"

    def test_create_tags_function(self):
        """create_tags should generate proper tag dictionary."""
        from IAC.utils.tags import create_tags

        tags = create_tags("dev", "test-resource", "log_sink", ExtraTag="extra-value")

        assert tags["Environment"] == "dev"
        assert tags["Name"] == "test-resource"
        assert tags["PlanResource"] == "log_sink"
        assert tags["ExtraTag"] == "extra-value"
        assert tags["ManagedBy"] == "pulumi"

    def test_to_pulumi_input_passes_plain_values(self):
        """Values without secrets are returned unchanged."""
        from IAC.utils.secrets import to_pulumi_input

        value = {"PORT": "3000", "list": ["a", 1]}
        assert to_pulumi_input(value) == value

    def test_to_pulumi_input_wraps_secrets(self, monkeypatch):
        """SecretStr values become Pulumi secret outputs."""
        import pulumi
        from pydantic import SecretStr
        from IAC.utils import secrets

        monkeypatch.setattr(pulumi.Output, "secret", staticmethod(lambda v: ("secret", v)))

        converted = secrets.to_pulumi_input({"headers": [{"value": SecretStr("abc")}]})

        assert converted == {"headers": [{"value": ("secret", "abc")}]}


class TestIacDependencies:
    """Validate external dependencies are available."""

    @pytest.mark.parametrize("module", ["pulumi", "pulumi_aws", "pydantic", "pydantic_settings"])
    def test_importable(self, module):
        """Stack libraries should be importable."""
        import importlib

        assert importlib.import_module(module) is not None
