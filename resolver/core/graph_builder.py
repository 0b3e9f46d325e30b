"""
Resource graph builder.

Expands a validated DeployIntent into ordered resource descriptors.

Always present:
  container registry -> lifecycle policy
  execution role -> role policy
  log sink
  compute function -> function endpoint -> public invoke permission

Conditional branches, one helper each:
  CloudFront + IAM auth: origin access control, CDN-scoped invoke permission
                         and CDN invoke role
  CloudFront + header:   shared secret as custom origin header and function env
  WAF:                   IP allow list -> web ACL -> attached to the CDN
  GitHub repository:     OIDC deploy role and its policy

Dependencies: pydantic
System role: Third stage of resolution
"""

import ipaddress
from collections.abc import Mapping
from typing import Any

from resolver.configs.constants import (
    ALL_VIEWER_EXCEPT_HOST_HEADER_POLICY_ID,
    CACHING_DISABLED_POLICY_ID,
    EXEC_WRAPPER_ENV_KEY,
    GITHUB_OIDC_PROVIDER_HOST,
    LAMBDA_BASIC_EXECUTION_POLICY_ARN,
    ORIGIN_SECRET_ENV_KEY,
    PORT_ENV_KEY,
)
from resolver.configs.settings import ResolverSettings, get_settings
from resolver.core.exceptions import InternalConsistencyError
from resolver.core.lifecycle_compiler import compile_policy_document, compile_rules
from resolver.models.intent import DeployIntent
from resolver.models.plan import ResolvedPlan, ResourceDescriptor, ResourceKind
from resolver.models.secret import SharedSecret
from resolver.observability.logger import get_logger

logger = get_logger(__name__)

# Stable descriptor ids
CONTAINER_REGISTRY = "container_registry"
REGISTRY_LIFECYCLE_POLICY = "registry_lifecycle_policy"
EXECUTION_ROLE = "execution_role"
EXECUTION_ROLE_POLICY = "execution_role_policy"
LOG_SINK = "log_sink"
COMPUTE_FUNCTION = "compute_function"
FUNCTION_ENDPOINT = "function_endpoint"
PUBLIC_INVOKE_PERMISSION = "public_invoke_permission"
CDN = "cdn"
CDN_ORIGIN_ACCESS_CONTROL = "cdn_origin_access_control"
CDN_INVOKE_PERMISSION = "cdn_invoke_permission"
CDN_INVOKE_ROLE = "cdn_invoke_role"
IP_ALLOW_LIST = "ip_allow_list"
WEB_ACL = "web_acl"
GITHUB_DEPLOY_ROLE = "github_deploy_role"
GITHUB_DEPLOY_ROLE_POLICY = "github_deploy_role_policy"

AUTH_IAM = "AWS_IAM"
AUTH_NONE = "NONE"
INVOKE_URL_ACTION = "lambda:InvokeFunctionUrl"


def merge_environment(
    caller: Mapping[str, str],
    reserved: Mapping[str, str],
) -> dict[str, str]:
    """
    Overlay reserved keys on caller-supplied variables.

    Reserved keys win on collision. Neither input is modified.
    """
    overridden = sorted(set(caller) & set(reserved))
    if overridden:
        logger.warning("Reserved environment keys override caller values: %s", overridden)
    return {**caller, **reserved}


def union_cidrs(*groups: Any) -> list[str]:
    """
    Union CIDR collections, collapsing duplicates after normalization.

    The result is sorted by network so it does not depend on input order.
    """
    networks = {
        ipaddress.ip_network(cidr, strict=False)
        for group in groups
        for cidr in group
    }
    return [str(n) for n in sorted(networks, key=lambda n: (n.version, n.network_address, n.prefixlen))]


def _service_principal(service: str) -> dict[str, Any]:
    return {"type": "Service", "identifier": service}


class ResourceGraphBuilder:
    """Builds a ResolvedPlan from a pre-validated intent."""

    def __init__(self, settings: ResolverSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def build(self, intent: DeployIntent, secret: SharedSecret | None) -> ResolvedPlan:
        """
        Build the resource graph.

        Args:
            intent: Deploy intent that already passed validation
            secret: Origin secret from the generator (None unless header scheme)

        Returns:
            ResolvedPlan: Ordered descriptors with references

        Raises:
            InternalConsistencyError: If the intent or secret break builder invariants
        """
        self._check_invariants(intent, secret)

        descriptors: list[ResourceDescriptor] = []
        descriptors += self._registry(intent)
        descriptors += self._execution_role(intent)
        descriptors.append(self._log_sink(intent))
        descriptors.append(self._function(intent, secret))
        descriptors.append(self._endpoint(intent))
        descriptors.append(self._public_permission(intent))

        if intent.enable_waf:
            descriptors += self._waf(intent)

        if intent.enable_cloudfront:
            if intent.use_iam_auth:
                descriptors += self._cdn_with_iam_signing(intent)
            else:
                descriptors.append(self._cdn_with_origin_header(intent, secret))

        if intent.github_repository:
            descriptors += self._github_deploy_role(intent)

        plan = ResolvedPlan.assemble(descriptors, shared_secret=secret)
        logger.info(
            "Built resource graph for %s: %d descriptors", intent.base_name, len(plan)
        )
        return plan

    # --- Invariants ---

    @staticmethod
    def _check_invariants(intent: DeployIntent, secret: SharedSecret | None) -> None:
        if intent.use_iam_auth and not intent.enable_cloudfront:
            raise InternalConsistencyError(
                "Builder received use_iam_auth without enable_cloudfront",
                {"constraint": "iam_auth_requires_cloudfront"},
            )
        if intent.enable_waf and not intent.enable_cloudfront:
            raise InternalConsistencyError(
                "Builder received enable_waf without enable_cloudfront",
                {"constraint": "waf_requires_cloudfront"},
            )
        if intent.uses_origin_secret and secret is None:
            raise InternalConsistencyError("Header origin verification needs a shared secret")
        if not intent.uses_origin_secret and secret is not None:
            raise InternalConsistencyError(
                "Shared secret supplied for a plan that does not use header verification"
            )

    # --- Always-present core ---

    def _registry(self, intent: DeployIntent) -> list[ResourceDescriptor]:
        rules = compile_rules(intent.untagged_image_keep_count)
        return [
            ResourceDescriptor(
                id=CONTAINER_REGISTRY,
                kind=ResourceKind.CONTAINER_REGISTRY,
                properties={
                    "name": intent.base_name,
                    "image_tag_mutability": "MUTABLE",  # "latest" is re-pushed
                    "scan_on_push": True,
                    "encryption_type": "AES256",
                },
            ),
            ResourceDescriptor(
                id=REGISTRY_LIFECYCLE_POLICY,
                kind=ResourceKind.REGISTRY_LIFECYCLE_POLICY,
                properties={
                    "repository": CONTAINER_REGISTRY,
                    "rules": [rule.to_ecr_rule() for rule in rules],
                    "policy": compile_policy_document(intent.untagged_image_keep_count),
                },
                references=(CONTAINER_REGISTRY,),
            ),
        ]

    def _execution_role(self, intent: DeployIntent) -> list[ResourceDescriptor]:
        return [
            ResourceDescriptor(
                id=EXECUTION_ROLE,
                kind=ResourceKind.TRUST_ROLE,
                properties={
                    "name": f"{intent.base_name}-lambda-exec",
                    "principal": _service_principal("lambda.amazonaws.com"),
                },
            ),
            ResourceDescriptor(
                id=EXECUTION_ROLE_POLICY,
                kind=ResourceKind.ROLE_POLICY,
                properties={
                    "role": EXECUTION_ROLE,
                    "policy_type": "managed",
                    "policy_arn": LAMBDA_BASIC_EXECUTION_POLICY_ARN,
                },
                references=(EXECUTION_ROLE,),
            ),
        ]

    def _log_sink(self, intent: DeployIntent) -> ResourceDescriptor:
        return ResourceDescriptor(
            id=LOG_SINK,
            kind=ResourceKind.LOG_SINK,
            properties={
                "name": f"/aws/lambda/{intent.base_name}",
                "retention_in_days": intent.retention_days,
            },
        )

    def _function(self, intent: DeployIntent, secret: SharedSecret | None) -> ResourceDescriptor:
        # Step 1: reserved runtime keys over caller variables
        environment: dict[str, Any] = merge_environment(
            intent.environment_variables,
            {
                EXEC_WRAPPER_ENV_KEY: self.settings.exec_wrapper_path,
                PORT_ENV_KEY: str(self.settings.app_port),
            },
        )
        # Step 2: origin secret under its own reserved key, in every mode
        if secret is not None:
            environment = merge_environment(environment, {secret.env_key: secret.value})
        elif ORIGIN_SECRET_ENV_KEY in environment:
            logger.warning(
                "Dropping caller value for reserved key %s: no origin secret in this plan",
                ORIGIN_SECRET_ENV_KEY,
            )
            environment = {k: v for k, v in environment.items() if k != ORIGIN_SECRET_ENV_KEY}

        return ResourceDescriptor(
            id=COMPUTE_FUNCTION,
            kind=ResourceKind.COMPUTE_FUNCTION,
            properties={
                "function_name": intent.base_name,
                "package_type": "Image",
                "repository": CONTAINER_REGISTRY,
                "image_tag": intent.image_tag,
                "role": EXECUTION_ROLE,
                "log_group": LOG_SINK,
                "memory_size": intent.memory_size,
                "timeout": intent.timeout,
                "architecture": intent.architecture.value,
                "port": self.settings.app_port,
                "environment": environment,
            },
            references=(CONTAINER_REGISTRY, EXECUTION_ROLE, EXECUTION_ROLE_POLICY, LOG_SINK),
        )

    def _endpoint(self, intent: DeployIntent) -> ResourceDescriptor:
        return ResourceDescriptor(
            id=FUNCTION_ENDPOINT,
            kind=ResourceKind.FUNCTION_ENDPOINT,
            properties={
                "function": COMPUTE_FUNCTION,
                "auth_mode": AUTH_IAM if intent.use_iam_auth else AUTH_NONE,
                "invoke_mode": "BUFFERED",
            },
            references=(COMPUTE_FUNCTION,),
        )

    def _public_permission(self, intent: DeployIntent) -> ResourceDescriptor:
        return ResourceDescriptor(
            id=PUBLIC_INVOKE_PERMISSION,
            kind=ResourceKind.INVOKE_PERMISSION,
            properties={
                "function": COMPUTE_FUNCTION,
                "action": INVOKE_URL_ACTION,
                "principal": "*",
                "function_url_auth_type": AUTH_IAM if intent.use_iam_auth else AUTH_NONE,
            },
            references=(COMPUTE_FUNCTION, FUNCTION_ENDPOINT),
        )

    # --- CloudFront branches ---

    def _cdn(
        self,
        intent: DeployIntent,
        origin_verification: str,
        extra: dict[str, Any],
        references: tuple[str, ...],
    ) -> ResourceDescriptor:
        properties: dict[str, Any] = {
            "comment": f"{intent.base_name} dashboard",
            "origin": FUNCTION_ENDPOINT,
            "origin_id": "lambda-function-url",
            "origin_protocol_policy": "https-only",
            "origin_verification": origin_verification,
            "price_class": intent.price_class,
            "viewer_protocol_policy": "redirect-to-https",
            "allowed_methods": ["GET", "HEAD", "OPTIONS", "PUT", "POST", "PATCH", "DELETE"],
            "cached_methods": ["GET", "HEAD"],
            "cache_policy_id": CACHING_DISABLED_POLICY_ID,
            "origin_request_policy_id": ALL_VIEWER_EXCEPT_HOST_HEADER_POLICY_ID,
            **extra,
        }
        refs = (FUNCTION_ENDPOINT,) + references
        if intent.enable_waf:
            properties["web_acl"] = WEB_ACL
            refs += (WEB_ACL,)
        return ResourceDescriptor(
            id=CDN, kind=ResourceKind.CDN, properties=properties, references=refs
        )

    def _cdn_with_iam_signing(self, intent: DeployIntent) -> list[ResourceDescriptor]:
        oac = ResourceDescriptor(
            id=CDN_ORIGIN_ACCESS_CONTROL,
            kind=ResourceKind.CDN_ORIGIN_ACCESS_CONTROL,
            properties={
                "name": f"{intent.base_name}-oac",
                "origin_type": "lambda",
                "signing_behavior": "always",
                "signing_protocol": "sigv4",
            },
        )
        cdn = self._cdn(
            intent,
            origin_verification="sigv4",
            extra={"origin_access_control": CDN_ORIGIN_ACCESS_CONTROL},
            references=(CDN_ORIGIN_ACCESS_CONTROL,),
        )
        permission = ResourceDescriptor(
            id=CDN_INVOKE_PERMISSION,
            kind=ResourceKind.INVOKE_PERMISSION,
            properties={
                "function": COMPUTE_FUNCTION,
                "action": INVOKE_URL_ACTION,
                "principal": "cloudfront.amazonaws.com",
                "source": CDN,
                "function_url_auth_type": AUTH_IAM,
            },
            references=(COMPUTE_FUNCTION, CDN),
        )
        role = ResourceDescriptor(
            id=CDN_INVOKE_ROLE,
            kind=ResourceKind.TRUST_ROLE,
            properties={
                "name": f"{intent.base_name}-cdn-invoke",
                "principal": _service_principal("cloudfront.amazonaws.com"),
                "inline_policy": {
                    "actions": [INVOKE_URL_ACTION],
                    "resource": COMPUTE_FUNCTION,
                },
            },
            references=(COMPUTE_FUNCTION,),
        )
        return [oac, cdn, permission, role]

    def _cdn_with_origin_header(
        self, intent: DeployIntent, secret: SharedSecret | None
    ) -> ResourceDescriptor:
        if secret is None:
            raise InternalConsistencyError("Header origin verification needs a shared secret")
        return self._cdn(
            intent,
            origin_verification="header",
            extra={"custom_headers": [{"name": secret.header_name, "value": secret.value}]},
            references=(),
        )

    # --- WAF branch ---

    def _waf(self, intent: DeployIntent) -> list[ResourceDescriptor]:
        addresses = union_cidrs(intent.allowed_ip_cidrs, intent.github_ip_cidrs)
        ip_set = ResourceDescriptor(
            id=IP_ALLOW_LIST,
            kind=ResourceKind.IP_ALLOW_LIST,
            properties={
                "name": f"{intent.base_name}-allowed-ips",
                "scope": "CLOUDFRONT",
                "ip_address_version": "IPV4",
                "addresses": addresses,
            },
        )
        web_acl = ResourceDescriptor(
            id=WEB_ACL,
            kind=ResourceKind.WEB_ACL,
            properties={
                "name": f"{intent.base_name}-web-acl",
                "scope": "CLOUDFRONT",
                "default_action": "block",
                "rules": [
                    {
                        "name": "allow-listed-ips",
                        "priority": 0,
                        "action": "allow",
                        "ip_set": IP_ALLOW_LIST,
                    },
                ],
            },
            references=(IP_ALLOW_LIST,),
        )
        return [ip_set, web_acl]

    # --- GitHub Actions OIDC branch ---

    def _github_deploy_role(self, intent: DeployIntent) -> list[ResourceDescriptor]:
        role = ResourceDescriptor(
            id=GITHUB_DEPLOY_ROLE,
            kind=ResourceKind.TRUST_ROLE,
            properties={
                "name": f"{intent.base_name}-github-deploy",
                "principal": {
                    "type": "Federated",
                    "identifier": GITHUB_OIDC_PROVIDER_HOST,
                    "audience": "sts.amazonaws.com",
                    "subject": f"repo:{intent.github_repository}:*",
                },
            },
        )
        policy = ResourceDescriptor(
            id=GITHUB_DEPLOY_ROLE_POLICY,
            kind=ResourceKind.ROLE_POLICY,
            properties={
                "role": GITHUB_DEPLOY_ROLE,
                "policy_type": "inline",
                "statements": [
                    {
                        "actions": ["ecr:GetAuthorizationToken"],
                        "resource": "*",
                    },
                    {
                        "actions": [
                            "ecr:BatchCheckLayerAvailability",
                            "ecr:BatchGetImage",
                            "ecr:CompleteLayerUpload",
                            "ecr:InitiateLayerUpload",
                            "ecr:PutImage",
                            "ecr:UploadLayerPart",
                        ],
                        "resource": CONTAINER_REGISTRY,
                    },
                    {
                        "actions": [
                            "lambda:GetFunction",
                            "lambda:UpdateFunctionCode",
                        ],
                        "resource": COMPUTE_FUNCTION,
                    },
                ],
            },
            references=(GITHUB_DEPLOY_ROLE, CONTAINER_REGISTRY, COMPUTE_FUNCTION),
        )
        return [role, policy]


def build(
    intent: DeployIntent,
    secret: SharedSecret | None,
    settings: ResolverSettings | None = None,
) -> ResolvedPlan:
    """Build the resource graph with the given or default settings."""
    return ResourceGraphBuilder(settings).build(intent, secret)
