"""
Resolver facade.

Runs validation, secret generation and graph building in order. A failed
validation short-circuits; no partial plan is ever returned.

Dependencies: pydantic
System role: Single entry point for resolving a deploy intent
"""

import logging

from resolver.configs.settings import ResolverSettings, get_settings
from resolver.core import secret_generator, validator
from resolver.core.graph_builder import ResourceGraphBuilder
from resolver.models.intent import DeployIntent
from resolver.models.plan import ResolvedPlan
from resolver.observability.log_utils import log_with_context
from resolver.observability.logger import get_logger

logger = get_logger(__name__)


def resolve(intent: DeployIntent, settings: ResolverSettings | None = None) -> ResolvedPlan:
    """
    Resolve a deploy intent into a plan.

    Args:
        intent: Desired deployment configuration
        settings: Resolver settings, defaults to get_settings()

    Returns:
        ResolvedPlan: Validated, ordered resource descriptors

    Raises:
        ConstraintViolation: If the intent breaks a constraint
        InternalConsistencyError: If the builder detects a resolver bug
    """
    settings = settings or get_settings()
    log_with_context(
        logger,
        logging.INFO,
        "Resolving deploy intent",
        name=intent.base_name,
        cloudfront=intent.enable_cloudfront,
        waf=intent.enable_waf,
        iam_auth=intent.use_iam_auth,
    )

    validator.validate(intent)
    secret = secret_generator.generate(intent, settings=settings)
    plan = ResourceGraphBuilder(settings).build(intent, secret)

    log_with_context(
        logger,
        logging.INFO,
        "Resolved deploy intent",
        descriptors=len(plan),
        shared_secret=plan.shared_secret is not None,
    )
    return plan
