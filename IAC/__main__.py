"""
Pulumi program entry point for the metrics dashboard deployment.

1. Load the deploy intent from stack config
2. Resolve it into a plan (validation, origin secret, resource graph)
3. Apply the plan as component resources
4. Export stack outputs
"""

import pulumi

from resolver.configs.settings import get_settings
from resolver.core.resolver import resolve
from resolver.observability.logger import configure_logging
from IAC.configs.environment import get_intent
from IAC.plan_applier import PlanApplier
from IAC.utils.naming import ResourceNamer


def main() -> None:
    """Deploy the metrics dashboard."""
    configure_logging(get_settings().log_level)
    intent = get_intent()
    plan = resolve(intent)
    pulumi.log.info(f"Resolved {len(plan)} resources for {intent.base_name}")

    applier = PlanApplier(plan, intent.environment, ResourceNamer(intent.base_name))
    outputs = applier.apply()

    for key, value in outputs.exports().items():
        pulumi.export(key, value)


main()
