"""
Deploy plan resolver CLI.

Usage:
    python -m resolver.scripts.resolve_plan resolve --intent-file intent.json
    python -m resolver.scripts.resolve_plan resolve --enable-cloudfront --use-iam-auth
    deploy-resolver resolve --enable-cloudfront --enable-waf \
        --allowed-ip-cidr 203.0.113.0/24 --machine --output plan.json

Purpose:
- Load a DeployIntent from a JSON file and/or command-line flags
- Validate and resolve it into a plan
- Print the redacted plan, or the machine document with --machine
- Exit 0 on success, 2 on an invalid intent, 1 on internal errors

Dependencies: pydantic
System role: Command-line surface for the resolver
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from resolver.configs.settings import get_settings
from resolver.core import validator
from resolver.core.exceptions import (
    ConstraintViolation,
    DeployResolverError,
    InternalConsistencyError,
)
from resolver.core.plan_emitter import emit
from resolver.core.resolver import resolve
from resolver.models.intent import DeployIntent
from resolver.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INTERNAL = 1
EXIT_INVALID = 2

# argparse dest -> DeployIntent field
SCALAR_FLAGS = (
    "enable_cloudfront",
    "enable_waf",
    "use_iam_auth",
    "retention_days",
    "untagged_image_keep_count",
    "project_name",
    "environment",
    "image_tag",
    "memory_size",
    "timeout",
    "architecture",
    "price_class",
    "github_repository",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploy-resolver",
        description="Resolve a metrics dashboard deploy intent into a resource plan.",
    )
    parser.add_argument("--log-level", default=None, help="Override DEPLOY_RESOLVER_LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)

    resolve_cmd = commands.add_parser("resolve", help="Validate and resolve an intent")
    resolve_cmd.add_argument("--intent-file", type=Path, help="JSON file with DeployIntent fields")

    flags = resolve_cmd.add_argument_group("intent overrides")
    flags.add_argument("--enable-cloudfront", action=argparse.BooleanOptionalAction, default=None)
    flags.add_argument("--enable-waf", action=argparse.BooleanOptionalAction, default=None)
    flags.add_argument("--use-iam-auth", action=argparse.BooleanOptionalAction, default=None)
    flags.add_argument(
        "--allowed-ip-cidr", action="append", dest="allowed_ip_cidrs", metavar="CIDR",
        help="IPv4 block allowed through the WAF (repeatable)",
    )
    flags.add_argument("--retention-days", type=int)
    flags.add_argument("--untagged-image-keep-count", type=int)
    flags.add_argument(
        "--env", action="append", dest="environment_variables", metavar="KEY=VALUE",
        help="Function environment variable (repeatable)",
    )
    flags.add_argument("--project-name")
    flags.add_argument("--environment")
    flags.add_argument("--image-tag")
    flags.add_argument("--memory-size", type=int)
    flags.add_argument("--timeout", type=int)
    flags.add_argument("--architecture", choices=["x86_64", "arm64"])
    flags.add_argument("--price-class")
    flags.add_argument("--github-repository", metavar="OWNER/REPO")

    output = resolve_cmd.add_argument_group("output")
    output.add_argument(
        "--machine", action="store_true",
        help="Print the machine document (includes secret values)",
    )
    output.add_argument("--output", type=Path, help="Write the machine document to this file")
    output.add_argument(
        "--all-violations", action="store_true",
        help="On failure, list every violated constraint instead of the first",
    )
    return parser


def _parse_env_pairs(pairs: list[str]) -> dict[str, str]:
    env = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        env[key] = value
    return env


def load_intent(args: argparse.Namespace) -> DeployIntent:
    """
    Build a DeployIntent from the intent file overlaid with flags.

    Raises:
        ValueError: If the file or an --env pair is malformed
        pydantic.ValidationError: If field types are invalid
    """
    data: dict[str, Any] = {}
    if args.intent_file:
        data = json.loads(args.intent_file.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{args.intent_file} must contain a JSON object")

    for name in SCALAR_FLAGS:
        value = getattr(args, name)
        if value is not None:
            data[name] = value
    if args.allowed_ip_cidrs:
        data["allowed_ip_cidrs"] = [*data.get("allowed_ip_cidrs", []), *args.allowed_ip_cidrs]
    if args.environment_variables:
        data["environment_variables"] = {
            **data.get("environment_variables", {}),
            **_parse_env_pairs(args.environment_variables),
        }

    return DeployIntent.model_validate(data)


def write_private(path: Path, text: str) -> None:
    """Write text to path readable by the owner only; the plan carries the origin secret."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # The mode argument only applies on creation
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)


def run_resolve(args: argparse.Namespace) -> int:
    try:
        intent = load_intent(args)
    except (ValueError, OSError) as e:
        # pydantic's ValidationError is a ValueError
        print(f"error: invalid intent: {e}", file=sys.stderr)
        return EXIT_INVALID
    except DeployResolverError as e:
        logger.error("Cannot load intent: %s", e)
        return EXIT_INTERNAL

    try:
        plan = resolve(intent)
    except ConstraintViolation as e:
        violations = validator.collect_violations(intent) if args.all_violations else [e]
        for violation in violations:
            print(f"error: {violation.constraint}: {violation.message}", file=sys.stderr)
        return EXIT_INVALID
    except InternalConsistencyError as e:
        logger.error("Internal resolver error: %s", e)
        return EXIT_INTERNAL
    except DeployResolverError as e:
        logger.error("Resolution failed: %s", e)
        return EXIT_INTERNAL

    serialized = emit(plan)
    if args.output:
        write_private(args.output, serialized.to_json() + "\n")
        logger.info("Wrote machine plan to %s", args.output)

    print(serialized.to_json() if args.machine else serialized.render())
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)

    if args.command == "resolve":
        return run_resolve(args)

    parser.error(f"Unknown command: {args.command}")
    return EXIT_INTERNAL


def run() -> None:
    """Console-script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
