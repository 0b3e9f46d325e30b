"""
Resolver constants.

Allowed retention values, reserved environment keys and fixed lifecycle
parameters.
"""

from typing import Final

# CloudWatch Logs accepts only these retention periods
ALLOWED_RETENTION_DAYS: Final[frozenset[int]] = frozenset({
    1, 3, 5, 7, 14, 30, 60, 90, 120, 150, 180, 365, 400, 545, 731, 1827, 3653,
})

DEFAULT_RETENTION_DAYS: Final[int] = 7
DEFAULT_UNTAGGED_IMAGE_KEEP_COUNT: Final[int] = 3

# Commit-hash tags older than this are expired from the registry
IMAGE_EXPIRY_DAYS: Final[int] = 90
LATEST_TAG: Final[str] = "latest"
DIGIT_TAG_PREFIXES: Final[tuple[str, ...]] = tuple("0123456789")
HEX_LETTER_TAG_PREFIXES: Final[tuple[str, ...]] = tuple("abcdef")

# Reserved Lambda environment keys, always override caller values
EXEC_WRAPPER_ENV_KEY: Final[str] = "AWS_LAMBDA_EXEC_WRAPPER"
PORT_ENV_KEY: Final[str] = "PORT"
ORIGIN_SECRET_ENV_KEY: Final[str] = "ORIGIN_VERIFY_SECRET"

MIN_SECRET_LENGTH: Final[int] = 32
SECRET_SYMBOLS: Final[str] = "-_.~"

# Managed policy attached to the Lambda execution role
LAMBDA_BASIC_EXECUTION_POLICY_ARN: Final[str] = (
    "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
)
GITHUB_OIDC_PROVIDER_HOST: Final[str] = "token.actions.githubusercontent.com"

# CloudFront managed policies for Lambda function URL origins
CACHING_DISABLED_POLICY_ID: Final[str] = "4135ea2d-6df8-44a3-9df3-4b5a84be39ad"
ALL_VIEWER_EXCEPT_HOST_HEADER_POLICY_ID: Final[str] = "b689b0a8-53d0-40ab-baf2-68738e2966ac"

REDACTED: Final[str] = "**********"
