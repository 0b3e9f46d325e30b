"""
Secret material generator.

Creates the header value CloudFront sends to the function URL so the
dashboard can reject requests that bypass the distribution. The value is
drawn from the OS CSPRNG on every call and never derived from the intent.

Dependencies: secrets (stdlib), pydantic
System role: Second stage of resolution
"""

import secrets
import string

from pydantic import SecretStr

from resolver.configs.constants import MIN_SECRET_LENGTH, SECRET_SYMBOLS
from resolver.configs.settings import ResolverSettings, get_settings
from resolver.models.intent import DeployIntent
from resolver.models.secret import SharedSecret
from resolver.observability.logger import get_logger

logger = get_logger(__name__)

CHARACTER_CLASSES: tuple[str, ...] = (
    string.ascii_uppercase,
    string.ascii_lowercase,
    string.digits,
    SECRET_SYMBOLS,
)
ALPHABET = "".join(CHARACTER_CLASSES)


def generate_secret_value(length: int = MIN_SECRET_LENGTH) -> str:
    """
    Draw a random value containing every character class.

    Args:
        length: Number of characters, at least MIN_SECRET_LENGTH

    Returns:
        str: Header-safe random string
    """
    if length < MIN_SECRET_LENGTH:
        raise ValueError(f"Secret length must be at least {MIN_SECRET_LENGTH}, got {length}")

    while True:
        value = "".join(secrets.choice(ALPHABET) for _ in range(length))
        if all(any(ch in cls for ch in value) for cls in CHARACTER_CLASSES):
            return value


def generate(
    intent: DeployIntent,
    settings: ResolverSettings | None = None,
    length: int | None = None,
) -> SharedSecret | None:
    """
    Generate the origin verification secret if the intent needs one.

    Only the header-based scheme (CloudFront without IAM auth) uses a
    shared secret; IAM-signed origins and direct function URLs get None.

    Args:
        intent: Validated deploy intent
        settings: Resolver settings, defaults to get_settings()
        length: Override for the configured secret length

    Returns:
        SharedSecret | None: Fresh secret, or None when not needed
    """
    if not intent.uses_origin_secret:
        return None

    settings = settings or get_settings()
    secret = SharedSecret(
        value=SecretStr(generate_secret_value(length or settings.secret_length)),
        header_name=settings.origin_verify_header,
    )
    logger.info("Generated origin verification secret for header %s", secret.header_name)
    return secret
