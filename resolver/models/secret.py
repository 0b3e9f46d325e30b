"""
Shared origin verification secret.

Dependencies: pydantic
System role: Sensitive value shared by the CDN origin header and the function environment
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from resolver.configs.constants import ORIGIN_SECRET_ENV_KEY


class SharedSecret(BaseModel):
    """
    Ephemeral secret that proves a request came through CloudFront.

    The value is a SecretStr so repr(), str() and logging never show it;
    only get_secret_value() does.
    """

    model_config = ConfigDict(frozen=True)

    value: SecretStr
    header_name: str = Field(default="X-Origin-Verify")
    env_key: str = Field(default=ORIGIN_SECRET_ENV_KEY)
