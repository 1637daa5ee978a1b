"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
SigningSecret = Annotated[str, Field(min_length=32)]
BcryptRounds = Annotated[int, Field(ge=4, le=31)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    token_signing_secret: SigningSecret = Field(validation_alias="TOKEN_SIGNING_SECRET")
    account_link_base_url: HttpUrl = Field(validation_alias="ACCOUNT_LINK_BASE_URL")
    token_issuer: NonEmptyStr = Field(
        default="credential-lifecycle",
        validation_alias="TOKEN_ISSUER",
    )
    access_token_ttl_seconds: PositiveInt = Field(
        default=3600,
        validation_alias="ACCESS_TOKEN_TTL_SECONDS",
    )
    account_token_ttl_seconds: PositiveInt | None = Field(
        default=None,
        validation_alias="ACCOUNT_TOKEN_TTL_SECONDS",
    )
    bcrypt_rounds: BcryptRounds = Field(default=12, validation_alias="BCRYPT_ROUNDS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
