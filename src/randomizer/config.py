"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Short enough that a rotated Slack token takes effect within a couple of
# minutes, long enough that the remote lookup stays off the hot path.
DEFAULT_TOKEN_TTL_SECONDS = 120.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    command_name: str = Field(alias="COMMAND_NAME", default="/randomize")

    slack_token: str = Field(alias="SLACK_TOKEN", default="")
    slack_token_secret_name: str = Field(alias="SLACK_TOKEN_SECRET_NAME", default="")
    slack_token_ttl_seconds: float = Field(
        alias="SLACK_TOKEN_TTL_SECONDS", default=DEFAULT_TOKEN_TTL_SECONDS
    )

    vault_addr: str = Field(alias="VAULT_ADDR", default="http://127.0.0.1:8200")
    vault_token: str = Field(alias="VAULT_TOKEN", default="")
    vault_mount: str = Field(alias="VAULT_MOUNT", default="secret")
    vault_field: str = Field(alias="VAULT_FIELD", default="value")
    # Half of the 3-second response window Slack gives slash commands.
    vault_timeout_seconds: float = Field(alias="VAULT_TIMEOUT_SECONDS", default=1.5)

    store_backend: str = Field(alias="STORE_BACKEND", default="sqlite")
    app_db: str = Field(alias="APP_DB", default="/tmp/randomizer.db")

    command_timeout_seconds: float = Field(alias="COMMAND_TIMEOUT_SECONDS", default=2.5)
    rate_limit_commands_per_minute: int = Field(
        alias="RATE_LIMIT_COMMANDS_PER_MINUTE", default=120
    )


def validate_settings_for_env(settings: Settings) -> None:
    if settings.app_env != "prod":
        return

    missing: list[str] = []
    if not settings.slack_token.strip() and not settings.slack_token_secret_name.strip():
        missing.append("SLACK_TOKEN or SLACK_TOKEN_SECRET_NAME")
    if not settings.slack_token.strip() and settings.slack_token_secret_name.strip():
        if not settings.vault_token.strip():
            missing.append("VAULT_TOKEN")
        if not settings.vault_addr.startswith("https://"):
            missing.append("VAULT_ADDR(https required)")
    if settings.store_backend == "sqlite" and not settings.app_db.startswith("/"):
        missing.append("APP_DB(absolute path required)")
    if settings.store_backend == "memory":
        missing.append("STORE_BACKEND(memory is not durable)")

    if missing:
        keys = ", ".join(sorted(set(missing)))
        raise ValueError(f"invalid production configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
