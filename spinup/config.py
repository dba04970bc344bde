"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Step commands
    package_manager: str = "npm"
    install_command: str = "ci"
    build_command: str = "run"
    build_script: str = "build"
    deploy_command: str = "npx"
    deploy_tool: str = "wrangler"
    deploy_action: str = "deploy"

    # Platform credentials (presence-checked only)
    cloudflare_api_token: SecretStr | None = None
    cloudflare_account_id: str | None = None

    # Event forwarding
    deploy_webhook_url: str | None = None
    deploy_webhook_timeout: float = Field(default=10.0, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"
    log_file: str | None = None

    @property
    def missing_credentials(self) -> tuple[str, ...]:
        """Names of credential variables that are not set."""
        missing = []
        token = self.cloudflare_api_token
        if token is None or not token.get_secret_value():
            missing.append("CLOUDFLARE_API_TOKEN")
        if not self.cloudflare_account_id:
            missing.append("CLOUDFLARE_ACCOUNT_ID")
        return tuple(missing)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
