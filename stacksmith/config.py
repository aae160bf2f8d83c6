"""Runtime configuration: env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
STACKSMITH_* environment variables; CLI flags take precedence over both.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_NODE_URL = "http://localhost:20443"


class DeployConfig(BaseSettings):
    """Deployment configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export STACKSMITH_NODE_URL=http://stacks-node:20443
        export STACKSMITH_LOG_LEVEL=DEBUG
        export STACKSMITH_REQUEST_TIMEOUT_SECONDS=10

    Or via .env file::

        STACKSMITH_ENVIRONMENT=testnet
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STACKSMITH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Target
    environment: str = "mocknet"
    node_url: str = DEFAULT_NODE_URL

    # Observability
    log_level: str = "INFO"

    # Network
    request_timeout_seconds: float = 30.0

    # Transactions
    base_fee: int = 200
    deployer_account: str = "deployer"
