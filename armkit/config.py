"""armkit configuration — loads from environment and an optional .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

from . import __version__


class Settings(BaseSettings):
    """Application settings — populated from ARMKIT_* env vars or .env file."""

    # App
    app_version: str = __version__
    # Log DEBUG records to the CLI log file instead of INFO and above
    debug: bool = False

    # Azure Resource Manager
    management_endpoint: str = "https://management.azure.com"
    subscription_id: str = ""

    # Auth: set ARMKIT_ACCESS_TOKEN to send a bearer token with every request
    access_token: Optional[str] = None

    # Transport
    request_timeout: float = 30.0
    retry_attempts: int = 3
    retry_delay: float = 1.0

    # Long-running operations
    poll_interval: float = 10.0
    poll_timeout: float = 900.0

    # Paths
    log_dir: Path = Path.home() / ".armkit" / "logs"

    model_config = {"env_prefix": "ARMKIT_", "env_file": ".env"}


settings = Settings()
