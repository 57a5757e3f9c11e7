"""Configuration management for the control-plane API client."""

import os

from tailnet_routes.version import __version__

DEFAULT_BASE_URL = "https://api.tailscale.com"


class Settings:
    """Client settings with environment variable support."""

    def __init__(self):
        self.base_url: str = os.getenv("TAILSCALE_BASE_URL", DEFAULT_BASE_URL)
        self.api_key: str = os.getenv("TAILSCALE_API_KEY", "")
        self.timeout: float = float(os.getenv("TAILSCALE_TIMEOUT", "30"))
        self.user_agent: str = os.getenv("TAILSCALE_USER_AGENT", f"tailnet-routes/{__version__}")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __repr__(self) -> str:
        # api_key is never included
        return (
            f"Settings(base_url={self.base_url}, timeout={self.timeout}, "
            f"user_agent={self.user_agent}, log_level={self.log_level})"
        )


settings = Settings()
