"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_STORAGE_KEY = "icuni-app-storage"


def _default_storage_path() -> Path:
    raw = os.getenv("ICUNI_STORAGE_PATH")
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".icuni" / "storage.json"


class Config(BaseModel):
    """Application configuration."""

    # Local storage
    storage_path: Path = Field(
        default_factory=_default_storage_path,
        description="JSON file holding persisted client state"
    )
    storage_key: str = Field(
        default_factory=lambda: os.getenv("ICUNI_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        description="Namespaced key of the app state inside the storage file"
    )

    # Project API
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("ICUNI_API_BASE_URL", ""),
        description="Base URL of the ICUNI project API"
    )
    api_token: str = Field(
        default_factory=lambda: os.getenv("ICUNI_API_TOKEN", ""),
        description="Bearer token sent with API requests"
    )
    api_timeout: float = Field(
        default_factory=lambda: float(os.getenv("ICUNI_API_TIMEOUT", "30")),
        description="HTTP timeout in seconds"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_api_required(self) -> None:
        """Validate that the project API is configured.

        Raises:
            ValueError: If the API base URL is missing or malformed.
        """
        if not self.api_base_url:
            raise ValueError(
                "Missing required API configuration: ICUNI_API_BASE_URL. "
                "Set the corresponding environment variable."
            )

        if not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"ICUNI_API_BASE_URL must be an http(s) URL. "
                f"Got: {self.api_base_url}"
            )


# Global config instance
config = Config()
