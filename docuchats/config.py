"""Shared settings for OpenAI-compatible providers.

Chat and speech talk to providers with the same shape of credentials but may
point at different services, so each reads its own ``<PREFIX>_API_KEY`` and
``<PREFIX>_BASE_URL`` and falls back to ``OPENAI_API_KEY``.
"""

import os
from typing import Any, ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class ProviderConfig(BaseModel):
    """Credentials for an OpenAI-compatible API.

    Subclasses set ``env_prefix`` to choose which variables they read.

    Attributes:
        api_key: API key for the provider.
        base_url: API base URL (None for OpenAI default).
    """

    env_prefix: ClassVar[str] = "LLM"

    api_key: str = ""
    base_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def read_environment(cls, data: Any) -> Any:
        """Fill credentials the caller left out from the environment."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "api_key" not in data:
            data["api_key"] = os.getenv(
                f"{cls.env_prefix}_API_KEY", os.getenv("OPENAI_API_KEY", "")
            )
        if "base_url" not in data:
            data["base_url"] = os.getenv(f"{cls.env_prefix}_BASE_URL") or None
        return data

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                f"API key required. Set {cls.env_prefix}_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()
