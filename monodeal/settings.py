"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for:
- the LLM move-suggestion service (Ollama, vLLM, OpenAI-compatible endpoints)
- pacing of the asynchronous game runner

Rules constants live in `monodeal.game.config.GameConfig`.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Backends serving an OpenAI-compatible chat completions endpoint."""

    OLLAMA = "ollama"
    VLLM = "vllm"
    OPENAI = "openai"


# Local servers have a well-known address; hosted ones must be configured
_LOCAL_BASE_URLS = {
    LLMProvider.OLLAMA: "http://localhost:11434/v1",
    LLMProvider.VLLM: "http://localhost:8000/v1",
}


class LLMSettings(BaseSettings):
    """
    Move-suggestion service used by `LLMAgent`.

    Read from LLM_PROVIDER, LLM_BASE_URL, LLM_MODEL, LLM_API_KEY,
    LLM_TIMEOUT_SECONDS and LLM_MAX_TOKENS.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="LLM_",
    )

    provider: LLMProvider = LLMProvider.OLLAMA
    base_url: Optional[str] = Field(default=None, validate_default=True)
    model: str = "gemma3:4b"
    api_key: Optional[SecretStr] = None
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_tokens: int = Field(default=512, gt=0)

    @field_validator("base_url", mode="before")
    @classmethod
    def default_base_url(cls, value: Optional[str], info):
        """Fill in the local server address when none is given."""
        if value:
            return value
        provider = info.data.get("provider")
        return _LOCAL_BASE_URLS.get(provider)


class RunnerSettings(BaseSettings):
    """
    Pacing for the asynchronous game runner.

    Environment variables (prefix: RUNNER_):
        RUNNER_MOVE_DELAY_MS        - Cooldown between automated moves (default: 1500)
        RUNNER_COUNTER_DELAY_MS     - Delay before an automated counter-play answer (default: 2000)
        RUNNER_START_TURN_DELAY_MS  - Delay before a turn's draw (default: 800)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="RUNNER_",
    )

    move_delay_ms: int = Field(default=1500, ge=0)
    counter_delay_ms: int = Field(default=2000, ge=0)
    start_turn_delay_ms: int = Field(default=800, ge=0)


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Return cached LLM settings instance."""
    return LLMSettings()


@lru_cache
def get_runner_settings() -> RunnerSettings:
    """Return cached runner settings instance."""
    return RunnerSettings()
