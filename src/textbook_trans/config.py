from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    API_KEY_ENV,
    DEFAULT_DOMAIN,
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL_NAME,
    DEFAULT_PROVIDER,
    ENDPOINT_ENV,
    MODEL_ENV,
    PROVIDER_ENV,
    TRANSLATION_MAX_TOKENS,
    TRANSLATION_TEMPERATURE,
)
from .enums import Language
from .errors import ConfigError
from .models import GenerationOptions


class TranslatorConfig(BaseModel):
    """Settings of one translation pipeline."""
    provider: Literal["gemini", "openai"] = DEFAULT_PROVIDER
    model_name: str = DEFAULT_MODEL_NAME
    endpoint: str = DEFAULT_ENDPOINT
    api_key: Optional[str] = Field(default=None, exclude=True)
    temperature: float = Field(default=TRANSLATION_TEMPERATURE, ge=0.0, le=1.0)
    max_tokens: int = Field(default=TRANSLATION_MAX_TOKENS, gt=0)
    source_language: Language = Language.ENGLISH
    target_language: Language = Language.URDU
    domain: str = DEFAULT_DOMAIN
    preserve_technical_terms: bool = True
    # run the fields of a chapter with asyncio.gather instead of one by one
    concurrent: bool = False
    dictionary_path: Optional[Path] = None

    def generation_options(self) -> GenerationOptions:
        return GenerationOptions(max_tokens=self.max_tokens, temperature=self.temperature)

    @classmethod
    def from_env(cls, **overrides) -> TranslatorConfig:
        """Reads the service settings from the environment; keyword arguments win."""
        values: dict = {}
        api_key = os.getenv(API_KEY_ENV)
        if api_key:
            values["api_key"] = api_key
        else:
            logger.warning(f"{API_KEY_ENV} environment variable not set. Translation will fail.")
        for env_name, field_name in ((MODEL_ENV, "model_name"), (PROVIDER_ENV, "provider"), (ENDPOINT_ENV, "endpoint")):
            value = os.getenv(env_name)
            if value:
                values[field_name] = value
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid translator configuration: {e}", original_exception=e)


def load_config(config_file_path: Path) -> TranslatorConfig:
    """Loads translator settings from a JSON file; the API key still comes from the environment."""
    if not config_file_path.is_file():
        raise ConfigError(f"Config file not found: {config_file_path}")
    try:
        contents = config_file_path.read_text(encoding="utf-8")
        config = TranslatorConfig.model_validate_json(contents)
    except IOError as e:
        raise ConfigError(f"IO error reading config from {config_file_path}: {e}", original_exception=e)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_file_path}: {e}", original_exception=e)

    api_key = os.getenv(API_KEY_ENV)
    if api_key and config.api_key is None:
        config = config.model_copy(update={"api_key": api_key})
    return config


def write_config(config_file_path: Path, config: TranslatorConfig) -> None:
    """Writes the settings to a JSON file. The API key is never written."""
    try:
        config_file_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    except IOError as e:
        raise ConfigError(f"IO error writing config to {config_file_path}: {e}", original_exception=e)
