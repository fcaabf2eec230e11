"""
Clients for the external text-generation service.

Everything the pipeline needs from a model is `await generate(prompt, options)`.
Retries and backoff are left to whoever wraps these clients.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

import requests
from google import genai
from google.genai import types as g_types
from loguru import logger

from .constants import DEFAULT_ENDPOINT, DEFAULT_MODEL_NAME, REQUEST_TIMEOUT_SECONDS
from .errors import ConfigError, TranslationServiceError
from .models import GenerationOptions

if TYPE_CHECKING:
    from .config import TranslatorConfig


class TextGenerator(Protocol):
    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        ...


class GeminiGenerator:
    """Asks a Gemini model through the google-genai SDK."""

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL_NAME):
        self._client = genai.Client(api_key=api_key)
        self.model_name = model_name

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        contents = g_types.Content(
                role='user',
                parts=[g_types.Part.from_text(text=prompt)]
        )
        config = g_types.GenerateContentConfig(
                max_output_tokens=options.max_tokens,
                temperature=options.temperature,
        )
        try:
            response = await self._client.aio.models.generate_content(
                    model=self.model_name,
                    contents=contents,
                    config=config,
            )
        except Exception as e:
            logger.error(f"Error communicating with Gemini API: {e}")
            raise TranslationServiceError(f"Gemini API call failed: {e}", original_exception=e)

        text = response.text or ""
        logger.debug("Model response received ({} chars).", len(text))
        return text


class OpenAICompatibleGenerator:
    """Posts to any chat-completions endpoint (OpenAI, Qwen, vLLM, ...)."""

    def __init__(self, api_key: str | None, model_name: str, endpoint: str = DEFAULT_ENDPOINT,
                 timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.model_name = model_name
        self.endpoint = endpoint
        self.timeout = timeout

    def _post(self, prompt: str, options: GenerationOptions) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        data = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
        }
        response = requests.post(self.endpoint, json=data, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"] or ""

    async def generate(self, prompt: str, options: GenerationOptions) -> str:
        try:
            text = await asyncio.to_thread(self._post, prompt, options)
        except (requests.RequestException, KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Error communicating with {self.endpoint}: {e}")
            raise TranslationServiceError(f"Generation call to {self.endpoint} failed: {e}", original_exception=e)
        logger.debug("Model response received ({} chars).", len(text))
        return text


def build_generator(config: TranslatorConfig) -> TextGenerator:
    """Constructs the generation client described by the configuration."""
    match config.provider:
        case "gemini":
            if not config.api_key:
                raise ConfigError("An API key is required for the gemini provider (set LLM_API_KEY).")
            return GeminiGenerator(config.api_key, config.model_name)
        case "openai":
            return OpenAICompatibleGenerator(config.api_key, config.model_name, config.endpoint)
        case _:
            raise ConfigError(f"Unknown generation provider: '{config.provider}'")
