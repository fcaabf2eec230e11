from __future__ import annotations

import json
from typing import Iterable, Optional

from loguru import logger
from pydantic import ValidationError

from .constants import DEFAULT_DOMAIN
from .enums import ContentType, Language
from .errors import TranslationServiceError
from .generators import TextGenerator
from .helpers import extract_json_from_response
from .models import GenerationOptions, TerminologyEntry, TranslationResult
from .prompts import translation_prompt


def get_default_prompt_text() -> str:
    """Returns the default prompt"""
    return translation_prompt


def _prepare_prompt_for_content_type(prompt_template: str, content_type: ContentType) -> str:
    """
    Replaces the content type placeholder with the given content type
    """
    return prompt_template.replace("[CONTENT_TYPE]", str(content_type))

def _prepare_prompt_for_domain(prompt_template: str, domain: str) -> str:
    return prompt_template.replace("[DOMAIN]", domain)

def _prepare_prompt_for_language(prompt_template: str, target_language: Language, source_language: Language | None = None) -> str:
    """Replaces the language placeholders in the prompt."""
    if source_language is not None:
        prompt_template = prompt_template.replace("[SOURCE_LANGUAGE]", source_language.get_display_name())
    return prompt_template.replace("[TARGET_LANGUAGE]", target_language.get_display_name())

def _prepare_prompt_for_vocab_list(prompt: str, vocabulary: Iterable[TerminologyEntry] | None) -> str:
    """Replaces the vocabulary placeholder in the prompt."""
    str_to_put = ""
    if vocabulary is not None:
        str_to_put = "".join(f"{entry.source_term}={entry.target_term}\n" for entry in vocabulary)
    return prompt.replace("[CUSTOM_VOCABULARY]", str_to_put)

def finalize_prompt(prompt: str, contents_to_translate: str) -> str:
    # the content goes in last so that brackets inside it are never taken for placeholders
    return prompt.replace("[CONTENT]", contents_to_translate)


def build_translation_prompt(
    content: str,
    source_language: Language,
    target_language: Language,
    content_type: ContentType,
    domain: str = DEFAULT_DOMAIN,
    vocabulary: Iterable[TerminologyEntry] | None = None,
    prompt_template: str | None = None,
) -> str:
    prompt = prompt_template if prompt_template is not None else get_default_prompt_text()
    prompt = _prepare_prompt_for_language(prompt, target_language, source_language)
    prompt = _prepare_prompt_for_content_type(prompt, content_type)
    prompt = _prepare_prompt_for_domain(prompt, domain)
    prompt = _prepare_prompt_for_vocab_list(prompt, vocabulary)
    return finalize_prompt(prompt, content)


def parse_translation_result(raw: str) -> TranslationResult:
    """
    Parses the JSON reply of the service into a TranslationResult.
    Raises TranslationServiceError if the reply does not have the expected shape.
    """
    payload = extract_json_from_response(raw)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise TranslationServiceError(f"Translation reply is not valid JSON: {e}", original_exception=e)
    if not isinstance(data, dict):
        raise TranslationServiceError("Translation reply is not a JSON object")
    # the pipeline owns the terminology report
    data.pop("terminologyUsed", None)
    data.pop("terminology_used", None)
    try:
        return TranslationResult.model_validate(data)
    except ValidationError as e:
        raise TranslationServiceError(f"Translation reply has an unexpected shape: {e}", original_exception=e)


class TranslationRequestor:
    """Builds the translation instruction and hands it to the generation service."""

    def __init__(self, generator: TextGenerator, options: Optional[GenerationOptions] = None, prompt_template: str | None = None):
        self._generator = generator
        self._options = options or GenerationOptions()
        self._prompt_template = prompt_template

    async def translate(
        self,
        stripped_content: str,
        source_language: Language,
        target_language: Language,
        content_type: ContentType,
        domain: str = DEFAULT_DOMAIN,
        vocabulary: Iterable[TerminologyEntry] | None = None,
    ) -> str:
        """
        Sends one translation instruction and returns the raw reply.
        No retries: any failure of the service is surfaced as TranslationServiceError.
        """
        prompt = build_translation_prompt(
            stripped_content, source_language, target_language, content_type, domain, vocabulary, self._prompt_template)
        logger.trace("Translation prompt: {}", prompt)
        try:
            return await self._generator.generate(prompt, self._options)
        except TranslationServiceError:
            raise
        except Exception as e:
            logger.error(f"Text generation failed: {e}")
            raise TranslationServiceError(f"Text generation failed: {e}", original_exception=e)

    async def request_translation(
        self,
        stripped_content: str,
        source_language: Language,
        target_language: Language,
        content_type: ContentType,
        domain: str = DEFAULT_DOMAIN,
        vocabulary: Iterable[TerminologyEntry] | None = None,
    ) -> TranslationResult:
        raw = await self.translate(stripped_content, source_language, target_language, content_type, domain, vocabulary)
        return parse_translation_result(raw)
