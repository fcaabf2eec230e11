from __future__ import annotations

import json
import re

from loguru import logger
from pydantic import ValidationError

from .constants import VALIDATION_MAX_TOKENS, VALIDATION_TEMPERATURE
from .enums import Language
from .errors import TranslationServiceError
from .generators import TextGenerator
from .helpers import extract_json_from_response
from .models import GenerationOptions, TranslationAssessment
from .prompts import validation_prompt


def build_validation_prompt(original: str, translated: str, source_language: Language, target_language: Language) -> str:
    prompt = validation_prompt.replace("[SOURCE_LANGUAGE]", source_language.get_display_name())
    prompt = prompt.replace("[TARGET_LANGUAGE]", target_language.get_display_name())
    # single pass so neither text can expand the other placeholder
    texts = {"ORIGINAL": original, "TRANSLATION": translated}
    return re.sub(r"\[(ORIGINAL|TRANSLATION)\]", lambda m: texts[m.group(1)], prompt)


def parse_assessment(raw: str) -> TranslationAssessment:
    try:
        return TranslationAssessment.model_validate(json.loads(extract_json_from_response(raw)))
    except (json.JSONDecodeError, ValidationError) as e:
        raise TranslationServiceError(f"Validation reply has an unexpected shape: {e}", original_exception=e)


class TranslationValidator:
    """Asks the generation service to grade an existing translation."""

    def __init__(self, generator: TextGenerator, options: GenerationOptions | None = None):
        self._generator = generator
        self._options = options or GenerationOptions(max_tokens=VALIDATION_MAX_TOKENS, temperature=VALIDATION_TEMPERATURE)

    async def validate(
        self,
        original: str,
        translated: str,
        source_language: Language = Language.ENGLISH,
        target_language: Language = Language.URDU,
    ) -> TranslationAssessment:
        prompt = build_validation_prompt(original, translated, source_language, target_language)
        try:
            raw = await self._generator.generate(prompt, self._options)
        except TranslationServiceError:
            raise
        except Exception as e:
            logger.error(f"Error validating translation: {e}")
            raise TranslationServiceError(f"Validation call failed: {e}", original_exception=e)
        assessment = parse_assessment(raw)
        logger.debug("Translation assessed, overall score {}", assessment.overall_score)
        return assessment
