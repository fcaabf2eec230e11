from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .helpers import calculate_checksum
from .models import TerminologyEntry, TranslationRequest, TranslationResult
from .span_protector import ProtectedSpan, find_tokens, protect, restore
from .terminology import TerminologyDictionary
from .translation_cache import TranslationCache
from .translator import TranslationRequestor


def is_whitespace(text: str) -> bool:
    return not text or text.isspace()


@dataclass
class PreparedContent:
    """Text ready to be sent: spans tokenized, then terms substituted."""
    protected_text: str
    # protected text before terminology substitution
    source_text: str
    spans: List[ProtectedSpan]
    vocabulary: List[TerminologyEntry] = field(default_factory=list)

    def contains_ph_only(self) -> bool:
        """True when nothing but placeholders and whitespace is left to translate."""
        remainder = self.protected_text
        for token in find_tokens(remainder):
            remainder = remainder.replace(token, "")
        return is_whitespace(remainder)


def prepare_for_translation(content: str, dictionary: TerminologyDictionary | None, preserve_terms: bool = True) -> PreparedContent:
    """
    Protects the spans of *content* and then, in preserve-terms mode,
    substitutes dictionary terms in what is left. Substitution never runs
    before protection, so code and equations cannot be touched by it.
    """
    stripped, spans = protect(content)
    if not preserve_terms or dictionary is None:
        return PreparedContent(protected_text=stripped, source_text=stripped, spans=spans)
    substituted, vocabulary = dictionary.substitute(stripped)
    return PreparedContent(protected_text=substituted, source_text=stripped, spans=spans, vocabulary=vocabulary)


class ContentTranslator:
    """Runs protect -> substitute -> translate -> restore -> reconcile on a single field."""

    def __init__(
        self,
        requestor: TranslationRequestor,
        dictionary: TerminologyDictionary | None = None,
        cache: TranslationCache | None = None,
    ):
        self._requestor = requestor
        self._dictionary = dictionary
        self._cache = cache

    @property
    def dictionary(self) -> TerminologyDictionary | None:
        return self._dictionary

    async def translate_content(self, request: TranslationRequest, field_name: Optional[str] = None) -> TranslationResult:
        content = request.content
        if is_whitespace(content):
            return TranslationResult(translated_content=content, quality_score=1.0)

        prepared = prepare_for_translation(content, self._dictionary, request.preserve_technical_terms)
        if prepared.contains_ph_only():
            logger.debug("'{}' holds protected spans only, skipping the model call", field_name)
            return TranslationResult(translated_content=content, quality_score=1.0)

        result = await self._fetch_or_translate(request, prepared)
        translated = restore(result.translated_content, prepared.spans, field_name)

        terminology: List[TerminologyEntry] = []
        if self._dictionary is not None:
            terminology = self._dictionary.reconcile(prepared.source_text, translated)

        logger.debug("Translated '{}' ({} span(s), quality {})", field_name, len(prepared.spans), result.quality_score)
        return result.model_copy(update={"translated_content": translated, "terminology_used": terminology})

    async def _fetch_or_translate(self, request: TranslationRequest, prepared: PreparedContent) -> TranslationResult:
        src_checksum = calculate_checksum(prepared.protected_text)
        if self._cache is not None:
            cached = self._cache.lookup(
                src_checksum, request.source_language, request.target_language, request.content_type, request.domain)
            if cached is not None:
                return cached

        result = await self._requestor.request_translation(
            prepared.protected_text,
            request.source_language,
            request.target_language,
            request.content_type,
            request.domain,
            prepared.vocabulary,
        )
        if self._cache is not None:
            self._cache.persist(
                src_checksum, request.source_language, request.target_language, request.content_type, request.domain, result)
        return result
