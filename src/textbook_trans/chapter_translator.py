from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterator, List, Optional

from loguru import logger

from .code_comments import extract_comments, splice_comments
from .config import TranslatorConfig
from .constants import DEFAULT_DOMAIN
from .content_translator import ContentTranslator
from .enums import ContentType, Language
from .generators import TextGenerator, build_generator
from .models import (
    ChapterRecord,
    CodeExample,
    Diagram,
    QualityMetrics,
    TerminologyEntry,
    TranslatedChapter,
    TranslationRequest,
    TranslationResult,
)
from .terminology import TerminologyDictionary, default_dictionary, load_dictionary
from .translation_cache import InMemoryTranslationCache
from .translator import TranslationRequestor

# keys owned by TranslatedChapter, never copied over from the source record
_RESERVED_KEYS = {"targetLanguage", "target_language", "qualityMetrics", "quality_metrics", "terminologyUsed", "terminology_used"}


@dataclass(frozen=True)
class FieldTask:
    field_name: str
    content: str
    content_type: ContentType


class ChapterTranslator:
    """
    Translates every natural-language field of a ChapterRecord.

    The chapter is planned as an ordered list of independent field tasks:
    title, learning objectives, body, diagram descriptions, then code comments.
    Tasks run one after another by default; with `concurrent=True` they run
    through asyncio.gather. Either way the results are joined in plan order.

    Failure policy is fail-fast: the first error propagates and no partial
    chapter is returned.
    """

    def __init__(
        self,
        content_translator: ContentTranslator,
        source_language: Language = Language.ENGLISH,
        target_language: Language = Language.URDU,
        domain: str = DEFAULT_DOMAIN,
        preserve_technical_terms: bool = True,
        concurrent: bool = False,
    ):
        self._content_translator = content_translator
        self.source_language = source_language
        self.target_language = target_language
        self.domain = domain
        self.preserve_technical_terms = preserve_technical_terms
        self.concurrent = concurrent

    def plan(self, chapter: ChapterRecord) -> List[FieldTask]:
        tasks = [FieldTask("title", chapter.title, ContentType.Title)]
        for i, objective in enumerate(chapter.learning_objectives):
            tasks.append(FieldTask(f"learning_objectives[{i}]", objective, ContentType.Prose))
        tasks.append(FieldTask("content", chapter.content, ContentType.Prose))
        for i, diagram in enumerate(chapter.diagrams):
            if diagram.description:
                tasks.append(FieldTask(f"diagrams[{i}].description", diagram.description, ContentType.Caption))
        for i, example in enumerate(chapter.code_examples):
            for j, comment in enumerate(extract_comments(example.code, example.language)):
                tasks.append(FieldTask(f"code_examples[{i}].comments[{j}]", comment.core_text, ContentType.Comment))
        return tasks

    async def translate_field(self, task: FieldTask) -> TranslationResult:
        request = TranslationRequest(
            source_language=self.source_language,
            target_language=self.target_language,
            content=task.content,
            content_type=task.content_type,
            preserve_technical_terms=self.preserve_technical_terms,
            domain=self.domain,
        )
        logger.debug("Translating {} ...", task.field_name)
        return await self._content_translator.translate_content(request, task.field_name)

    async def _run(self, tasks: List[FieldTask]) -> List[TranslationResult]:
        if not self.concurrent:
            results = []
            for task in tasks:
                results.append(await self.translate_field(task))
            return results

        futures = [asyncio.ensure_future(self.translate_field(task)) for task in tasks]
        try:
            return list(await asyncio.gather(*futures))
        except Exception:
            for future in futures:
                future.cancel()
            raise

    async def translate_chapter(self, chapter: ChapterRecord) -> TranslatedChapter:
        tasks = self.plan(chapter)
        logger.info("Translating chapter '{}' ({} field(s), {} -> {})", chapter.title, len(tasks), self.source_language, self.target_language)
        results = await self._run(tasks)
        translated = self._assemble(chapter, iter(results))
        logger.info("Chapter '{}' translated, composite quality {:.2f}", chapter.title, translated.quality_metrics.composite)
        return translated

    def _assemble(self, chapter: ChapterRecord, results: Iterator[TranslationResult]) -> TranslatedChapter:
        # consumes the results in exactly the order plan() produced the tasks
        terminology: dict[str, TerminologyEntry] = {}

        def _next() -> TranslationResult:
            result = next(results)
            for entry in result.terminology_used:
                terminology.setdefault(entry.source_term.lower(), entry)
            return result

        title = _next()
        objectives = [_next().translated_content for _ in chapter.learning_objectives]
        body = _next()

        diagrams: List[Diagram] = []
        for diagram in chapter.diagrams:
            if diagram.description:
                diagrams.append(diagram.model_copy(update={"description": _next().translated_content}))
            else:
                diagrams.append(diagram)

        code_examples: List[CodeExample] = []
        for example in chapter.code_examples:
            comments = extract_comments(example.code, example.language)
            if not comments:
                code_examples.append(example)
                continue
            translated_cores = [_next().translated_content for _ in comments]
            code_examples.append(example.model_copy(update={"code": splice_comments(example.code, comments, translated_cores)}))

        extras = {k: v for k, v in (chapter.model_extra or {}).items() if k not in _RESERVED_KEYS}
        return TranslatedChapter(
            **extras,
            title=title.translated_content,
            content=body.translated_content,
            learning_objectives=objectives,
            diagrams=diagrams,
            code_examples=code_examples,
            target_language=self.target_language,
            quality_metrics=composite_quality(title, body),
            terminology_used=list(terminology.values()),
        )


def composite_quality(title: TranslationResult, body: TranslationResult) -> QualityMetrics:
    """Arithmetic mean of the title and body scores; other fields do not count."""
    return QualityMetrics(
        title_quality=title.quality_score,
        content_quality=body.quality_score,
        composite=(title.quality_score + body.quality_score) / 2,
    )


def build_content_translator(
    config: TranslatorConfig,
    dictionary: Optional[TerminologyDictionary] = None,
    generator: Optional[TextGenerator] = None,
) -> ContentTranslator:
    """Constructs the default single-field translator for a configuration."""
    if dictionary is None:
        if config.dictionary_path is not None:
            dictionary = load_dictionary(config.dictionary_path, config.source_language, config.target_language)
        else:
            dictionary = default_dictionary()
    if generator is None:
        generator = build_generator(config)
    requestor = TranslationRequestor(generator, config.generation_options())
    return ContentTranslator(requestor, dictionary, InMemoryTranslationCache())


def build_chapter_translator(
    config: TranslatorConfig,
    dictionary: Optional[TerminologyDictionary] = None,
    generator: Optional[TextGenerator] = None,
) -> ChapterTranslator:
    """Constructs the default chapter translator for a configuration."""
    content_translator = build_content_translator(config, dictionary, generator)
    return ChapterTranslator(
        content_translator,
        source_language=config.source_language,
        target_language=config.target_language,
        domain=config.domain,
        preserve_technical_terms=config.preserve_technical_terms,
        concurrent=config.concurrent,
    )
