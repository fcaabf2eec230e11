import asyncio
import json
import re

import pytest

from textbook_trans.chapter_translator import ChapterTranslator, FieldTask, build_chapter_translator, composite_quality
from textbook_trans.config import TranslatorConfig
from textbook_trans.content_translator import ContentTranslator
from textbook_trans.enums import ContentType, Language
from textbook_trans.errors import TranslationServiceError
from textbook_trans.models import ChapterRecord, TerminologyEntry, TranslationResult
from textbook_trans.terminology import TerminologyDictionary
from textbook_trans.translator import TranslationRequestor

PREFIX = "ترجمہ "


class PrefixGenerator:
    """Prefixes each document, scoring titles 0.8 and everything else 0.6."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.calls: list[tuple[str, str]] = []

    async def generate(self, prompt, options):
        document = prompt.rsplit("<document>\n", 1)[1].rsplit("\n</document>", 1)[0]
        content_type = re.search(r"Content Type: (\S+)", prompt).group(1)
        self.calls.append((content_type, document))
        if self.fail_on is not None and self.fail_on in document:
            raise RuntimeError("service unavailable")
        return json.dumps({
            "translatedContent": PREFIX + document,
            "technicalTermsMap": {},
            "qualityScore": 0.8 if content_type == "title" else 0.6,
            "notes": "",
        }, ensure_ascii=False)


DICTIONARY = TerminologyDictionary([TerminologyEntry(source_term="sensor", target_term="سینسر")])

CHAPTER = {
    "id": "ch-3",
    "title": "Robot Sensors",
    "content": "The sensor reads data. <code>// check sensor\nreadSensor();</code>\n\nForce is $F = ma$.",
    "learningObjectives": ["Understand sensors", "Read sensor data"],
    "diagrams": [{"id": "d1", "src": "arm.svg"}],
    "codeExamples": [{"language": "javascript", "code": "// check sensor\nreadSensor();\n/* done */\n"}],
}


def _translator(generator, concurrent: bool = False) -> ChapterTranslator:
    content_translator = ContentTranslator(TranslationRequestor(generator), DICTIONARY)
    return ChapterTranslator(content_translator, Language.ENGLISH, Language.URDU, concurrent=concurrent)


def test_plan_order():
    tasks = _translator(PrefixGenerator()).plan(ChapterRecord.model_validate(CHAPTER))

    assert tasks == [
        FieldTask("title", "Robot Sensors", ContentType.Title),
        FieldTask("learning_objectives[0]", "Understand sensors", ContentType.Prose),
        FieldTask("learning_objectives[1]", "Read sensor data", ContentType.Prose),
        FieldTask("content", CHAPTER["content"], ContentType.Prose),
        FieldTask("code_examples[0].comments[0]", "check sensor", ContentType.Comment),
        FieldTask("code_examples[0].comments[1]", "done", ContentType.Comment),
    ]


def test_translate_chapter():
    generator = PrefixGenerator()

    translated = asyncio.run(_translator(generator).translate_chapter(ChapterRecord.model_validate(CHAPTER)))

    assert [content_type for content_type, _ in generator.calls] == ["title", "prose", "prose", "prose", "comment", "comment"]
    assert translated.title == PREFIX + "Robot Sensors"
    assert translated.learning_objectives == [PREFIX + "Understand sensors", PREFIX + "Read سینسر data"]
    assert translated.content == PREFIX + "The سینسر reads data. <code>// check sensor\nreadSensor();</code>\n\nForce is $F = ma$."
    assert translated.code_examples[0].code == f"// {PREFIX}check سینسر\nreadSensor();\n/* {PREFIX}done */\n"
    assert translated.target_language == Language.URDU
    assert [entry.source_term for entry in translated.terminology_used] == ["sensor"]


def test_composite_quality_is_mean_of_title_and_body():
    translated = asyncio.run(_translator(PrefixGenerator()).translate_chapter(ChapterRecord.model_validate(CHAPTER)))

    assert translated.quality_metrics.title_quality == pytest.approx(0.8)
    assert translated.quality_metrics.content_quality == pytest.approx(0.6)
    assert translated.quality_metrics.composite == pytest.approx(0.7)


def test_passthrough_fields_survive():
    translated = asyncio.run(_translator(PrefixGenerator()).translate_chapter(ChapterRecord.model_validate(CHAPTER)))
    wire = translated.to_wire()

    assert wire["id"] == "ch-3"
    assert wire["diagrams"] == [{"id": "d1", "src": "arm.svg"}]
    assert wire["codeExamples"][0]["language"] == "javascript"
    assert wire["targetLanguage"] == "ur"
    assert wire["qualityMetrics"]["composite"] == pytest.approx(0.7)
    assert wire["terminologyUsed"][0]["sourceTerm"] == "sensor"


def test_diagram_description_is_translated_as_caption():
    chapter = ChapterRecord.model_validate(dict(CHAPTER, diagrams=[{"id": "d1", "description": "Forces on the arm"}], codeExamples=[]))
    generator = PrefixGenerator()

    translated = asyncio.run(_translator(generator).translate_chapter(chapter))

    assert generator.calls[-1] == ("equation-adjacent-caption", "Forces on the arm")
    assert translated.diagrams[0].description == PREFIX + "Forces on the arm"
    assert translated.to_wire()["diagrams"][0]["id"] == "d1"


def test_failure_stops_the_chapter():
    generator = PrefixGenerator(fail_on="reads data")

    with pytest.raises(TranslationServiceError):
        asyncio.run(_translator(generator).translate_chapter(ChapterRecord.model_validate(CHAPTER)))

    assert len(generator.calls) == 4


def test_concurrent_matches_sequential():
    chapter = ChapterRecord.model_validate(CHAPTER)

    sequential = asyncio.run(_translator(PrefixGenerator()).translate_chapter(chapter))
    concurrent = asyncio.run(_translator(PrefixGenerator(), concurrent=True).translate_chapter(chapter))

    assert concurrent.to_wire() == sequential.to_wire()


def test_concurrent_failure_propagates():
    generator = PrefixGenerator(fail_on="check")

    with pytest.raises(TranslationServiceError):
        asyncio.run(_translator(generator, concurrent=True).translate_chapter(ChapterRecord.model_validate(CHAPTER)))


def test_minimal_chapter():
    chapter = ChapterRecord(title="Intro", content="Robots move.")

    translated = asyncio.run(_translator(PrefixGenerator()).translate_chapter(chapter))

    assert translated.learning_objectives == []
    assert translated.diagrams == []
    assert translated.code_examples == []
    assert translated.content == PREFIX + "Robots move."


def test_composite_quality():
    title = TranslationResult(translated_content="a", quality_score=1.0)
    body = TranslationResult(translated_content="b", quality_score=0.5)

    assert composite_quality(title, body).composite == pytest.approx(0.75)


def test_build_chapter_translator_from_config():
    config = TranslatorConfig(target_language=Language.FRENCH, concurrent=True, domain="control theory")

    translator = build_chapter_translator(config, DICTIONARY, PrefixGenerator())

    assert translator.target_language == Language.FRENCH
    assert translator.domain == "control theory"
    assert translator.concurrent is True
