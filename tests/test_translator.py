import asyncio
import json

import pytest

from textbook_trans.enums import ContentType, Language
from textbook_trans.errors import TranslationServiceError
from textbook_trans.helpers import extract_json_from_response
from textbook_trans.models import GenerationOptions, TerminologyEntry
from textbook_trans.translator import TranslationRequestor, build_translation_prompt, parse_translation_result


class RecordingGenerator:
    def __init__(self, reply: str):
        self.reply = reply
        self.calls: list[tuple[str, GenerationOptions]] = []

    async def generate(self, prompt, options):
        self.calls.append((prompt, options))
        return self.reply


class FailingGenerator:
    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    async def generate(self, prompt, options):
        self.calls += 1
        raise self.exc


GOOD_REPLY = json.dumps({
    "translatedContent": "سینسر ڈیٹا پڑھتا ہے۔ {{CODE_0}}",
    "technicalTermsMap": {"sensor": "سینسر"},
    "qualityScore": 0.92,
    "notes": "",
}, ensure_ascii=False)


def test_prompt_carries_request_details():
    vocabulary = [TerminologyEntry(source_term="sensor", target_term="سینسر")]

    prompt = build_translation_prompt(
        "The سینسر reads data. {{CODE_0}}", Language.ENGLISH, Language.URDU, ContentType.Title, "robotics", vocabulary)

    assert "from English to Urdu" in prompt
    assert "Content Type: title" in prompt
    assert "university-level robotics textbook" in prompt
    assert "sensor=سینسر\n" in prompt
    assert prompt.rstrip().endswith("<document>\nThe سینسر reads data. {{CODE_0}}\n</document>")


def test_brackets_in_content_are_left_alone():
    prompt = build_translation_prompt("Keep [TARGET_LANGUAGE] and [DOMAIN] as text.", Language.ENGLISH, Language.URDU, ContentType.Prose)

    assert "Keep [TARGET_LANGUAGE] and [DOMAIN] as text." in prompt


def test_parse_plain_reply():
    result = parse_translation_result(GOOD_REPLY)

    assert result.translated_content == "سینسر ڈیٹا پڑھتا ہے۔ {{CODE_0}}"
    assert result.technical_terms_map == {"sensor": "سینسر"}
    assert result.quality_score == pytest.approx(0.92)
    assert result.terminology_used == []


def test_parse_fenced_reply_with_chatter():
    raw = f"Here is the translation:\n```json\n{GOOD_REPLY}\n```\nLet me know if you need more."

    result = parse_translation_result(raw)

    assert result.quality_score == pytest.approx(0.92)


def test_parse_ignores_service_terminology_and_null_notes():
    raw = json.dumps({"translatedContent": "x", "qualityScore": "0.5", "notes": None, "terminologyUsed": ["bogus"]})

    result = parse_translation_result(raw)

    assert result.notes == ""
    assert result.quality_score == 0.5
    assert result.terminology_used == []


@pytest.mark.parametrize("raw", [
    "I cannot translate this.",
    '{"translatedContent": "x"}',
    '{"translatedContent": "x", "qualityScore": 1.7}',
    '["not", "an", "object"]',
])
def test_malformed_reply_raises(raw):
    with pytest.raises(TranslationServiceError):
        parse_translation_result(raw)


def test_extract_json_without_object_returns_text():
    assert extract_json_from_response("  nothing here  ") == "nothing here"


def test_requestor_forwards_options():
    generator = RecordingGenerator(GOOD_REPLY)
    options = GenerationOptions(max_tokens=64, temperature=0.1)
    requestor = TranslationRequestor(generator, options)

    result = asyncio.run(requestor.request_translation("The sensor.", Language.ENGLISH, Language.URDU, ContentType.Prose))

    assert result.technical_terms_map == {"sensor": "سینسر"}
    assert generator.calls[0][1] is options


def test_default_options():
    generator = RecordingGenerator(GOOD_REPLY)

    asyncio.run(TranslationRequestor(generator).translate("x", Language.ENGLISH, Language.URDU, ContentType.Prose))

    options = generator.calls[0][1]
    assert options.max_tokens == 2000
    assert options.temperature == pytest.approx(0.3)


def test_generator_failure_is_wrapped_without_retry():
    boom = RuntimeError("connection reset")
    generator = FailingGenerator(boom)
    requestor = TranslationRequestor(generator)

    with pytest.raises(TranslationServiceError) as excinfo:
        asyncio.run(requestor.request_translation("x", Language.ENGLISH, Language.URDU, ContentType.Prose))

    assert excinfo.value.original_exception is boom
    assert generator.calls == 1


def test_service_error_passes_through():
    error = TranslationServiceError("quota exceeded")
    requestor = TranslationRequestor(FailingGenerator(error))

    with pytest.raises(TranslationServiceError) as excinfo:
        asyncio.run(requestor.translate("x", Language.ENGLISH, Language.URDU, ContentType.Prose))

    assert excinfo.value is error
