import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError
from typing_extensions import Annotated

from textbook_trans import errors
from textbook_trans.chapter_translator import build_chapter_translator, build_content_translator
from textbook_trans.config import TranslatorConfig, load_config
from textbook_trans.enums import ContentType, Language
from textbook_trans.generators import build_generator
from textbook_trans.models import ChapterRecord, TranslationRequest
from textbook_trans.span_protector import protect
from textbook_trans.terminology import TerminologyDictionary, default_dictionary, load_dictionary
from textbook_trans.validator import TranslationValidator

# Create the Typer app
app = typer.Typer(
    name="textbook-translator",
    help="Translates textbook chapters while keeping code, equations and diagrams intact.",
    no_args_is_help=True
)

@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show diagnostic logs.")] = False,
) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="TRACE")


def _load_config(config_path: Optional[Path], **overrides) -> TranslatorConfig:
    if config_path is None:
        return TranslatorConfig.from_env(**overrides)
    config = load_config(config_path)
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return config.model_copy(update=overrides) if overrides else config


def _load_dictionary(config: TranslatorConfig, vocabulary: Optional[Path]) -> TerminologyDictionary:
    path = vocabulary or config.dictionary_path
    if path is None:
        return default_dictionary()
    return load_dictionary(path, config.source_language, config.target_language)


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


ConfigOption = Annotated[Optional[Path], typer.Option("--config", help="A path to a JSON translator config.")]
VocabularyOption = Annotated[Optional[Path], typer.Option(help="A path to the csv or json file with the vocabulary.")]
SourceOption = Annotated[Optional[Language], typer.Option("--source-lang", help="Source language.", case_sensitive=False)]
TargetOption = Annotated[Optional[Language], typer.Option("--target-lang", help="Target language.", case_sensitive=False)]


async def _translate_chapter_command(chapter: ChapterRecord, config: TranslatorConfig, vocabulary: Optional[Path]) -> dict:
    translator = build_chapter_translator(config, _load_dictionary(config, vocabulary))
    translated = await translator.translate_chapter(chapter)
    return translated.to_wire()

@app.command("translate-chapter")
def translate_chapter_cli(
    chapter_file: Annotated[Path, typer.Argument(help="A JSON file holding the chapter record.")],
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Where to write the translated chapter. Defaults to stdout.")] = None,
    vocabulary: VocabularyOption = None,
    source_lang: SourceOption = None,
    target_lang: TargetOption = None,
    concurrent: Annotated[bool, typer.Option("--concurrent", help="Translate the fields of the chapter concurrently.")] = False,
    config_path: ConfigOption = None,
):
    """Translates a chapter record, leaving its code, equations and diagrams untouched."""
    try:
        config = _load_config(config_path, source_language=source_lang, target_language=target_lang, concurrent=concurrent or None)
        chapter = ChapterRecord.model_validate_json(chapter_file.read_text(encoding="utf-8"))
        translated = asyncio.run(_translate_chapter_command(chapter, config, vocabulary))
    except errors.TextbookTranslationError as e:
        _fail(f"Error translating chapter '{chapter_file}': {e}")
    except (OSError, ValidationError) as e:
        _fail(f"Could not read chapter '{chapter_file}': {e}")

    contents = json.dumps(translated, ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(contents)
    else:
        output.write_text(contents, encoding="utf-8")
        typer.secho(f"Chapter translated to {translated['targetLanguage']} and written to {output}", fg=typer.colors.GREEN)


async def _translate_text_command(request: TranslationRequest, config: TranslatorConfig, vocabulary: Optional[Path]):
    translator = build_content_translator(config, _load_dictionary(config, vocabulary))
    return await translator.translate_content(request, "text")

@app.command("translate-text")
def translate_text_cli(
    text: Annotated[str, typer.Argument(help="The text to translate.")],
    content_type: Annotated[ContentType, typer.Option(help="Kind of content.", case_sensitive=False)] = ContentType.Prose,
    no_terms: Annotated[bool, typer.Option("--no-terms", help="Do not pre-substitute dictionary terms.")] = False,
    vocabulary: VocabularyOption = None,
    source_lang: SourceOption = None,
    target_lang: TargetOption = None,
    config_path: ConfigOption = None,
):
    """Translates a single piece of content and prints the result with its terminology report."""
    try:
        config = _load_config(config_path, source_language=source_lang, target_language=target_lang)
        request = TranslationRequest(
            source_language=config.source_language,
            target_language=config.target_language,
            content=text,
            content_type=content_type,
            preserve_technical_terms=not no_terms,
            domain=config.domain,
        )
        result = asyncio.run(_translate_text_command(request, config, vocabulary))
    except errors.TextbookTranslationError as e:
        _fail(f"Error translating text: {e}")

    typer.echo(result.translated_content)
    typer.echo(f"Quality score: {result.quality_score}")
    for entry in result.terminology_used:
        typer.echo("\t{:<28} | {}".format(entry.source_term, entry.target_term))


@app.command("protect")
def protect_cli(
    file_path: Annotated[Path, typer.Argument(help="A file whose protected spans should be listed.")],
):
    """Shows the text that would be sent for translation and the spans kept aside."""
    try:
        stripped, spans = protect(file_path.read_text(encoding="utf-8"))
    except errors.SpanProtectionError as e:
        _fail(f"Error protecting '{file_path}': {e}")
    except OSError as e:
        _fail(f"Could not read '{file_path}': {e}")

    typer.echo(stripped)
    typer.echo(f"\n{len(spans)} protected span(s):")
    for span in spans:
        typer.echo("\t{:<14} | {!r}".format(span.token, span.original_text))


@app.command("validate")
def validate_cli(
    original: Annotated[str, typer.Argument(help="The original text.")],
    translated: Annotated[str, typer.Argument(help="Its translation.")],
    source_lang: SourceOption = None,
    target_lang: TargetOption = None,
    config_path: ConfigOption = None,
):
    """Asks the model to grade a translation."""
    try:
        config = _load_config(config_path, source_language=source_lang, target_language=target_lang)
        validator = TranslationValidator(build_generator(config))
        assessment = asyncio.run(validator.validate(original, translated, config.source_language, config.target_language))
    except errors.TextbookTranslationError as e:
        _fail(f"Error validating translation: {e}")

    typer.echo(assessment.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    app()
