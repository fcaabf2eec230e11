from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import DEFAULT_DOMAIN, TRANSLATION_MAX_TOKENS, TRANSLATION_TEMPERATURE
from .enums import ContentType, Language

# Wire documents (service replies, chapter JSON) use camelCase keys.
_WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_WIRE_PASSTHROUGH = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class GenerationOptions(BaseModel):
    """Options forwarded to the text-generation service."""
    max_tokens: int = Field(default=TRANSLATION_MAX_TOKENS, gt=0)
    temperature: float = Field(default=TRANSLATION_TEMPERATURE, ge=0.0, le=1.0)


class TerminologyEntry(BaseModel):
    """A curated source term with its target-language equivalent."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    source_term: str
    target_term: str
    definition: str = ""
    context: str = ""


class TranslationRequest(BaseModel):
    model_config = _WIRE

    source_language: Language
    target_language: Language
    content: str
    content_type: ContentType = ContentType.Prose
    preserve_technical_terms: bool = True
    domain: str = DEFAULT_DOMAIN


class TranslationResult(BaseModel):
    """
    Structured reply of a translation call.

    `terminology_used` is filled by the pipeline, never by the service.
    """
    model_config = _WIRE

    translated_content: str
    technical_terms_map: dict[str, str] = Field(default_factory=dict)
    quality_score: float = Field(ge=0.0, le=1.0)
    notes: str = ""
    terminology_used: List[TerminologyEntry] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, value):
        return "" if value is None else value

    @field_validator("technical_terms_map", mode="before")
    @classmethod
    def _none_terms_map(cls, value):
        return {} if value is None else value


class TranslationAssessment(BaseModel):
    """Reply of a translation validation call."""
    model_config = _WIRE

    accuracy_score: float = Field(ge=0.0, le=1.0)
    fluency_score: float = Field(ge=0.0, le=1.0)
    technical_precision_score: float = Field(ge=0.0, le=1.0)
    cultural_appropriateness_score: float = Field(ge=0.0, le=1.0)
    overall_score: float = Field(ge=0.0, le=1.0)
    feedback: str = ""
    suggested_improvements: List[str] = Field(default_factory=list)


class Diagram(BaseModel):
    model_config = _WIRE_PASSTHROUGH

    description: Optional[str] = None


class CodeExample(BaseModel):
    model_config = _WIRE_PASSTHROUGH

    code: str
    language: Optional[str] = None


class ChapterRecord(BaseModel):
    """A textbook chapter as handed over by the content-delivery system."""
    model_config = _WIRE_PASSTHROUGH

    title: str
    content: str
    learning_objectives: List[str] = Field(default_factory=list)
    diagrams: List[Diagram] = Field(default_factory=list)
    code_examples: List[CodeExample] = Field(default_factory=list)

    def to_wire(self) -> dict:
        """Dumps the record with its original camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class QualityMetrics(BaseModel):
    model_config = _WIRE

    title_quality: float
    content_quality: float
    # mean of title and body scores, see ChapterTranslator
    composite: float


class TranslatedChapter(ChapterRecord):
    target_language: Language
    quality_metrics: QualityMetrics
    terminology_used: List[TerminologyEntry] = Field(default_factory=list)
