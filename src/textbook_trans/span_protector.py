"""
Protection of non-natural-language spans.

Code, equations, images and diagram containers are swapped for opaque
`{{CATEGORY_n}}` tokens before the text goes to the model, and swapped back
afterwards. Every detector runs against the string left by the previous ones,
so a span tokenized by an earlier category is invisible to later detectors
and the resulting spans never overlap.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .constants import TOKEN_PATTERN, TOKEN_TEMPLATE
from .enums import SpanCategory
from .errors import SpanProtectionError, SpanRestorationError


@dataclass(frozen=True)
class ProtectedSpan:
    token: str
    original_text: str

    @property
    def category(self) -> SpanCategory:
        return SpanCategory(self.token[2:].rsplit("_", 1)[0])


_CODE_REGEX = re.compile(
    r"<pre\b[^>]*>[\s\S]*?</pre>"
    r"|<code\b[^>]*>[\s\S]*?</code>"
    r"|^(```|~~~)[^\n]*\n[\s\S]*?^\1[ \t]*$"
    r"|`[^`\n]+`",
    re.IGNORECASE | re.MULTILINE,
)

_EQUATION_REGEX = re.compile(
    r"(?<!\\)\$\$[\s\S]+?(?<!\\)\$\$"
    r"|\\\[[\s\S]+?\\\]"
    r"|\\\([\s\S]+?\\\)"
    # inline math never crosses a blank line
    r"|(?<!\\)\$(?:[^$\n\\]|\\.|\n(?![ \t]*\n))+?\$"
)

_IMAGE_REGEX = re.compile(
    r"<img\b[^>]*>"
    r"|!\[[^\]\n]*\]\([^)\n]*\)",
    re.IGNORECASE,
)

_DIAGRAM_REGEX = re.compile(
    r"<div\b[^>]*\bclass=\"[^\"]*diagram[^\"]*\"[^>]*>[\s\S]*?</div>"
    r"|<svg\b[^>]*>[\s\S]*?</svg>",
    re.IGNORECASE,
)

# Order matters: code first so `$` inside code is not taken for math.
SPAN_DETECTORS: Tuple[Tuple[SpanCategory, re.Pattern], ...] = (
    (SpanCategory.Code, _CODE_REGEX),
    (SpanCategory.Equation, _EQUATION_REGEX),
    (SpanCategory.Image, _IMAGE_REGEX),
    (SpanCategory.Diagram, _DIAGRAM_REGEX),
)


def make_token(category: SpanCategory, ordinal: int) -> str:
    return TOKEN_TEMPLATE.format(category=category.value, ordinal=ordinal)


def find_tokens(text: str) -> List[str]:
    """Returns every token-shaped substring of *text*, in document order."""
    return TOKEN_PATTERN.findall(text)


_CATEGORY_RANK = {category: rank for rank, (category, _) in enumerate(SPAN_DETECTORS)}


def _in_field(field_name: Optional[str]) -> str:
    return f" in '{field_name}'" if field_name is not None else ""


def _protect_category(text: str, category: SpanCategory, pattern: re.Pattern, spans: List[ProtectedSpan]) -> str:
    matches = list(pattern.finditer(text))
    if not matches:
        return text

    bounds = [0] + [i for match in matches for i in match.span()] + [len(text)]
    # joined with NUL so two neighbouring gaps cannot form a token
    outside = "\0".join(text[bounds[i]:bounds[i + 1]] for i in range(0, len(bounds), 2))

    parts: List[str] = []
    last_end = 0
    for ordinal, match in enumerate(matches):
        token = make_token(category, ordinal)
        if token in outside:
            raise SpanProtectionError(
                f"Placeholder {token} already occurs verbatim in the document", token=token)
        parts.append(text[last_end:match.start()])
        parts.append(token)
        spans.append(ProtectedSpan(token=token, original_text=match.group(0)))
        last_end = match.end()
    parts.append(text[last_end:])
    return "".join(parts)


def protect(content: str) -> Tuple[str, List[ProtectedSpan]]:
    """
    Replaces every protected region of *content* with a token.

    Returns the stripped text and the spans in detection order
    (code, equations, images, diagrams), not in document order.
    Token-shaped text is allowed inside protected regions only: if the prose
    itself carries one, SpanProtectionError is raised before anything is sent.
    """
    spans: List[ProtectedSpan] = []
    stripped = content
    for category, pattern in SPAN_DETECTORS:
        stripped = _protect_category(stripped, category, pattern, spans)

    issued = {span.token for span in spans}
    for token in find_tokens(stripped):
        if token not in issued:
            raise SpanProtectionError(f"Placeholder-shaped text {token} occurs verbatim in the document", token=token)
    logger.trace("Protected {} span(s)", len(spans))
    return stripped, spans


def detect_spans(content: str) -> List[Tuple[SpanCategory, str]]:
    """Lists the (category, text) pairs `protect` would tokenize."""
    _, spans = protect(content)
    return [(span.category, span.original_text) for span in spans]


def _absorbed_tokens(span: ProtectedSpan, by_token: Dict[str, ProtectedSpan]) -> List[str]:
    """Tokens of earlier categories that ended up inside *span* when it was detected."""
    rank = _CATEGORY_RANK[span.category]
    return [
        token for token in find_tokens(span.original_text)
        if token in by_token and _CATEGORY_RANK[by_token[token].category] < rank
    ]


def _expand(span: ProtectedSpan, by_token: Dict[str, ProtectedSpan]) -> str:
    absorbed = set(_absorbed_tokens(span, by_token))
    if not absorbed:
        return span.original_text
    return TOKEN_PATTERN.sub(
        lambda m: _expand(by_token[m.group(0)], by_token) if m.group(0) in absorbed else m.group(0),
        span.original_text,
    )


def restore(translated_content: str, spans: List[ProtectedSpan], field_name: Optional[str] = None) -> str:
    """
    Puts the original text of every span back in place of its token.

    Every occurrence of a token is replaced, since a model may repeat a
    sentence, and tokens may come back in any order. A span that enclosed
    spans of earlier categories (an image inside a diagram) gets them
    expanded too. Substitution is a single pass, so token-shaped text inside
    an original span is never touched.
    Raises SpanRestorationError when the translation dropped a token or
    carries a token that was not issued for it.
    """
    by_token = {span.token: span for span in spans}
    absorbed = {token for span in spans for token in _absorbed_tokens(span, by_token)}
    top_level = [span for span in spans if span.token not in absorbed]
    expected = {span.token for span in top_level}

    for token in find_tokens(translated_content):
        if token not in expected:
            raise SpanRestorationError(
                f"Unknown placeholder {token}{_in_field(field_name)}", token=token, field_name=field_name)
    for span in top_level:
        if span.token not in translated_content:
            raise SpanRestorationError(
                f"Placeholder {span.token} was lost{_in_field(field_name)}", token=span.token, field_name=field_name)

    originals = {span.token: _expand(span, by_token) for span in top_level}
    return TOKEN_PATTERN.sub(lambda m: originals[m.group(0)], translated_content)
