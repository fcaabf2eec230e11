"""
Comment extraction for code examples.

Only the natural-language part of a comment is handed to the translator: the
comment markers, the surrounding whitespace and every line of code stay
byte-identical. String literals are consumed by the same regex so that
`"http://..."` or `"# not a comment"` is never taken for a comment.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_STRINGS = (
    r'"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])*'"
)

_C_FAMILY_REGEX = re.compile(
    r"`(?:\\.|[^`\\])*`|" + _STRINGS +
    r"|(?P<line_opener>//+!?)(?P<line_text>[^\n]*)"
    r"|(?P<block_opener>/\*+!?)(?P<block_text>[\s\S]*?)(?P<block_closer>\*+/)"
)

_HASH_REGEX = re.compile(
    r'"""[\s\S]*?"""|' + r"'''[\s\S]*?'''|" + _STRINGS +
    r"|(?P<line_opener>#+)(?P<line_text>[^\n]*)"
)

HASH_COMMENT_LANGUAGES = {
    "python", "py", "python3", "bash", "sh", "shell", "zsh", "yaml", "yml",
    "r", "ruby", "rb", "toml", "perl", "dockerfile", "cmake", "makefile",
}


@dataclass(frozen=True)
class CommentSpan:
    start: int
    end: int
    opener: str
    text: str
    closer: str = ""

    @property
    def core_text(self) -> str:
        """The comment text without its surrounding whitespace."""
        return self.text.strip()

    def rebuild(self, translated_core: str) -> str:
        leading = self.text[:len(self.text) - len(self.text.lstrip())]
        trailing = self.text[len(self.text.rstrip()):]
        return f"{self.opener}{leading}{translated_core}{trailing}{self.closer}"


def _regex_for_language(language: Optional[str]) -> re.Pattern:
    if language is not None and language.strip().lower() in HASH_COMMENT_LANGUAGES:
        return _HASH_REGEX
    return _C_FAMILY_REGEX


def extract_comments(code: str, language: Optional[str] = None) -> List[CommentSpan]:
    """
    Returns the comments of *code* in document order.
    C-family syntax (`//`, `/* */`) is assumed unless *language* uses `#`.
    Comments with no text and shebang lines are skipped.
    """
    comments: List[CommentSpan] = []
    for match in _regex_for_language(language).finditer(code):
        if match.group("line_opener") is not None:
            opener, text, closer = match.group("line_opener"), match.group("line_text"), ""
            if match.start() == 0 and opener == "#" and text.startswith("!"):
                continue
        elif "block_opener" in match.re.groupindex and match.group("block_opener") is not None:
            opener, text, closer = match.group("block_opener"), match.group("block_text"), match.group("block_closer")
        else:
            # string literal
            continue
        if not text.strip():
            continue
        comments.append(CommentSpan(match.start(), match.end(), opener, text, closer))
    return comments


def splice_comments(code: str, comments: List[CommentSpan], translated_cores: List[str]) -> str:
    """
    Puts translated comment texts back into *code*.
    Splicing runs from the last comment to the first so earlier offsets stay valid.
    """
    if len(comments) != len(translated_cores):
        raise ValueError("Every comment needs exactly one translation")
    result = code
    for comment, translated in sorted(zip(comments, translated_cores), key=lambda pair: pair[0].start, reverse=True):
        result = result[:comment.start] + comment.rebuild(translated) + result[comment.end:]
    return result
