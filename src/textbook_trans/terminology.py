from __future__ import annotations

import csv
import json
import re
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from .default_terms import DEFAULT_TERMS
from .enums import Language
from .errors import TerminologyLookupError
from .models import TerminologyEntry


def _normalize(term: str) -> str:
    return " ".join(term.split()).lower()


_Matcher = Tuple[re.Pattern, Tuple[TerminologyEntry, ...]]


def _build_matcher(index: Mapping[str, TerminologyEntry]) -> Optional[_Matcher]:
    """
    Builds a whole-word, case-insensitive alternation over the keys of *index*.
    Terms are sorted by descending length so that "sim-to-real transfer"
    wins over "transfer". Each term gets its own named group `t<i>`; the
    matched entry is read from the group, never from the case-folded match.
    """
    ordered = sorted(index, key=len, reverse=True)
    if not ordered:
        return None
    alternatives = [
        f"(?P<t{i}>" + r"\s+".join(re.escape(word) for word in term.split()) + ")"
        for i, term in enumerate(ordered)
    ]
    pattern = re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.IGNORECASE)
    return pattern, tuple(index[term] for term in ordered)


def _matched_entry(match: re.Match, entries: Tuple[TerminologyEntry, ...]) -> TerminologyEntry:
    return entries[int(match.lastgroup[1:])]


class TerminologyDictionary:
    """
    Read-only mapping from source terms to their TerminologyEntry.

    Built once at startup and handed to the pipeline. Placeholder tokens
    (`{{CODE_0}}`) are never matched: their category word is always glued to
    an underscore.
    """

    __slots__ = ("_entries", "_source_matcher", "_target_matcher")

    def __init__(self, entries: Iterable[TerminologyEntry]):
        by_key: dict[str, TerminologyEntry] = {}
        for entry in entries:
            key = _normalize(entry.source_term)
            if not key:
                raise TerminologyLookupError("Terminology entry with an empty source term")
            if key in by_key:
                raise TerminologyLookupError(f"Duplicate terminology entry: '{entry.source_term}'")
            by_key[key] = entry

        by_target = {_normalize(entry.target_term): entry for entry in by_key.values() if entry.target_term.strip()}
        object.__setattr__(self, "_entries", MappingProxyType(by_key))
        object.__setattr__(self, "_source_matcher", _build_matcher(by_key))
        object.__setattr__(self, "_target_matcher", _build_matcher(by_target))

    def __setattr__(self, name, value):
        raise AttributeError("TerminologyDictionary is immutable")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: str) -> bool:
        return _normalize(term) in self._entries

    @property
    def entries(self) -> Mapping[str, TerminologyEntry]:
        return self._entries

    def lookup(self, term: str) -> Optional[TerminologyEntry]:
        return self._entries.get(_normalize(term))

    def find_terms(self, text: str) -> List[TerminologyEntry]:
        """Returns the entries whose source term occurs in *text*, in first-occurrence order."""
        return self._collect(self._source_matcher, text)

    def find_target_terms(self, text: str) -> List[TerminologyEntry]:
        """Returns the entries whose target term occurs in *text*."""
        return self._collect(self._target_matcher, text)

    def substitute(self, text: str) -> Tuple[str, List[TerminologyEntry]]:
        """
        Replaces every source term in *text* with its target term.
        Returns the new text and the substituted entries, deduplicated.
        """
        if self._source_matcher is None:
            return text, []
        pattern, entries = self._source_matcher
        used: dict[str, TerminologyEntry] = {}

        def _replace(match: re.Match) -> str:
            entry = _matched_entry(match, entries)
            used.setdefault(_normalize(entry.source_term), entry)
            return entry.target_term

        substituted = pattern.sub(_replace, text)
        logger.trace("Substituted {} terminology term(s)", len(used))
        return substituted, list(used.values())

    def reconcile(self, source_text: str, target_text: str) -> List[TerminologyEntry]:
        """
        Builds the terminology report of a translation: terms found in the
        pre-translation text, followed by terms only visible in the target text.
        """
        report: dict[str, TerminologyEntry] = {}
        for entry in self.find_terms(source_text) + self.find_target_terms(target_text):
            report.setdefault(_normalize(entry.source_term), entry)
        return list(report.values())

    def compile_into_llm_vocab_list(self) -> str:
        """
        Returns the vocabulary list in the form convenient for the LLM input.
        """
        return "".join(f"{entry.source_term}={entry.target_term}\n" for entry in self._entries.values())

    @staticmethod
    def _collect(matcher: Optional[_Matcher], text: str) -> List[TerminologyEntry]:
        if matcher is None:
            return []
        pattern, entries = matcher
        found: dict[str, TerminologyEntry] = {}
        for match in pattern.finditer(text):
            entry = _matched_entry(match, entries)
            found.setdefault(_normalize(entry.source_term), entry)
        return list(found.values())


def dictionary_from_vocab_db(db: list[dict], source_lang: Language | None = None, target_lang: Language | None = None) -> TerminologyDictionary:
    """
    Takes a list of vocabulary rows and builds a TerminologyDictionary.
    Two row formats are understood:
        {source_term: str, target_term: str, definition: str, context: str}
    or one column per language, in which case the languages pick the pair:
        {en: str, ur: str, fr: str, definition: str, context: str}
    """
    entries = []
    for row in db:
        if source_lang is not None and target_lang is not None and str(source_lang) in row:
            row = dict(row, source_term=row[str(source_lang)], target_term=row.get(str(target_lang)))
        try:
            entries.append(TerminologyEntry(
                source_term=row["source_term"],
                target_term=row["target_term"],
                definition=row.get("definition") or "",
                context=row.get("context") or "",
            ))
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise TerminologyLookupError(f"Malformed terminology row {row}: {e}", original_exception=e)
    return TerminologyDictionary(entries)


def load_dictionary_from_csv(path: Path, source_lang: Language | None = None, target_lang: Language | None = None) -> TerminologyDictionary:
    try:
        with open(path, newline='', encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
    except OSError as e:
        raise TerminologyLookupError(f"Could not read terminology file {path}: {e}", original_exception=e)
    logger.debug("Loaded {} terminology row(s) from {}", len(rows), path)
    return dictionary_from_vocab_db(rows, source_lang, target_lang)


def load_dictionary_from_json(path: Path, source_lang: Language | None = None, target_lang: Language | None = None) -> TerminologyDictionary:
    try:
        rows = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TerminologyLookupError(f"Could not read terminology file {path}: {e}", original_exception=e)
    if not isinstance(rows, list):
        raise TerminologyLookupError(f"Terminology file {path} must contain a list of entries")
    return dictionary_from_vocab_db(rows, source_lang, target_lang)


def load_dictionary(path: Path, source_lang: Language | None = None, target_lang: Language | None = None) -> TerminologyDictionary:
    """Loads a dictionary file, picking the reader from the file extension."""
    if path.suffix.lower() == ".json":
        return load_dictionary_from_json(path, source_lang, target_lang)
    return load_dictionary_from_csv(path, source_lang, target_lang)


def default_dictionary() -> TerminologyDictionary:
    """The curated English -> Urdu robotics dictionary."""
    return dictionary_from_vocab_db(DEFAULT_TERMS)
