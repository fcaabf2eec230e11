from abc import ABC, abstractmethod

from loguru import logger

from .constants import DEFAULT_CACHE_MAX_ENTRIES
from .enums import ContentType, Language
from .models import TranslationResult


class TranslationCache(ABC):
    """
    Stores service replies keyed by the checksum of the *stripped* text.

    Because placeholders are deterministic, two fields that differ only in
    their protected spans share an entry; restoration puts the right spans back.
    """

    @abstractmethod
    def lookup(self, src_checksum: str, src_lang: Language, tgt_lang: Language, content_type: ContentType, domain: str) -> TranslationResult | None:
        """Return the cached result if the pair exists, else *None*."""
        pass

    @abstractmethod
    def persist(self, src_checksum: str, src_lang: Language, tgt_lang: Language, content_type: ContentType, domain: str, result: TranslationResult) -> None:
        pass


class InMemoryTranslationCache(TranslationCache):
    """
    Process-local cache, normally scoped to one translator run.
    Holds at most *max_entries* replies; the oldest entry is evicted first.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: dict[tuple[str, Language, Language, ContentType, str], TranslationResult] = {}
        self.max_entries = max_entries
        self.hits = 0

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, src_checksum: str, src_lang: Language, tgt_lang: Language, content_type: ContentType, domain: str) -> TranslationResult | None:
        cached = self._entries.get((src_checksum, src_lang, tgt_lang, content_type, domain))
        if cached is not None:
            self.hits += 1
            logger.debug("cache hit ({} -> {})", src_lang, tgt_lang)
        return cached

    def persist(self, src_checksum: str, src_lang: Language, tgt_lang: Language, content_type: ContentType, domain: str, result: TranslationResult) -> None:
        key = (src_checksum, src_lang, tgt_lang, content_type, domain)
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = result

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
