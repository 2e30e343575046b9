"""
Google Translate client with an in-process translation cache.

The cache is an explicit object: its backing store can be any mutable
mapping, and expiry (ttl_seconds) and size (max_entries) limits are
optional. Without them entries live until `clear()` or process exit.
"""
import time
from typing import Callable, Dict, List, MutableMapping, Optional, Tuple

import requests

from mealplanner.core.config import settings
from mealplanner.services.logger import log_debug

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"
AUTO_DETECT = "auto"

CacheKey = Tuple[str, str, str]


def normalize_text(text: str) -> str:
    return (text or "").strip()


class GoogleTranslateBackend:
    """One POST to the Translate v2 REST API per call."""

    def __init__(self, api_key: str, timeout: Optional[float] = None, session=None):
        if not api_key:
            raise RuntimeError("GOOGLE_TRANSLATE_API_KEY is not set")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def translate(self, text: str, target_language: str, source_language: Optional[str] = None) -> str:
        payload = {"q": text, "target": target_language, "format": "text"}
        # Omitting "source" lets the API detect the language
        if source_language and source_language != AUTO_DETECT:
            payload["source"] = source_language

        r = self.session.post(
            GOOGLE_TRANSLATE_URL,
            params={"key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        if not r.ok:
            print("TRANSLATE STATUS:", r.status_code)
            print("TRANSLATE RESPONSE:", r.text)
            r.raise_for_status()

        translations = (r.json().get("data") or {}).get("translations") or []
        if not translations:
            raise RuntimeError("No translation data received")
        return translations[0]["translatedText"]


class TranslationCache:
    def __init__(
        self,
        store: Optional[MutableMapping[CacheKey, Tuple[str, float]]] = None,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else {}
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock

    @staticmethod
    def key(text: str, target_language: str, source_language: Optional[str] = None) -> CacheKey:
        return (normalize_text(text), source_language or AUTO_DETECT, target_language)

    def _expired(self, stored_at: float) -> bool:
        return self.ttl_seconds is not None and self.clock() - stored_at >= self.ttl_seconds

    def get(self, key: CacheKey) -> Optional[str]:
        entry = self.store.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._expired(stored_at):
            del self.store[key]
            return None
        return value

    def set(self, key: CacheKey, value: str):
        if key in self.store:
            del self.store[key]
        self.store[key] = (value, self.clock())
        if self.max_entries is not None:
            # Oldest insertions go first
            while len(self.store) > self.max_entries:
                del self.store[next(iter(self.store))]

    def stats(self) -> Dict[str, int]:
        total = len(self.store)
        expired = sum(1 for _, stored_at in self.store.values() if self._expired(stored_at))
        return {"total_entries": total, "expired_entries": expired, "valid_entries": total - expired}

    def clear(self):
        self.store.clear()

    def __len__(self):
        return len(self.store)


class TranslationClient:
    def __init__(self, backend, cache: Optional[TranslationCache] = None):
        self.backend = backend
        self.cache = cache if cache is not None else TranslationCache()

    def translate(self, text: str, target_language: str, source_language: Optional[str] = None) -> str:
        key = self.cache.key(text, target_language, source_language)
        if not key[0]:
            return text
        cached = self.cache.get(key)
        if cached is not None:
            log_debug("translation_cache_hit", {"key": key})
            return cached

        translated = self.backend.translate(key[0], target_language, source_language)
        self.cache.set(key, translated)
        log_debug("translation_cache_miss", {"key": key})
        return translated

    def translate_batch(
        self,
        texts: List[str],
        target_language: str,
        source_language: Optional[str] = None,
    ) -> List[str]:
        """
        Translations in input order. Each distinct text that is not cached
        costs exactly one backend call, however often it repeats.
        """
        keys = [self.cache.key(t, target_language, source_language) for t in texts]
        resolved: Dict[CacheKey, str] = {}

        for key in keys:
            # Blank texts come back unchanged, as in translate()
            if key in resolved or not key[0]:
                continue
            cached = self.cache.get(key)
            if cached is None:
                cached = self.backend.translate(key[0], target_language, source_language)
                self.cache.set(key, cached)
            resolved[key] = cached

        return [resolved[key] if key[0] else text for text, key in zip(texts, keys)]

    def cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()

    def clear_cache(self):
        self.cache.clear()


# Process-wide client used by the translate routes
_client: Optional[TranslationClient] = None


def get_translation_client() -> TranslationClient:
    global _client
    if _client is None:
        backend = GoogleTranslateBackend(
            settings.GOOGLE_TRANSLATE_API_KEY,
            timeout=settings.TRANSLATE_TIMEOUT_SECONDS,
        )
        cache = TranslationCache(
            ttl_seconds=settings.TRANSLATION_CACHE_TTL_SECONDS,
            max_entries=settings.TRANSLATION_CACHE_MAX_ENTRIES,
        )
        _client = TranslationClient(backend, cache)
    return _client


def reset_translation_client():
    global _client
    _client = None
