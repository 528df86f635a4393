"""
Text Normalization

Converts raw answer text into normalized, stemmed and tokenized forms for
the fuzzy matcher. The NLTK normalizer is an accuracy enhancement only:
every failure degrades to the plain lower-casing fallback.
"""

import re
import unicodedata
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from nltk.corpus import stopwords
from nltk.stem.snowball import SnowballStemmer
from nltk.tokenize import wordpunct_tokenize

from ..core.config import AppConfig, get_config
from ..core.exceptions import ConfigurationError, NormalizerUnavailable
from ..utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_LANGUAGE = "en"

# Language tags understood by the NLTK normalizer and their corpus names
LANGUAGE_NAMES = {
    "en": "english",
    "nl": "dutch",
    "de": "german",
    "fr": "french",
    "es": "spanish",
    "it": "italian",
    "pt": "portuguese",
    "da": "danish",
    "sv": "swedish",
    "no": "norwegian",
    "fi": "finnish",
}


@dataclass(frozen=True)
class NormalizedText:
    """Derived forms of one piece of answer text."""
    language: str
    normalized: str
    stemmed: str
    tokens: List[str] = field(default_factory=list)


class TextNormalizer(ABC):
    """Capability interface for text normalization."""

    @abstractmethod
    def normalize(self, text: str) -> NormalizedText:
        """Normalize ``text`` into its comparison forms."""


class FallbackNormalizer(TextNormalizer):
    """Dependency-free normalizer: lower-case and split on whitespace."""

    def normalize(self, text: str) -> NormalizedText:
        lowered = (text or "").lower()
        return NormalizedText(
            language=FALLBACK_LANGUAGE,
            normalized=lowered,
            stemmed=lowered,
            tokens=lowered.split(),
        )


class NLTKNormalizer(TextNormalizer):
    """Language-aware normalizer built on NLTK stopwords and Snowball stemmers."""

    def __init__(self, languages: Optional[List[str]] = None, default_language: str = FALLBACK_LANGUAGE):
        """
        Initialize the normalizer.

        Args:
            languages: Language tags to detect between, in priority order
            default_language: Tag used when detection finds no evidence
        """
        self.languages = list(languages or [default_language])
        if default_language not in self.languages:
            self.languages.insert(0, default_language)

        unknown = [lang for lang in self.languages if lang not in LANGUAGE_NAMES]
        if unknown:
            raise ConfigurationError(
                f"Unsupported normalizer languages: {', '.join(unknown)}",
                {'supported': sorted(LANGUAGE_NAMES)}
            )

        self.default_language = default_language
        self.stemmers = {lang: SnowballStemmer(LANGUAGE_NAMES[lang]) for lang in self.languages}
        self.stop_words = self._load_stopwords()

    def _load_stopwords(self) -> Dict[str, FrozenSet[str]]:
        """Load stopword lists; detection is disabled when the corpus is missing."""
        loaded = {}
        for lang in self.languages:
            try:
                loaded[lang] = frozenset(stopwords.words(LANGUAGE_NAMES[lang]))
            except LookupError:
                logger.info(
                    "NLTK stopwords corpus not installed; language detection disabled "
                    f"(defaulting to '{self.default_language}')"
                )
                return {}
        return loaded

    def normalize(self, text: str) -> NormalizedText:
        normalized = self.clean(text)
        tokens = wordpunct_tokenize(normalized)
        language = self.detect_language(tokens)
        stemmer = self.stemmers[language]

        return NormalizedText(
            language=language,
            normalized=normalized,
            stemmed=" ".join(stemmer.stem(token) for token in tokens),
            tokens=tokens,
        )

    @staticmethod
    def clean(text: str) -> str:
        """Lower-case, fold diacritics and strip punctuation."""
        if not text:
            return ""

        text = text.lower().strip()

        # München -> munchen, Élysées -> elysees
        text = "".join(
            char for char in unicodedata.normalize("NFKD", text)
            if not unicodedata.combining(char)
        )

        # O'Connor -> oconnor, Willem-Alexander -> willem alexander
        text = re.sub(r"['’`]", "", text)
        text = re.sub(r"[^\w\s]|_", " ", text)

        return re.sub(r"\s+", " ", text).strip()

    def detect_language(self, tokens: List[str]) -> str:
        """Pick the configured language with the most stopword hits."""
        if not tokens or not self.stop_words:
            return self.default_language

        best_language = self.default_language
        best_hits = 0
        for lang in self.languages:
            hits = sum(1 for token in tokens if token in self.stop_words.get(lang, ()))
            if hits > best_hits:
                best_language, best_hits = lang, hits

        return best_language


class GuardedNormalizer(TextNormalizer):
    """
    Runs a primary normalizer under a timeout and falls back on any failure.

    Never raises: a failing or slow primary is logged and replaced by the
    fallback result for that call only. Timed calls share one worker
    thread owned by the guard; call ``close()`` to release it.
    """

    def __init__(self, primary: Optional[TextNormalizer] = None,
                 timeout: Optional[float] = 2.0,
                 fallback: Optional[TextNormalizer] = None):
        self.primary = primary
        self.timeout = timeout
        self.fallback = fallback or FallbackNormalizer()
        self._executor: Optional[ThreadPoolExecutor] = None
        if primary is not None and timeout is not None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="normalizer")

    def normalize(self, text: str) -> NormalizedText:
        if self.primary is None:
            return self.fallback.normalize(text)

        try:
            return self._call_primary(text)
        except NormalizerUnavailable as e:
            logger.warning(f"{e}; using fallback normalizer")
            return self.fallback.normalize(text)

    def close(self) -> None:
        """Stop the worker thread; later calls use the fallback."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        self.primary = None

    def _call_primary(self, text: str) -> NormalizedText:
        name = type(self.primary).__name__

        if self._executor is None:
            try:
                return self.primary.normalize(text)
            except Exception as e:
                raise NormalizerUnavailable(f"{name} failed: {e}", normalizer=name) from e

        # A hung call keeps the single worker busy, so later calls queue
        # behind it and time out too until it finishes.
        future = self._executor.submit(self.primary.normalize, text)
        try:
            return future.result(timeout=self.timeout)
        except FuturesTimeoutError as e:
            future.cancel()
            raise NormalizerUnavailable(
                f"{name} timed out after {self.timeout}s", normalizer=name
            ) from e
        except Exception as e:
            raise NormalizerUnavailable(f"{name} failed: {e}", normalizer=name) from e


def build_normalizer(config: Optional[AppConfig] = None) -> TextNormalizer:
    """Create the configured normalizer wrapped in its timeout guard."""
    config = config or get_config()
    settings = config.normalizer

    primary = None
    if settings.backend == "nltk":
        primary = NLTKNormalizer(
            languages=settings.languages,
            default_language=settings.default_language,
        )

    return GuardedNormalizer(primary=primary, timeout=settings.timeout)
