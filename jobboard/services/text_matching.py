"""Lightweight text matching used by resume extraction, job search and recommendations.

Everything here is a pure function over its inputs: no I/O, no shared mutable
state, safe to call from concurrent request handlers. Malformed or missing text
is treated as the empty string and never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Protocol, Sequence

from nltk.stem.porter import PorterStemmer
from rapidfuzz.distance import JaroWinkler


EXTRACT_FUZZY_THRESHOLD = 0.85
CLOSEST_MATCH_THRESHOLD = 0.7
SUGGESTION_THRESHOLD = 0.7
MAX_SUGGESTIONS = 5

DEFAULT_SKILLS: tuple[str, ...] = (
    "javascript",
    "typescript",
    "react",
    "node.js",
    "python",
    "java",
    "c++",
    "html",
    "css",
    "sass",
    "redux",
    "graphql",
    "mongodb",
    "postgresql",
    "docker",
    "kubernetes",
    "aws",
    "azure",
    "git",
    "blockchain",
    "solidity",
    "machine learning",
    "ai",
    "nlp",
    "web3",
    "ethereum",
    "solana",
    "smart contracts",
)

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="ignore")
    return ""


class Normalizer(Protocol):
    def stems(self, text: Any) -> list[str]: ...


class PorterNormalizer:
    """Lower-case, split on non-word characters, Porter-stem each token."""

    def __init__(self) -> None:
        self._stemmer = PorterStemmer()

    def tokenize(self, text: Any) -> list[str]:
        return _WORD_RE.findall(coerce_text(text).lower())

    def stems(self, text: Any) -> list[str]:
        return [self._stemmer.stem(token) for token in self.tokenize(text)]


_default_normalizer = PorterNormalizer()


def normalize_phrase(text: Any, normalizer: Normalizer | None = None) -> str:
    return " ".join((normalizer or _default_normalizer).stems(text))


@dataclass(frozen=True)
class SkillVocabulary:
    skills: tuple[str, ...]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "SkillVocabulary":
        seen: set[str] = set()
        ordered: list[str] = []
        for name in names:
            value = (name or "").strip()
            if value and value not in seen:
                seen.add(value)
                ordered.append(value)
        return cls(skills=tuple(ordered))

    @classmethod
    def default(cls) -> "SkillVocabulary":
        return cls(skills=DEFAULT_SKILLS)

    def __iter__(self) -> Iterator[str]:
        return iter(self.skills)

    def __contains__(self, item: object) -> bool:
        return item in self.skills

    def __len__(self) -> int:
        return len(self.skills)


@dataclass(frozen=True)
class MatchResult:
    candidate: str
    score: float


def string_similarity(first: Any, second: Any) -> float:
    """Jaro-Winkler similarity in [0, 1]; 1.0 means identical.

    An empty side never matches anything, including another empty string.
    """

    a = coerce_text(first)
    b = coerce_text(second)
    if not a or not b:
        return 0.0
    return float(JaroWinkler.similarity(a, b))


def extract_skills(
    text: Any,
    vocabulary: SkillVocabulary,
    *,
    normalizer: Normalizer | None = None,
) -> set[str]:
    """Return the vocabulary skills mentioned in ``text``.

    A skill matches when all of its stems occur in the text, or when its stem
    phrase is a near-miss (Jaro-Winkler above 0.85) of the whole text's stem
    phrase. The result is a set; callers must not rely on any order.
    """

    norm = normalizer or _default_normalizer
    stems = norm.stems(text)
    if not stems:
        return set()

    stem_set = set(stems)
    text_phrase = " ".join(stems)
    found: set[str] = set()
    for skill in vocabulary:
        skill_stems = norm.stems(skill)
        if not skill_stems:
            continue
        if all(stem in stem_set for stem in skill_stems):
            found.add(skill)
            continue
        if string_similarity(" ".join(skill_stems), text_phrase) > EXTRACT_FUZZY_THRESHOLD:
            found.add(skill)
    return found


def calculate_similarity(first: Any, second: Any, *, normalizer: Normalizer | None = None) -> float:
    """Jaccard coefficient over the two texts' stem sets; 0.0 when both are empty."""

    norm = normalizer or _default_normalizer
    first_set = set(norm.stems(first))
    second_set = set(norm.stems(second))
    union = first_set | second_set
    if not union:
        return 0.0
    return len(first_set & second_set) / len(union)


def score_closest_matches(
    query: Any,
    candidates: Sequence[Any],
    *,
    normalizer: Normalizer | None = None,
) -> list[MatchResult]:
    norm = normalizer or _default_normalizer
    query_phrase = normalize_phrase(query, norm)
    if not query_phrase:
        return []

    matches: list[MatchResult] = []
    for candidate in candidates:
        value = coerce_text(candidate)
        score = string_similarity(query_phrase, normalize_phrase(value, norm))
        if score > CLOSEST_MATCH_THRESHOLD:
            matches.append(MatchResult(candidate=value, score=score))
    # list.sort is stable: equal scores keep candidate order.
    matches.sort(key=lambda match: match.score, reverse=True)
    return matches


def find_closest_matches(
    query: Any,
    candidates: Sequence[Any],
    *,
    normalizer: Normalizer | None = None,
) -> list[str]:
    return [match.candidate for match in score_closest_matches(query, candidates, normalizer=normalizer)]


def get_skill_suggestions(
    query: Any,
    skills: Sequence[Any],
    *,
    normalizer: Normalizer | None = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Skills containing the query, or close to it after stemming, in list order."""

    norm = normalizer or _default_normalizer
    raw_query = coerce_text(query).lower()
    query_phrase = normalize_phrase(raw_query, norm)

    suggestions: list[str] = []
    for skill in skills:
        value = coerce_text(skill)
        if not value:
            continue
        if raw_query in value.lower() or (
            string_similarity(query_phrase, normalize_phrase(value, norm)) > SUGGESTION_THRESHOLD
        ):
            suggestions.append(value)
            if len(suggestions) >= limit:
                break
    return suggestions
