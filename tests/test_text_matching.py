from __future__ import annotations

import pytest

from jobboard.services.text_matching import (
    DEFAULT_SKILLS,
    PorterNormalizer,
    SkillVocabulary,
    calculate_similarity,
    extract_skills,
    find_closest_matches,
    get_skill_suggestions,
    normalize_phrase,
    score_closest_matches,
    string_similarity,
)


SAMPLE_TEXTS = [
    "",
    "Senior Python developer with Django and PostgreSQL",
    "I have 5 years of experience with JavaScript and React",
    "Smart contracts on Ethereum, Solidity, web3!",
    "   ",
    "C++ / node.js / Docker + Kubernetes",
]


def test_normalizer_lowercases_stems_and_drops_punctuation() -> None:
    normalizer = PorterNormalizer()
    assert normalizer.stems("Running, RUNS; runner!") == ["run", "run", "runner"]
    assert normalizer.stems("node.js") == ["node", "js"]
    assert normalizer.stems("") == []
    assert normalizer.stems(None) == []


def test_normalize_phrase_joins_stems() -> None:
    assert normalize_phrase("Machine Learning") == "machin learn"


def test_extract_skills_finds_javascript_and_react() -> None:
    skills = extract_skills("I have 5 years of experience with JavaScript and React", SkillVocabulary.default())
    assert {"javascript", "react"} <= skills


def test_extract_skills_matches_multi_word_skills() -> None:
    skills = extract_skills("Built machine learning models and smart contracts", SkillVocabulary.default())
    assert "machine learning" in skills
    assert "smart contracts" in skills


def test_extract_skills_fuzzy_match_on_near_miss_phrasing() -> None:
    vocabulary = SkillVocabulary.from_names(["kubernetes"])
    # A typo never matches on stems, but the whole text is a near miss.
    assert extract_skills("kubernetse", vocabulary) == {"kubernetes"}


@pytest.mark.parametrize("text", SAMPLE_TEXTS)
def test_extract_skills_is_subset_of_vocabulary(text: str) -> None:
    vocabulary = SkillVocabulary.default()
    assert extract_skills(text, vocabulary) <= set(vocabulary)


def test_extract_skills_uses_injected_vocabulary() -> None:
    vocabulary = SkillVocabulary.from_names(["rust", "go"])
    assert extract_skills("Python and Rust services", vocabulary) == {"rust"}
    assert extract_skills("Python and Rust services", SkillVocabulary.from_names([])) == set()


def test_extract_skills_empty_or_missing_text_returns_empty_set() -> None:
    vocabulary = SkillVocabulary.default()
    assert extract_skills("", vocabulary) == set()
    assert extract_skills(None, vocabulary) == set()


def test_vocabulary_deduplicates_and_keeps_order() -> None:
    vocabulary = SkillVocabulary.from_names(["python", " python ", "", "react"])
    assert vocabulary.skills == ("python", "react")
    assert list(vocabulary) == ["python", "react"]
    assert "react" in vocabulary
    assert len(SkillVocabulary.default()) == len(DEFAULT_SKILLS)


@pytest.mark.parametrize("first", SAMPLE_TEXTS)
@pytest.mark.parametrize("second", SAMPLE_TEXTS[:3])
def test_similarity_is_symmetric_and_bounded(first: str, second: str) -> None:
    forward = calculate_similarity(first, second)
    assert forward == calculate_similarity(second, first)
    assert 0.0 <= forward <= 1.0


def test_similarity_of_empty_texts_is_zero() -> None:
    assert calculate_similarity("", "") == 0.0
    assert calculate_similarity(None, None) == 0.0


def test_self_similarity_is_one() -> None:
    text = "Python developer building React dashboards"
    assert calculate_similarity(text, text) == 1.0


def test_similarity_is_jaccard_over_stems() -> None:
    # {python, develop} vs {python, engin}: 1 shared of 3 distinct.
    assert calculate_similarity("python developer", "Python engineer") == pytest.approx(1 / 3)


def test_string_similarity_bounds() -> None:
    assert string_similarity("react", "react") == 1.0
    assert string_similarity("", "react") == 0.0
    assert 0.8 < string_similarity("react", "reactjs") < 1.0


def test_find_closest_matches_tolerates_typos() -> None:
    matches = find_closest_matches("pyton", ["java", "python", "golang"])
    assert matches == ["python"]


def test_find_closest_matches_sorted_and_above_threshold() -> None:
    candidates = ["python", "pythons", "pytorch", "java", "typescript", "py"]
    scored = score_closest_matches("python", candidates)
    scores = [match.score for match in scored]
    assert all(score > 0.7 for score in scores)
    assert scores == sorted(scores, reverse=True)
    assert [match.candidate for match in scored] == find_closest_matches("python", candidates)
    assert "java" not in find_closest_matches("python", candidates)


def test_find_closest_matches_keeps_candidate_order_on_ties() -> None:
    assert find_closest_matches("react", ["React", "react", "REACT"]) == ["React", "react", "REACT"]


def test_find_closest_matches_empty_query() -> None:
    assert find_closest_matches("", ["python"]) == []


def test_skill_suggestions_capped_at_five_in_list_order() -> None:
    skills = ["python", "pytorch", "pyspark", "pytest", "pydantic", "pyramid", "pygame"]
    assert get_skill_suggestions("py", skills) == ["python", "pytorch", "pyspark", "pytest", "pydantic"]


def test_skill_suggestions_substring_or_similar() -> None:
    skills = ["javascript", "java", "kotlin", "jav", "Django"]
    suggestions = get_skill_suggestions("java", skills)
    assert suggestions == ["javascript", "java", "jav"]
    for skill in suggestions:
        assert "java" in skill.lower() or string_similarity("java", normalize_phrase(skill)) > 0.7


def test_skill_suggestions_typo() -> None:
    assert get_skill_suggestions("kubernets", ["docker", "kubernetes"]) == ["kubernetes"]


def test_skill_suggestions_empty_query_keeps_first_five() -> None:
    skills = ["python", "react", "go", "rust", "java", "css"]
    assert get_skill_suggestions("", skills) == ["python", "react", "go", "rust", "java"]
    assert get_skill_suggestions(None, skills) == ["python", "react", "go", "rust", "java"]


def test_skill_suggestions_whitespace_query_is_a_substring() -> None:
    skills = ["python", "machine learning", "smart contracts"]
    assert get_skill_suggestions(" ", skills) == ["machine learning", "smart contracts"]
