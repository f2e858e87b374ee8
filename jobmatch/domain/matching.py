"""Skill extraction and skill-set scoring for job matching and course recommendations."""
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .normalize import normalize_skill
from .taxonomy import SkillTaxonomy, UNCATEGORIZED

logger = logging.getLogger(__name__)


def skill_similarity(skills1: Iterable[str], skills2: Iterable[str]) -> float:
    """Jaccard index of two skill sets after normalizing every token.

    Args:
        skills1: First skill set
        skills2: Second skill set

    Returns:
        Score between 0 and 1. Two empty sets score 1, one empty set scores 0.
    """
    set1 = {normalize_skill(skill) for skill in skills1}
    set2 = {normalize_skill(skill) for skill in skills2}

    if not set1 and not set2:
        return 1.0
    if not set1 or not set2:
        return 0.0

    return len(set1 & set2) / len(set1 | set2)


def skill_overlap_score(tags: Sequence[str], query_skills: Iterable[str]) -> float:
    """Share of tags matching any query skill by two-way substring containment.

    A tag counts when it contains a query skill or a query skill contains it.
    """
    query = [skill.lower() for skill in query_skills]
    matched = 0
    for tag in tags:
        tag = tag.lower()
        if any(skill in tag or tag in skill for skill in query):
            matched += 1
    return matched / max(len(tags), 1)


def rank_by_skill_overlap(candidates: Iterable[Tuple[Any, Sequence[str]]],
                          query_skills: Iterable[str],
                          limit: int) -> List[Any]:
    """Rank items by how many of their tags overlap the query skills.

    Args:
        candidates: Pairs of (item, tags)
        query_skills: Skills to rank against
        limit: Maximum number of items to return

    Returns:
        Items ordered by descending score; ties keep their input order
    """
    query = list(query_skills)
    scored = [(item, skill_overlap_score(tags, query)) for item, tags in candidates]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [item for item, _ in scored[:max(limit, 0)]]


class SkillMatcher:
    """Extracts skills from free text and classifies them against a taxonomy."""

    def __init__(self, taxonomy: Optional[SkillTaxonomy] = None):
        """Initialize the matcher.

        Args:
            taxonomy: Skill taxonomy to match against (defaults to the built-in one)
        """
        self.taxonomy = taxonomy or SkillTaxonomy()
        self._normalized: Dict[str, List[str]] = {
            category: [normalize_skill(skill) for skill in skills]
            for category, skills in self.taxonomy.items()
        }

    def _all_normalized(self) -> List[str]:
        return [skill for skills in self._normalized.values() for skill in skills]

    def extract_skills(self, text: str) -> Set[str]:
        """Extract taxonomy skills mentioned in a piece of text.

        A skill is present when its normalized form is a substring of the
        lowercased text. Multi-word skills are also present when each of
        their words appears anywhere in the text, in any order. Short skills
        such as ``r`` or ``c`` therefore match inside other words.

        Args:
            text: Free text such as a job description

        Returns:
            Set of normalized skill tokens
        """
        normalized_text = text.lower()
        found: Set[str] = set()

        for skill in self._all_normalized():
            if not skill:
                continue
            if skill in normalized_text:
                found.add(skill)
                continue
            words = skill.split(' ')
            if len(words) > 1 and all(word in normalized_text for word in words):
                found.add(skill)

        logger.debug(f"Extracted {len(found)} skills from {len(text)} characters of text")
        return found

    def category_of(self, skill: str) -> str:
        """Return the first category listing the skill, or ``uncategorized``."""
        normalized = normalize_skill(skill)
        for category, skills in self._normalized.items():
            if normalized in skills:
                return category
        return UNCATEGORIZED

    def related_skills(self, skill: str) -> List[str]:
        """Other skills from the same category as the given skill."""
        category = self.category_of(skill)
        if category == UNCATEGORIZED:
            return []
        normalized = normalize_skill(skill)
        return [s for s in self._normalized[category] if s != normalized]

    def categorize(self, skills: Iterable[str]) -> Dict[str, List[str]]:
        """Group skills by category, preserving taxonomy category order."""
        grouped: Dict[str, List[str]] = {}
        for skill in sorted({normalize_skill(s) for s in skills}):
            grouped.setdefault(self.category_of(skill), []).append(skill)
        order = list(self._normalized) + [UNCATEGORIZED]
        return {category: grouped[category] for category in order if category in grouped}

    def skill_similarity(self, skills1: Iterable[str], skills2: Iterable[str]) -> float:
        return skill_similarity(skills1, skills2)

    def rank_by_skill_overlap(self, candidates, query_skills, limit: int) -> List[Any]:
        return rank_by_skill_overlap(candidates, query_skills, limit)


def skill_tfidf(skill: str, description: str, corpus: Sequence[str]) -> float:
    """TF-IDF relevance of a skill for one description within a corpus.

    Term frequency is the number of occurrences of the normalized skill over
    the word count of the description. Inverse document frequency is smoothed
    so that it stays positive.
    """
    normalized_skill = normalize_skill(skill)
    normalized_description = description.lower()
    words = normalized_description.split()
    if not normalized_skill or not words:
        return 0.0

    tf = normalized_description.count(normalized_skill) / len(words)
    documents_with_skill = sum(1 for doc in corpus if normalized_skill in doc.lower())
    idf = math.log((1 + len(corpus)) / (1 + documents_with_skill)) + 1
    return tf * idf


def rank_skills_by_relevance(description: str,
                             candidate_skills: Iterable[str],
                             corpus: Sequence[str]) -> List[Tuple[str, float]]:
    """Rank candidate skills by TF-IDF relevance, dropping those not mentioned."""
    scored = [(skill, skill_tfidf(skill, description, corpus)) for skill in candidate_skills]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [(skill, score) for skill, score in scored if score > 0]


def create_skill_matcher(taxonomy_path: Optional[Path] = None) -> SkillMatcher:
    """Factory function to create a skill matcher.

    Args:
        taxonomy_path: Optional YAML taxonomy overriding the built-in one

    Returns:
        SkillMatcher: Configured matcher instance
    """
    if taxonomy_path is None:
        return SkillMatcher()

    from ..config import load_taxonomy
    return SkillMatcher(load_taxonomy(taxonomy_path))
