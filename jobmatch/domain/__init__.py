"""Domain module for deduplication, skill matching and models."""

from .job import Job, JobSignature, JobSource, JobType
from .course import Course, CourseLevel, CourseProvider
from .deduplication import (
    JobDeduplicator,
    compute_fingerprint,
    filter_duplicates,
    group_similar,
    is_duplicate,
    string_similarity,
)
from .matching import (
    SkillMatcher,
    create_skill_matcher,
    rank_by_skill_overlap,
    skill_similarity,
)
from .normalize import normalize_skill
from .taxonomy import SkillTaxonomy, UNCATEGORIZED

__all__ = [
    'Job', 'JobSignature', 'JobSource', 'JobType',
    'Course', 'CourseLevel', 'CourseProvider',
    'JobDeduplicator', 'compute_fingerprint', 'filter_duplicates', 'group_similar',
    'is_duplicate', 'string_similarity',
    'SkillMatcher', 'create_skill_matcher', 'rank_by_skill_overlap', 'skill_similarity',
    'normalize_skill', 'SkillTaxonomy', 'UNCATEGORIZED',
]
