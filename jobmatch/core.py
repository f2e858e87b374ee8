"""Job and course services built on the deduplication and matching core.

The services own the write-time exact-duplicate check, skill extraction on
ingestion, and the read-time post-processing (fuzzy deduplication, match
scoring, recommendation ranking) applied before pagination.
"""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .database import Database
from .domain.course import Course
from .domain.deduplication import JobDeduplicator, compute_fingerprint
from .domain.job import Job, JobType, IDENTITY_FIELDS
from .domain.matching import (
    SkillMatcher,
    rank_by_skill_overlap,
    rank_skills_by_relevance,
    skill_similarity,
)
from .error_handling import DuplicateFingerprintError, NotFoundError
from .pagination import Page, paginate

logger = logging.getLogger(__name__)

JOB_FIELDS = (
    'title', 'company', 'location_text', 'city', 'district', 'description', 'skills',
    'job_type', 'source', 'external_url', 'salary_min', 'salary_max', 'is_active',
)
# Fields that may be cleared with an explicit null on update.
NULLABLE_JOB_FIELDS = ('external_url', 'salary_min', 'salary_max')
COURSE_FIELDS = ('title', 'url', 'tags', 'provider', 'level', 'description', 'is_active')


def _pick(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    return {key: data[key] for key in fields if key in data}


class JobService:
    """Creates, updates and queries jobs."""

    def __init__(self,
                 database: Database,
                 deduplicator: Optional[JobDeduplicator] = None,
                 matcher: Optional[SkillMatcher] = None,
                 enable_deduplication: bool = True,
                 metrics=None):
        """Initialize the job service.

        Args:
            database: Storage for jobs
            deduplicator: Fuzzy deduplicator used on search results
            matcher: Skill matcher used to extract skills from descriptions
            enable_deduplication: Remove fuzzy duplicates from search results
            metrics: Optional metrics collector
        """
        self.db = database
        self.deduplicator = deduplicator or JobDeduplicator()
        self.matcher = matcher or SkillMatcher()
        self.enable_deduplication = enable_deduplication
        self.metrics = metrics

    def _extract_skills(self, description: str) -> List[str]:
        return sorted(self.matcher.extract_skills(description))

    def _reject_duplicate(self, fingerprint: str, job_id: Optional[str] = None) -> None:
        existing = self.db.find_by_fingerprint(fingerprint)
        if existing is not None and existing.id != job_id:
            if self.metrics:
                self.metrics.record_fingerprint_conflict()
            logger.warning(f"Job already exists with fingerprint {fingerprint[:12]} (id={existing.id})")
            raise DuplicateFingerprintError(fingerprint)

    def create_job(self, job_data: Dict[str, Any]) -> Job:
        """Create a job, rejecting exact duplicates.

        Skills are extracted from the description when none are supplied.

        Args:
            job_data: Job fields

        Returns:
            Job: The stored job

        Raises:
            DuplicateFingerprintError: If a job with the same fingerprint exists
        """
        fields = _pick(job_data, JOB_FIELDS)
        skills = list(fields.pop('skills', None) or [])
        if fields.get('description') and not skills:
            skills = self._extract_skills(fields['description'])

        job = Job(skills=skills, **fields)
        job.fingerprint = compute_fingerprint(job)
        self._reject_duplicate(job.fingerprint)

        try:
            stored = self.db.add_job(job)
        except DuplicateFingerprintError:
            if self.metrics:
                self.metrics.record_fingerprint_conflict()
            raise

        if self.metrics:
            self.metrics.record_job_created()
        logger.info(f"Created job '{stored.title}' at '{stored.company}' (id={stored.id})")
        return stored

    def _get_any_job(self, job_id: str) -> Job:
        job = self.db.get_job(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def get_job(self, job_id: str) -> Job:
        """Return an active job; deactivated jobs are reported as missing."""
        job = self.db.get_job(job_id)
        if job is None or not job.is_active:
            raise NotFoundError("Job not found")
        return job

    def update_job(self, job_id: str, changes: Dict[str, Any]) -> Job:
        """Update a job.

        The fingerprint is recomputed only when an identity field changes.
        Explicit skills overwrite the stored ones; a new description without
        skills triggers re-extraction.

        Raises:
            NotFoundError: If the job does not exist
            DuplicateFingerprintError: If the new identity collides with another job
        """
        job = self._get_any_job(job_id)
        updates = {
            k: v for k, v in _pick(changes, JOB_FIELDS).items()
            if v is not None or k in NULLABLE_JOB_FIELDS
        }

        identity_changed = any(
            field in updates and updates[field] != getattr(job, field)
            for field in IDENTITY_FIELDS
        )

        if 'skills' in updates:
            updates['skills'] = list(updates['skills'])
        elif 'description' in updates:
            updates['skills'] = self._extract_skills(updates['description'])

        job = replace(job, **updates, updated_at=datetime.utcnow())
        if identity_changed:
            fingerprint = compute_fingerprint(job)
            if fingerprint != job.fingerprint:
                self._reject_duplicate(fingerprint, job_id=job.id)
                job.fingerprint = fingerprint
                logger.debug(f"Recomputed fingerprint for job {job.id}")

        updated = self.db.update_job(job)
        if updated is None:
            raise NotFoundError("Job not found")
        return updated

    def delete_job(self, job_id: str) -> None:
        if not self.db.delete_job(job_id):
            raise NotFoundError("Job not found")

    def search_jobs(self,
                    query: Optional[str] = None,
                    city: Optional[str] = None,
                    district: Optional[str] = None,
                    job_type: Optional[str] = None,
                    skills: Optional[List[str]] = None,
                    salary_min: Optional[int] = None,
                    salary_max: Optional[int] = None,
                    page: int = 1,
                    limit: int = 20) -> Page[Job]:
        """Search active jobs.

        Filters are applied first, then fuzzy duplicates are removed, then
        results are sorted newest first and paginated.

        Returns:
            Page[Job]: One page of matching jobs
        """
        jobs = self.db.search_jobs(query) if query else self.db.get_active_jobs()

        if city:
            jobs = [j for j in jobs if city.lower() in j.city.lower()]
        if district:
            jobs = [j for j in jobs if district.lower() in j.district.lower()]
        if job_type:
            wanted = JobType(job_type)
            jobs = [j for j in jobs if j.job_type == wanted]
        if skills:
            wanted_skills = [s.lower() for s in skills]
            jobs = [
                j for j in jobs
                if any(s in js.lower() for s in wanted_skills for js in j.skills)
            ]
        if salary_min is not None:
            jobs = [j for j in jobs if j.salary_min and j.salary_min >= salary_min]
        if salary_max is not None:
            jobs = [j for j in jobs if j.salary_max and j.salary_max <= salary_max]

        if self.enable_deduplication:
            before = len(jobs)
            jobs = self.deduplicator.deduplicate(jobs)
            if self.metrics and before != len(jobs):
                self.metrics.record_duplicates_removed(before - len(jobs))

        jobs.sort(key=lambda j: j.posted_at, reverse=True)
        return paginate(jobs, page, limit)

    def match_jobs(self,
                   skills: List[str],
                   city: Optional[str] = None,
                   district: Optional[str] = None,
                   page: int = 1,
                   limit: int = 20) -> Page[Tuple[Job, float]]:
        """Score active jobs against a skill set.

        Jobs with no skill overlap are dropped; the rest are ordered by
        descending Jaccard similarity.

        Returns:
            Page of (job, match_score) pairs
        """
        if self.metrics:
            self.metrics.record_match_request()

        jobs = self.db.get_active_jobs()
        if city:
            jobs = [j for j in jobs if j.city.lower() == city.lower()]
        elif district:
            jobs = [j for j in jobs if j.district.lower() == district.lower()]

        scored = [(job, skill_similarity(skills, job.skills)) for job in jobs]
        scored = [pair for pair in scored if pair[1] > 0]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        logger.debug(f"Matched {len(scored)} of {len(jobs)} jobs against {len(skills)} skills")
        return paginate(scored, page, limit)

    def duplicate_groups(self) -> List[List[Job]]:
        """Groups of active jobs that look like the same posting."""
        groups = self.deduplicator.group(self.db.get_active_jobs())
        return [group for group in groups if len(group) > 1]

    def rank_skills(self, description: str, skills: Optional[List[str]] = None) -> List[Tuple[str, float]]:
        """Rank skills by TF-IDF relevance to a description.

        The corpus is the descriptions of the active jobs. Candidate skills
        default to the ones extracted from the description.
        """
        candidates = skills or self._extract_skills(description)
        corpus = [job.description for job in self.db.get_active_jobs() if job.description]
        return rank_skills_by_relevance(description, candidates, corpus)


class CourseService:
    """Stores courses and recommends them from a user's skills."""

    def __init__(self, database: Database, default_limit: int = 10, metrics=None):
        self.db = database
        self.default_limit = default_limit
        self.metrics = metrics

    def create_course(self, course_data: Dict[str, Any]) -> Course:
        course = self.db.add_course(Course(**_pick(course_data, COURSE_FIELDS)))
        logger.info(f"Created course '{course.title}' (id={course.id})")
        return course

    def get_course(self, course_id: str) -> Course:
        course = self.db.get_course(course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return course

    def recommend_courses(self, user_skills: List[str], limit: Optional[int] = None) -> List[Course]:
        """Rank active courses by how many of their tags the user's skills cover.

        Args:
            user_skills: Skills the user already has or wants
            limit: Maximum number of courses (defaults to the configured limit)

        Returns:
            List[Course]: Best matching courses first
        """
        if self.metrics:
            self.metrics.record_recommendation_request()
        courses = self.db.get_active_courses()
        limit = self.default_limit if limit is None else limit
        return rank_by_skill_overlap(((c, c.tags) for c in courses), user_skills, limit)
