"""Database-backed web handler exposing jobs, courses and skill matching."""
import logging
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Query
from pydantic import BaseModel, Field
from jobmatch.core import JobService, CourseService
from jobmatch.domain.job import JobSource, JobType
from jobmatch.domain.course import CourseLevel, CourseProvider
from jobmatch.domain.matching import SkillMatcher

logger = logging.getLogger(__name__)


class JobCreate(BaseModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    location_text: str = ""
    city: str = ""
    district: str = ""
    description: str = ""
    skills: List[str] = Field(default_factory=list)
    job_type: JobType = JobType.FULL_TIME
    source: JobSource = JobSource.MANUAL
    external_url: Optional[str] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)


class JobUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = Field(default=None, min_length=1)
    location_text: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    description: Optional[str] = None
    skills: Optional[List[str]] = None
    job_type: Optional[JobType] = None
    external_url: Optional[str] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class MatchRequest(BaseModel):
    skills: List[str] = Field(min_length=1)
    city: Optional[str] = None
    district: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class CourseCreate(BaseModel):
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list)
    provider: CourseProvider = CourseProvider.OTHER
    level: CourseLevel = CourseLevel.BEGINNER
    description: str = ""


class ExtractRequest(BaseModel):
    text: str


class RelevanceRequest(BaseModel):
    text: str
    skills: Optional[List[str]] = None


class JobMatchWebHandler:
    """Registers the job, course and skill routes on a FastAPI app."""

    def __init__(self,
                 app: FastAPI,
                 job_service: JobService,
                 course_service: CourseService,
                 matcher: SkillMatcher):
        """Initialize the web handler.

        Args:
            app: FastAPI application instance
            job_service: Service for job operations
            course_service: Service for course operations
            matcher: Skill matcher for free-text extraction
        """
        self.app = app
        self.jobs = job_service
        self.courses = course_service
        self.matcher = matcher
        self._setup_routes()

    def _setup_routes(self):
        """Set up FastAPI routes."""
        app = self.app

        @app.post("/jobs", status_code=201)
        def create_job(payload: JobCreate) -> Dict[str, Any]:
            data = payload.model_dump()
            data['job_type'] = payload.job_type.value
            data['source'] = payload.source.value
            return self.jobs.create_job(data).to_dict()

        @app.get("/jobs/search")
        def search_jobs(query: Optional[str] = None,
                        city: Optional[str] = None,
                        district: Optional[str] = None,
                        job_type: Optional[JobType] = None,
                        skills: Optional[List[str]] = Query(default=None),
                        salary_min: Optional[int] = None,
                        salary_max: Optional[int] = None,
                        page: int = 1,
                        limit: int = 20) -> Dict[str, Any]:
            result = self.jobs.search_jobs(
                query=query, city=city, district=district,
                job_type=job_type.value if job_type else None,
                skills=skills, salary_min=salary_min, salary_max=salary_max,
                page=page, limit=limit,
            )
            return result.to_dict(lambda job: job.to_dict())

        @app.post("/jobs/match")
        def match_jobs(payload: MatchRequest) -> Dict[str, Any]:
            result = self.jobs.match_jobs(
                payload.skills, city=payload.city, district=payload.district,
                page=payload.page, limit=payload.limit,
            )
            return result.to_dict(lambda pair: {**pair[0].to_dict(), 'match_score': pair[1]})

        @app.get("/jobs/duplicates")
        def duplicate_groups() -> List[List[Dict[str, Any]]]:
            return [[job.to_dict() for job in group] for group in self.jobs.duplicate_groups()]

        @app.get("/jobs/{job_id}")
        def get_job(job_id: str) -> Dict[str, Any]:
            return self.jobs.get_job(job_id).to_dict()

        @app.patch("/jobs/{job_id}")
        def update_job(job_id: str, payload: JobUpdate) -> Dict[str, Any]:
            changes = payload.model_dump(exclude_unset=True)
            if payload.job_type is not None:
                changes['job_type'] = payload.job_type.value
            return self.jobs.update_job(job_id, changes).to_dict()

        @app.delete("/jobs/{job_id}", status_code=204)
        def delete_job(job_id: str) -> None:
            self.jobs.delete_job(job_id)

        @app.post("/courses", status_code=201)
        def create_course(payload: CourseCreate) -> Dict[str, Any]:
            data = payload.model_dump()
            data['provider'] = payload.provider.value
            data['level'] = payload.level.value
            return self.courses.create_course(data).to_dict()

        @app.get("/courses/recommended")
        def recommended_courses(skills: List[str] = Query(...),
                                limit: Optional[int] = Query(default=None, ge=1, le=100)) -> List[Dict[str, Any]]:
            return [c.to_dict() for c in self.courses.recommend_courses(skills, limit)]

        @app.get("/courses/{course_id}")
        def get_course(course_id: str) -> Dict[str, Any]:
            return self.courses.get_course(course_id).to_dict()

        @app.post("/skills/extract")
        def extract_skills(payload: ExtractRequest) -> Dict[str, Any]:
            skills = sorted(self.matcher.extract_skills(payload.text))
            return {'skills': skills, 'categories': self.matcher.categorize(skills)}

        @app.post("/skills/relevance")
        def skill_relevance(payload: RelevanceRequest) -> Dict[str, Any]:
            ranked = self.jobs.rank_skills(payload.text, payload.skills)
            return {'skills': [{'skill': skill, 'score': score} for skill, score in ranked]}
