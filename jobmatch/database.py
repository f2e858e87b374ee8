"""Database models and connection management."""
from datetime import datetime
from typing import Optional, List
import logging
import uuid
from sqlalchemy import create_engine, Column, Integer, String, DateTime, Boolean, Text, JSON, or_
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from .domain.job import Job
from .domain.course import Course
from .error_handling import DuplicateFingerprintError

logger = logging.getLogger(__name__)

Base = declarative_base()


class JobModel(Base):
    """SQLAlchemy model for job postings."""
    __tablename__ = 'jobs'

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    company = Column(String(255), nullable=False, index=True)
    location_text = Column(String(255), nullable=False, default="")
    city = Column(String(120), nullable=True, index=True)
    district = Column(String(120), nullable=True, index=True)
    description = Column(Text, nullable=True)
    skills = Column(JSON, nullable=True)
    job_type = Column(String(50), nullable=False, index=True)
    source = Column(String(50), nullable=False, index=True)
    external_url = Column(String(512), nullable=True)
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    # Unique so that two concurrent creations cannot both insert the same posting.
    fingerprint = Column(String(64), nullable=False, unique=True, index=True)
    is_active = Column(Boolean, default=True, index=True)
    posted_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CourseModel(Base):
    """SQLAlchemy model for upskilling courses."""
    __tablename__ = 'courses'

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False)
    url = Column(String(512), nullable=False)
    tags = Column(JSON, nullable=True)
    provider = Column(String(50), nullable=False)
    level = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


def _new_id() -> str:
    return uuid.uuid4().hex


def _is_fingerprint_violation(error: IntegrityError) -> bool:
    return 'fingerprint' in str(error.orig).lower()


def _escape_like(text: str) -> str:
    return text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class Database:
    """Database connection and operation manager."""

    def __init__(self, db_url: str = "sqlite:///jobs.db", echo: bool = False):
        """Initialize database connection.

        Args:
            db_url: Database connection URL
            echo: Log emitted SQL
        """
        if db_url.startswith("sqlite") and (":memory:" in db_url or db_url.rstrip("/") == "sqlite:"):
            # One shared connection so every thread sees the same in-memory database
            self.engine = create_engine(
                db_url, echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(db_url, echo=echo)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._create_tables()

    def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_job(model: JobModel) -> Job:
        return Job(
            id=model.id,
            title=model.title,
            company=model.company,
            location_text=model.location_text or "",
            city=model.city or "",
            district=model.district or "",
            description=model.description or "",
            skills=list(model.skills or []),
            job_type=model.job_type,
            source=model.source,
            external_url=model.external_url,
            salary_min=model.salary_min,
            salary_max=model.salary_max,
            fingerprint=model.fingerprint,
            is_active=model.is_active,
            posted_at=model.posted_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _apply_job(model: JobModel, job: Job) -> None:
        model.title = job.title
        model.company = job.company
        model.location_text = job.location_text
        model.city = job.city
        model.district = job.district
        model.description = job.description
        model.skills = list(job.skills)
        model.job_type = job.job_type.value
        model.source = job.source.value
        model.external_url = job.external_url
        model.salary_min = job.salary_min
        model.salary_max = job.salary_max
        model.fingerprint = job.fingerprint
        model.is_active = job.is_active
        model.posted_at = job.posted_at
        model.updated_at = job.updated_at

    @staticmethod
    def _to_course(model: CourseModel) -> Course:
        return Course(
            id=model.id,
            title=model.title,
            url=model.url,
            tags=list(model.tags or []),
            provider=model.provider,
            level=model.level,
            description=model.description or "",
            is_active=model.is_active,
            created_at=model.created_at,
        )

    def add_job(self, job: Job) -> Job:
        """Insert a new job.

        Args:
            job: Job to store; it must carry a fingerprint

        Returns:
            Job: The stored job with its generated id

        Raises:
            DuplicateFingerprintError: If a job with the same fingerprint exists
        """
        if not job.fingerprint:
            raise ValueError("Job fingerprint is required before storing")
        if not job.id:
            job.id = _new_id()
        try:
            with self.Session() as session:
                model = JobModel(id=job.id)
                self._apply_job(model, job)
                session.add(model)
                session.commit()
                return self._to_job(model)
        except IntegrityError as e:
            if _is_fingerprint_violation(e):
                logger.warning(f"Rejected job '{job.title}' at '{job.company}': fingerprint already stored")
                raise DuplicateFingerprintError(job.fingerprint) from e
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error adding job to database: {str(e)}")
            raise

    def get_job(self, job_id: str) -> Optional[Job]:
        with self.Session() as session:
            model = session.get(JobModel, job_id)
            return self._to_job(model) if model else None

    def find_by_fingerprint(self, fingerprint: str) -> Optional[Job]:
        """Look up a job by its exact fingerprint."""
        with self.Session() as session:
            model = session.query(JobModel).filter_by(fingerprint=fingerprint).first()
            return self._to_job(model) if model else None

    def update_job(self, job: Job) -> Optional[Job]:
        """Overwrite a stored job with new field values.

        Returns:
            The updated job, or None if no job has that id

        Raises:
            DuplicateFingerprintError: If the new fingerprint belongs to another job
        """
        try:
            with self.Session() as session:
                model = session.get(JobModel, job.id)
                if model is None:
                    return None
                self._apply_job(model, job)
                session.commit()
                return self._to_job(model)
        except IntegrityError as e:
            if _is_fingerprint_violation(e):
                raise DuplicateFingerprintError(job.fingerprint) from e
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating job {job.id}: {str(e)}")
            raise

    def delete_job(self, job_id: str) -> bool:
        with self.Session() as session:
            model = session.get(JobModel, job_id)
            if model is None:
                return False
            session.delete(model)
            session.commit()
            return True

    def get_active_jobs(self) -> List[Job]:
        with self.Session() as session:
            models = session.query(JobModel).filter(
                JobModel.is_active.is_(True)
            ).order_by(JobModel.posted_at, JobModel.id).all()
            return [self._to_job(m) for m in models]

    def search_jobs(self, query: str) -> List[Job]:
        """Search active jobs by case-insensitive text.

        The text is matched literally against title, company, description
        and each of the job's skills.

        Args:
            query: Text to look for

        Returns:
            List[Job]: Matching active jobs
        """
        pattern = f"%{_escape_like(query)}%"
        needle = query.lower()
        with self.Session() as session:
            text_matches = {
                row.id for row in session.query(JobModel.id).filter(
                    JobModel.is_active.is_(True),
                    or_(
                        JobModel.title.ilike(pattern, escape='\\'),
                        JobModel.company.ilike(pattern, escape='\\'),
                        JobModel.description.ilike(pattern, escape='\\'),
                    ),
                )
            }
            models = session.query(JobModel).filter(
                JobModel.is_active.is_(True)
            ).order_by(JobModel.posted_at, JobModel.id).all()
            return [
                self._to_job(m) for m in models
                if m.id in text_matches or any(needle in s.lower() for s in (m.skills or []))
            ]

    def add_course(self, course: Course) -> Course:
        if not course.id:
            course.id = _new_id()
        with self.Session() as session:
            model = CourseModel(
                id=course.id,
                title=course.title,
                url=course.url,
                tags=list(course.tags),
                provider=course.provider.value,
                level=course.level.value,
                description=course.description,
                is_active=course.is_active,
                created_at=course.created_at,
            )
            session.add(model)
            session.commit()
            return self._to_course(model)

    def get_course(self, course_id: str) -> Optional[Course]:
        with self.Session() as session:
            model = session.get(CourseModel, course_id)
            return self._to_course(model) if model else None

    def get_active_courses(self) -> List[Course]:
        with self.Session() as session:
            models = session.query(CourseModel).filter(
                CourseModel.is_active.is_(True)
            ).order_by(CourseModel.created_at, CourseModel.id).all()
            return [self._to_course(m) for m in models]
