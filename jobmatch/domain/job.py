from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class JobSource(Enum):
    """Enumeration of job sources."""
    ADZUNA = "adzuna"
    JOOBLE = "jooble"
    MANUAL = "manual"
    SCRAPER = "scraper"


class JobType(Enum):
    """Enumeration of employment types."""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"
    FREELANCE = "freelance"


# Fields whose change invalidates a stored fingerprint.
IDENTITY_FIELDS = ('title', 'company', 'location_text', 'external_url')


@dataclass(frozen=True)
class JobSignature:
    """Minimal projection of a job used for fingerprinting and fuzzy matching."""
    title: str
    company: str
    location_text: str
    external_url: Optional[str] = None


@dataclass
class Job:
    """Job posting record."""
    title: str
    company: str
    location_text: str
    id: Optional[str] = None
    city: str = ""
    district: str = ""
    description: str = ""
    skills: List[str] = field(default_factory=list)
    job_type: JobType = JobType.FULL_TIME
    source: JobSource = JobSource.MANUAL
    external_url: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    fingerprint: Optional[str] = None
    is_active: bool = True
    posted_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        """Validate the job data after initialization."""
        if not self.title or not self.company:
            raise ValueError("Title and company are required fields")

        if not isinstance(self.source, JobSource):
            self.source = JobSource(self.source)
        if not isinstance(self.job_type, JobType):
            self.job_type = JobType(self.job_type)

    def signature(self) -> JobSignature:
        """Project this job onto its identity fields."""
        return JobSignature(
            title=self.title,
            company=self.company,
            location_text=self.location_text,
            external_url=self.external_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['job_type'] = self.job_type.value
        data['source'] = self.source.value
        data['posted_at'] = self.posted_at.isoformat()
        data['updated_at'] = self.updated_at.isoformat()
        return data
