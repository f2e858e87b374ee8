from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class CourseProvider(Enum):
    """Enumeration of course providers."""
    YOUTUBE = "youtube"
    UDEMY = "udemy"
    COURSERA = "coursera"
    LINKEDIN = "linkedin"
    INTERNAL = "internal"
    OTHER = "other"


class CourseLevel(Enum):
    """Enumeration of course difficulty levels."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass
class Course:
    """Upskilling course record.

    Attributes:
        title: Course title
        url: Link to the course
        tags: Skill tags used for recommendation ranking
        provider: Platform hosting the course
        level: Difficulty level
    """
    title: str
    url: str
    id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    provider: CourseProvider = CourseProvider.OTHER
    level: CourseLevel = CourseLevel.BEGINNER
    description: str = ""
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        """Validate required fields and coerce enum values."""
        if not self.title or not self.url:
            raise ValueError("Course title and URL are required fields")

        if not isinstance(self.provider, CourseProvider):
            self.provider = CourseProvider(self.provider)
        if not isinstance(self.level, CourseLevel):
            self.level = CourseLevel(self.level)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provider'] = self.provider.value
        data['level'] = self.level.value
        data['created_at'] = self.created_at.isoformat()
        return data
