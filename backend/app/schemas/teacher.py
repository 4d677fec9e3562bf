"""Teacher schemas. Aggregate fields are response-only."""
from datetime import datetime
from pydantic import Field
from app.schemas.common import CamelModel


class TeacherCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    subject: str = Field(..., min_length=1, max_length=255)
    bio: str | None = None
    profile_image: str | None = None
    office_hours: str | None = None
    contact_info: str | None = None
    teaching_philosophy: str | None = None


class TeacherProfileUpdate(CamelModel):
    bio: str | None = None
    profile_image: str | None = None
    office_hours: str | None = None
    contact_info: str | None = None
    teaching_philosophy: str | None = None


class TeacherResponse(CamelModel):
    id: str
    name: str
    department: str
    subject: str
    average_rating: float
    total_feedback: int
    bio: str | None = None
    profile_image: str | None = None
    office_hours: str | None = None
    contact_info: str | None = None
    teaching_philosophy: str | None = None
    created_at: datetime | None = None


class RankedTeacher(TeacherResponse):
    rank: int


class ImprovedTeacher(RankedTeacher):
    improvement: float
    recent_average: float
    previous_average: float
