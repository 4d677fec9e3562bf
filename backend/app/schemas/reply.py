"""Reply schemas."""
from datetime import datetime
from pydantic import Field
from app.schemas.common import CamelModel, Role


class ReplyCreate(CamelModel):
    content: str = Field(..., min_length=1)


class ReplyResponse(CamelModel):
    id: str
    feedback_id: str
    user_id: str
    user_name: str
    user_role: Role
    content: str
    created_at: datetime
