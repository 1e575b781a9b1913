from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.models.task import TaskStatus

TITLE_MAX_LENGTH = 255


def _clean_title(v):
    if v is None:
        raise ValueError("title cannot be null")
    if not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    """Partial update: only the fields present in the payload are applied."""

    title: Optional[str] = Field(None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("status cannot be null")
        return v


class TaskOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskDetail(BaseModel):
    task: TaskOut


class TaskEnvelope(TaskDetail):
    message: str


class PageMeta(BaseModel):
    current_page: int
    last_page: int
    per_page: int
    total: int
    # 1-based positions of the first/last item on the page, null when empty
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True)


class PageLinks(BaseModel):
    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None


class TaskPage(BaseModel):
    data: List[TaskOut]
    meta: PageMeta
    links: PageLinks
