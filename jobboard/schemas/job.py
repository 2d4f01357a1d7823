# job.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def split_csv(value: Any) -> list[str]:
    """Split a comma-separated string (or list of strings) into trimmed, non-empty items."""

    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(item) for item in value if item is not None]
    else:
        parts = [str(value)]
    return [part.strip() for part in parts if part and part.strip()]


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    # Accepts ["Python", "React"] or "Python, React".
    skills: list[str] = Field(default_factory=list)
    budget: float = Field(ge=0)
    salary: Optional[float] = Field(default=None, ge=0)
    location: Optional[str] = Field(default=None, max_length=255)
    tags: list[str] = Field(default_factory=list)
    payment_tx_hash: str = Field(min_length=1, max_length=66)

    @field_validator("skills", "tags", mode="before")
    @classmethod
    def _split_comma_lists(cls, v: Any) -> list[str]:
        return split_csv(v)

    @field_validator("title", "description", "payment_tx_hash")
    @classmethod
    def _strip_required_text(cls, v: str) -> str:
        value = v.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class JobCreator(BaseModel):
    id: int
    name: str
    wallet_address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class JobRead(BaseModel):
    id: int
    title: str
    description: str
    skills: list[str] = Field(default_factory=list)
    budget: float
    salary: Optional[float] = None
    location: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    created_by: int
    creator: Optional[JobCreator] = None
    payment_tx_hash: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", "tags", mode="before")
    @classmethod
    def _coerce_null_lists(cls, v: Any) -> list[str]:
        return list(v or [])


class JobSearchFilters(BaseModel):
    q: Optional[str] = None
    skills: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[str] = None


class JobListFilters(BaseModel):
    skills: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[str] = None
    search: Optional[str] = None


class JobRecommendation(JobRead):
    similarity: float = Field(ge=0, le=1)


class SkillSuggestionResponse(BaseModel):
    query: str
    suggestions: list[str] = Field(default_factory=list)
