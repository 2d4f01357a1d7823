# skills.py
from typing import Optional

from pydantic import BaseModel, Field


class ExtractSkillsRequest(BaseModel):
    text: Optional[str] = None


class ExtractSkillsResponse(BaseModel):
    skills: list[str] = Field(default_factory=list)


class SimilarityRequest(BaseModel):
    text_a: Optional[str] = None
    text_b: Optional[str] = None


class SimilarityResponse(BaseModel):
    similarity: float = Field(ge=0, le=1)


class ClosestMatchesRequest(BaseModel):
    query: Optional[str] = None
    candidates: list[str] = Field(default_factory=list, max_length=1000)


class ScoredMatch(BaseModel):
    candidate: str
    score: float = Field(ge=0, le=1)


class ClosestMatchesResponse(BaseModel):
    matches: list[str] = Field(default_factory=list)
    scored: list[ScoredMatch] = Field(default_factory=list)
