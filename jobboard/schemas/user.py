# user.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _validate_email_like(v: str) -> str:
    value = (v or "").strip()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value


def _trim_skills(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        v = v.split(",")
    if not isinstance(v, (list, tuple)):
        raise ValueError("skills must be a list of strings")
    return [str(skill).strip() for skill in v if skill is not None and str(skill).strip()]


class UserBase(BaseModel):
    email: str
    name: str = Field(min_length=1, max_length=255)
    wallet_address: Optional[str] = Field(default=None, max_length=64)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _validate_email_like(v)


class UserCreate(UserBase):
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _validate_email_like(v)


class UserRead(UserBase):
    id: int
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    skills: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_null_skills(cls, v: Any) -> list[str]:
        return list(v or [])


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    bio: Optional[str] = None
    linkedin_url: Optional[str] = Field(default=None, max_length=512)
    wallet_address: Optional[str] = Field(default=None, max_length=64)
    skills: Optional[list[str]] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def _trim(cls, v: Any) -> list[str]:
        return _trim_skills(v)


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: int


class AuthResponse(Token):
    token_type: str = "bearer"
    user: UserRead
