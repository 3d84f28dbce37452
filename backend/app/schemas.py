"""
Pydantic schemas for request and response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GitHubRepoResponse(BaseModel):
    id: int
    full_name: str
    description: Optional[str] = None
    private: bool = False
    html_url: Optional[str] = None
    open_issues_count: Optional[int] = None


class ModelCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class ModelUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        # Omitting name leaves it unchanged; an explicit null would clear a required column.
        if v is None:
            raise ValueError("name cannot be null")
        return v


class ModelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    status: str
    training_started_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RepoUpdate(BaseModel):
    description: Optional[str] = None
    model_id: Optional[int] = None


class RepoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    description: Optional[str] = None
    private: bool = False
    model_id: Optional[int] = None
    hook_id: Optional[int] = None
    event_count: int = 0
    last_event: Optional[str] = None
    last_event_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class HookResponse(BaseModel):
    status: str
    event: str
