"""Monitor schemas for API and engine state."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

MonitorStatusLiteral = Literal["UP", "DOWN", "PENDING", "MAINTENANCE"]
ProbeStatusLiteral = Literal["UP", "DOWN"]


def normalize_url(url: str) -> str:
    """Trim a URL and prepend https:// when it carries no http(s) scheme."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


class HistoryEntry(BaseModel):
    """One probe record in a monitor's history."""
    id: str
    timestamp: int  # epoch ms
    latency: int = 0  # ms, always 0 for DOWN
    status: ProbeStatusLiteral
    message: Optional[str] = None
    status_code: Optional[int] = None

    class Config:
        from_attributes = True


class MonitorState(BaseModel):
    """Full monitor state, history newest-first."""
    id: str
    name: str
    url: str
    interval: int = 5  # minutes
    status: MonitorStatusLiteral = "PENDING"
    last_checked: Optional[int] = None  # epoch ms
    history: List[HistoryEntry] = Field(default_factory=list)

    class Config:
        from_attributes = True


class MonitorCreate(BaseModel):
    """Schema for creating a new monitor."""
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1)
    interval: int = Field(default=5, ge=1, le=1440)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("url")
    @classmethod
    def scheme_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url must not be blank")
        return normalize_url(value)


class MonitorUpdate(BaseModel):
    """Schema for updating a monitor. Blank strings leave the field unchanged."""
    name: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = None
    interval: Optional[int] = Field(None, ge=1, le=1440)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("url")
    @classmethod
    def scheme_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return normalize_url(value)


class SweepResult(BaseModel):
    """Outcome of one monitor during a global sweep."""
    monitor_id: str
    name: str
    checked: bool
    status: Optional[ProbeStatusLiteral] = None
    latency: Optional[int] = None
    error: Optional[str] = None


class DeleteResponse(BaseModel):
    """Response from deleting a monitor."""
    id: str
    deleted: bool
