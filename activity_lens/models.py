from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    PUSH = "push"
    WATCH = "watch"  # starring a repository
    ISSUES = "issues"
    PULL_REQUEST = "pull_request"
    CREATE = "create"
    FORK = "fork"
    OTHER = "other"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ActivityEvent(_Frozen):
    kind: EventKind = EventKind.OTHER
    repo: str = ""                    # "owner/name"
    created_at: datetime              # aware, UTC
    commit_count: int | None = None   # push
    action: str | None = None         # issues / pull_request
    ref_type: str | None = None       # create
    ref: str | None = None            # create


class RepositorySummary(_Frozen):
    name: str = ""
    language: str | None = None
    size: int = Field(default=0, ge=0)


class LanguageWeight(_Frozen):
    language: str
    size: int


class LanguageShare(_Frozen):
    language: str
    percentage: float


class LanguageBreakdown(_Frozen):
    weights: tuple[LanguageWeight, ...] = ()  # first-occurrence order
    total: int = 0
    primary: str | None = None                # None = no language found


class Consistency(_Frozen):
    percent: int
    active_days: int
    total_days: int


class PeakHour(_Frozen):
    hour: int = Field(ge=0, le=23)
    label: str


class Synopsis(_Frozen):
    """Derived activity metrics; None means "not available"."""
    frequency: float | None = None    # events per week
    consistency: Consistency | None = None
    peak_hour: PeakHour | None = None


class DailyVolume(_Frozen):
    day: date
    count: int


class ActivityProfile(_Frozen):
    synopsis: Synopsis
    languages: LanguageBreakdown
    top_languages: tuple[LanguageShare, ...] = ()
    volume: tuple[DailyVolume, ...] = ()
