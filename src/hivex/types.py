"""Typed input records: project descriptors and reports.

Records arrive as loosely shaped JSON documents. They are deserialized into
pydantic models here, so everything downstream can assume the required
fields exist and are non-empty strings.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

T = TypeVar('T', bound=BaseModel)

_DATETIME = TypeAdapter(datetime)


class Severity(str, Enum):
    """Closed set of report severities."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def names(cls) -> List[str]:
        return [s.value for s in cls]


class Project(BaseModel):
    """A project descriptor read from ``project/<slug>/project.json``."""

    model_config = ConfigDict(extra='allow')

    slug: StrictStr = Field(min_length=1)
    title: StrictStr = Field(min_length=1)
    status: StrictStr = Field(min_length=1)
    branch: StrictStr = Field(min_length=1)
    target_url: Optional[str] = None
    commit: Optional[str] = None

    @field_validator('slug')
    @classmethod
    def _slug_is_a_single_path_segment(cls, v: str) -> str:
        # The slug names the results directory and the results-<slug>.json file.
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError("slug must not contain path separators or be '.' or '..'")
        return v

    @field_validator('target_url', 'commit', mode='before')
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class Report(BaseModel):
    """A single submitted finding read from ``results/<id>/result.json``."""

    model_config = ConfigDict(extra='allow')

    id: StrictStr = Field(min_length=1)
    author_github: StrictStr = Field(min_length=1)
    type: StrictStr = Field(min_length=1)
    severity: StrictStr = Field(min_length=1)
    impact: StrictStr = Field(min_length=1)
    submitted_at: StrictStr = Field(min_length=1)
    co_authors: Optional[List[str]] = None
    steps: Optional[Union[str, List[Any]]] = None
    repro_cmds: Optional[Union[str, List[Any]]] = None

    _source: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @model_validator(mode='wrap')
    @classmethod
    def _keep_source(cls, data: Any, handler):
        report = handler(data)
        if isinstance(data, dict):
            report._source = copy.deepcopy(data)
        return report

    @field_validator('co_authors', mode='before')
    @classmethod
    def _clean_co_authors(cls, v: Any) -> Optional[List[str]]:
        if not isinstance(v, list):
            return None
        return [handle for handle in v if isinstance(handle, str) and handle]

    @field_validator('steps', 'repro_cmds', mode='before')
    @classmethod
    def _optional_sized(cls, v: Any) -> Optional[Union[str, List[Any]]]:
        return v if isinstance(v, (str, list)) else None

    @property
    def contributors(self) -> List[str]:
        """Author first, then co-authors in their listed order."""
        return [self.author_github, *(self.co_authors or [])]

    @property
    def submitted(self) -> Optional[datetime]:
        return parse_timestamp(self.submitted_at)

    def to_dict(self) -> Dict[str, Any]:
        """The source document exactly as it was read.

        Reports built without a source mapping fall back to the model's fields.
        """
        if self._source is not None:
            return copy.deepcopy(self._source)
        return self.model_dump(mode='json', exclude_none=True)


@dataclass
class ParseResult(Generic[T]):
    """Outcome of deserializing one record: a value or a list of errors."""
    value: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def _parse(model: Type[T], data: Any) -> ParseResult[T]:
    if not isinstance(data, dict):
        return ParseResult(errors=[f"expected a JSON object, got {type(data).__name__}"])
    try:
        return ParseResult(value=model.model_validate(data))
    except ValidationError as exc:
        errors = []
        for err in exc.errors():
            loc = '.'.join(str(part) for part in err['loc']) or '<root>'
            errors.append(f"{loc}: {err['msg']}")
        return ParseResult(errors=errors)


def parse_project(data: Any) -> ParseResult[Project]:
    return _parse(Project, data)


def parse_report(data: Any) -> ParseResult[Report]:
    return _parse(Report, data)


def validate_project(data: Any) -> bool:
    """True when *data* has non-empty string slug, title, status and branch."""
    return parse_project(data).ok


def validate_report(data: Any) -> bool:
    """True when *data* has all six required report fields as non-empty strings."""
    return parse_report(data).ok


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC.

    Returns None for anything that does not parse.
    """
    if not value:
        return None
    try:
        dt = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def report_sort_key(report: Report) -> Tuple[int, float]:
    # Unparseable timestamps go last; sorted() keeps their relative order.
    dt = report.submitted
    if dt is None:
        return (1, 0.0)
    return (0, dt.timestamp())
