"""Finding models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Finding severity, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class Location(BaseModel):
    """A 1-based, inclusive line range."""

    model_config = ConfigDict(frozen=True)

    start_line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "Location":
        if self.end_line < self.start_line:
            raise ValueError("end_line must not precede start_line")
        return self

    @classmethod
    def line(cls, number: int) -> "Location":
        return cls(start_line=number, end_line=number)


class Finding(BaseModel):
    """A single diagnostic result.

    Findings are pure values: producing one never mutates the document it
    describes.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    kind: str
    location: Location
    message: str

    def shifted(self, offset: int) -> "Finding":
        """Return a copy moved ``offset`` lines down."""
        location = Location(
            start_line=self.location.start_line + offset,
            end_line=self.location.end_line + offset,
        )
        return self.model_copy(update={"location": location})

    def sort_key(self) -> tuple[int, int, int, str, str]:
        return (
            self.severity.rank,
            self.location.start_line,
            self.location.end_line,
            self.kind,
            self.message,
        )
