# Pydantic data models for lint diagnostics: Severity, SourceLocation, SourceRange, Fix, Note, Diagnostic.

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from serverlint.context import SourceLocationConverter


class Severity(str, Enum):
    """
    Diagnostic severity, totally ordered: info < warning < error.

    Inherits from str so values serialize as "info" / "warning" / "error",
    but comparisons use the severity rank rather than string order.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class SourceLocation(BaseModel):
    """1-based position in a file. Without end fields it denotes a point."""

    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)

    model_config = {"frozen": True}

    @property
    def is_point(self) -> bool:
        return self.end_line is None and self.end_column is None

    @classmethod
    def from_position(cls, offset: int, converter: SourceLocationConverter) -> SourceLocation:
        """Point location for a single byte offset."""
        line, column = converter.location(offset)
        return cls(line=line, column=column)

    @classmethod
    def from_node(cls, node: TSNode, converter: SourceLocationConverter) -> SourceLocation:
        """
        Location spanning a node's token content.

        Leading/trailing whitespace and comments inside the node's byte range
        are excluded, so the range starts at the first real token and ends
        right after the last one.
        """
        start, end = converter.content_span(node)
        line, column = converter.location(start)
        end_line, end_column = converter.location(end)
        return cls(line=line, column=column, end_line=end_line, end_column=end_column)


class SourceRange(BaseModel):
    """Span replaced by a Fix."""

    start: SourceLocation
    end: SourceLocation

    model_config = {"frozen": True}

    @classmethod
    def from_node(cls, node: TSNode, converter: SourceLocationConverter) -> SourceRange:
        """Range covering a node's token content, the same span as SourceLocation.from_node."""
        start, end = converter.content_span(node)
        return cls(
            start=SourceLocation.from_position(start, converter),
            end=SourceLocation.from_position(end, converter),
        )


class Fix(BaseModel):
    """
    Machine-applicable text replacement.

    replacement may be "" (a deletion) but is always present. With a range the
    replacement substitutes that span; without one it is inserted at the
    diagnostic location.
    """

    description: str
    replacement: str
    range: Optional[SourceRange] = None

    model_config = {"frozen": True}


class Note(BaseModel):
    """Supplementary context attached to a diagnostic."""

    message: str
    location: Optional[SourceLocation] = None

    model_config = {"frozen": True}


class Diagnostic(BaseModel):
    """A single finding reported by a rule (e.g. a leaked import at line 3)."""

    rule_identifier: str = Field(..., min_length=1)
    severity: Severity
    message: str
    file_path: str
    location: SourceLocation
    fix: Optional[Fix] = None
    notes: tuple[Note, ...] = ()

    model_config = {"frozen": True}
