""" Structured, non-fatal findings collected while building a changelog from Markdown. """

from __future__ import annotations

import dataclasses
import enum
import typing as t


class DiagnosticKind(enum.Enum):
    INVALID_VERSION = "invalid-version"
    INVALID_DATE = "invalid-date"
    MISSING_UNRELEASED = "missing-unreleased"
    UNRECOGNIZED_CHANGE_GROUP = "unrecognized-change-group"
    UNCATEGORIZED_CHANGE = "uncategorized-change"
    DUPLICATE_VERSION = "duplicate-version"
    EMPTY_RELEASE = "empty-release"
    RELEASE_ORDER = "release-order"
    MISSING_DATE = "missing-date"
    UNRECOGNIZED_RELEASE_TAG = "unrecognized-release-tag"
    UNEXPECTED_CONTENT = "unexpected-content"
    DUPLICATE_LINK_REFERENCE = "duplicate-link-reference"
    UNUSED_LINK_REFERENCE = "unused-link-reference"

    @property
    def blocking(self) -> bool:
        """Blocking diagnostics make the strict parser fail, all others are only reported by the linter."""

        return self in (DiagnosticKind.INVALID_VERSION, DiagnosticKind.INVALID_DATE)


@dataclasses.dataclass(frozen=True)
class Point:
    #: 1-based line number.
    line: int

    #: 1-based column number, counted in characters.
    column: int

    #: 0-based offset into the UTF-8 encoded document.
    offset: int


@dataclasses.dataclass(frozen=True)
class Span:
    start: Point
    end: Point


@dataclasses.dataclass
class Diagnostic:
    """A finding that refers to the Markdown construct between #start and #end."""

    message: str
    start: Point
    end: Point
    kind: DiagnosticKind

    @property
    def blocking(self) -> bool:
        return self.kind.blocking

    def to_json(self) -> dict[str, t.Any]:
        import databind.json

        result = t.cast(t.Dict[str, t.Any], databind.json.dump(self, Diagnostic))
        # databind dumps plain enums by member name, the wire format uses the kebab-case value.
        result["kind"] = self.kind.value
        return result


class Diagnostics:
    """Accumulates diagnostics in the order they are reported."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def __iter__(self) -> t.Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def report(self, kind: DiagnosticKind, message: str, span: Span) -> Diagnostic:
        diagnostic = Diagnostic(message, span.start, span.end, kind)
        self._items.append(diagnostic)
        return diagnostic

    def blocking(self) -> list[Diagnostic]:
        return [d for d in self._items if d.blocking]

    def sorted(self) -> list[Diagnostic]:
        """Returns the diagnostics ordered by their position in the document. The sort is stable, so diagnostics
        starting at the same position keep the order in which they were reported."""

        return sorted(self._items, key=lambda d: (d.start.offset, d.end.offset))
