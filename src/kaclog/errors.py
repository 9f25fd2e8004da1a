from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from kaclog.diagnostics import Diagnostic
    from kaclog.version import ReleaseVersion


class ChangelogError(Exception):
    """Base class for errors raised by the changelog library."""


class InvalidVersion(ChangelogError, ValueError):
    def __init__(self, value: str, reason: str = "not a valid semantic version") -> None:
        super().__init__(f"Could not parse version {value!r}: {reason}")
        self.value = value
        self.reason = reason


class InvalidDate(ChangelogError, ValueError):
    def __init__(self, value: str, reason: str = "expected YYYY-MM-DD") -> None:
        super().__init__(f"Could not parse release date {value!r}: {reason}")
        self.value = value
        self.reason = reason


class InvalidLink(ChangelogError, ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"Release link {value!r} is not an absolute URL")
        self.value = value


class UnrecognizedChangeGroup(ChangelogError, ValueError):
    def __init__(self, name: str) -> None:
        from kaclog.change_group import ChangeGroup

        choices = ", ".join(g.value for g in ChangeGroup)
        super().__init__(f"{name!r} is not a change group (expected one of {choices})")
        self.name = name


class EmptyChangeText(ChangelogError, ValueError):
    def __init__(self) -> None:
        super().__init__("A change entry must not be empty")


class DuplicateVersion(ChangelogError):
    def __init__(self, version: ReleaseVersion) -> None:
        super().__init__(f"Release {version} already exists in the changelog")
        self.version = version


class ParseChangelogError(ChangelogError):
    """Raised by the strict parser if the text contains blocking problems. All of them are available in #errors."""

    def __init__(self, errors: list[Diagnostic]) -> None:
        lines = [f"{d.start.line}:{d.start.column}: {d.message}" for d in errors]
        super().__init__("Could not parse changelog\n" + "\n".join(lines))
        self.errors = errors
