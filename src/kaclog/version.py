""" Parsing of release headings: semantic versions, ISO-8601 release dates and the trailing release tags. """

from __future__ import annotations

import dataclasses
import datetime
import re
import typing as t

from kaclog.errors import InvalidDate, InvalidVersion

#: The regular expression recommended by https://semver.org for SemVer 2.0.0.
SEMVER_REGEX = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
UNRELEASED_REGEX = re.compile(r"^\[?unreleased\]?(?:\s+(?P<suffix>.*))?$", re.I)
RELEASE_HEADING_REGEX = re.compile(
    r"^\[?(?P<version>[^\[\]\s]+?)\]?(?:\s+-\s+(?P<date>.+?))?(?:\s+\[(?P<tag>[^\[\]]+)\])?$"
)

YANKED_TAG = "YANKED"
NO_CHANGES_TAG = "NO CHANGES"


@dataclasses.dataclass(frozen=True)
class ReleaseVersion:
    """A semantic version. The ordering operators compare by SemVer precedence, which ignores the build metadata, while
    equality takes it into account, so `1.0.0+a` is neither less nor greater than `1.0.0+b` but not equal to it."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        result = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            result += "-" + ".".join(self.prerelease)
        if self.build:
            result += "+" + ".".join(self.build)
        return result

    def __lt__(self, other: t.Any) -> bool:
        if not isinstance(other, ReleaseVersion):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __le__(self, other: t.Any) -> bool:
        if not isinstance(other, ReleaseVersion):
            return NotImplemented
        return self._precedence_key() <= other._precedence_key()

    def __gt__(self, other: t.Any) -> bool:
        if not isinstance(other, ReleaseVersion):
            return NotImplemented
        return self._precedence_key() > other._precedence_key()

    def __ge__(self, other: t.Any) -> bool:
        if not isinstance(other, ReleaseVersion):
            return NotImplemented
        return self._precedence_key() >= other._precedence_key()

    def _precedence_key(self) -> tuple[t.Any, ...]:
        # A version without pre-release identifiers has higher precedence than one with them. Numeric identifiers
        # sort below alphanumeric ones.
        identifiers = tuple((0, int(x), "") if x.isdigit() else (1, 0, x) for x in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, identifiers)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @staticmethod
    def parse(value: str) -> ReleaseVersion:
        """Parses a strict SemVer 2.0.0 string.

        Raises:
          InvalidVersion: If *value* is not a valid semantic version (for example `00.01.02` or `1.0`).
        """

        match = SEMVER_REGEX.match(value)
        if not match:
            raise InvalidVersion(value)
        prerelease = match.group("prerelease")
        build = match.group("build")
        return ReleaseVersion(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )


def parse_release_date(value: str) -> datetime.date:
    """Parses an ISO-8601 calendar date of the form `YYYY-MM-DD`.

    Raises:
      InvalidDate: If the format does not match or the date does not exist (e.g. `2023-02-30`).
    """

    if not DATE_REGEX.match(value):
        raise InvalidDate(value)
    try:
        return datetime.date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDate(value, str(exc))


@dataclasses.dataclass
class ReleaseHeading:
    """The parsed label of a level-2 heading. A #version of `None` denotes the Unreleased section."""

    version: ReleaseVersion | None
    date: datetime.date | None = None
    yanked: bool = False
    no_changes: bool = False

    #: A bracketed tag that was neither `YANKED` nor `NO CHANGES`.
    tag: str | None = None

    #: Text that follows the Unreleased label, e.g. a date. An Unreleased heading should have none.
    suffix: str | None = None

    @property
    def is_unreleased(self) -> bool:
        return self.version is None


def parse_release_heading(text: str) -> ReleaseHeading:
    """Parses the text of a release heading, which is either `[Unreleased]` (brackets and case optional) or a version
    optionally followed by ` - <date>` and a bracketed tag, such as `[1.0.0] - 2017-06-20 [YANKED]`. Anything after an
    Unreleased label is returned in #ReleaseHeading.suffix.

    Raises:
      InvalidVersion: If the heading is not Unreleased and does not start with a valid semantic version.
      InvalidDate: If a date is present but is not a valid `YYYY-MM-DD` date.
    """

    text = text.strip()
    unreleased = UNRELEASED_REGEX.match(text)
    if unreleased:
        return ReleaseHeading(None, suffix=unreleased.group("suffix"))

    match = RELEASE_HEADING_REGEX.match(text)
    if not match:
        raise InvalidVersion(text, "release heading must look like [<version>] - <yyyy>-<mm>-<dd>")

    heading = ReleaseHeading(ReleaseVersion.parse(match.group("version")))
    if match.group("date"):
        heading.date = parse_release_date(match.group("date"))

    tag = match.group("tag")
    if tag is not None:
        normalized = " ".join(tag.split()).upper()
        if normalized == YANKED_TAG:
            heading.yanked = True
        elif normalized == NO_CHANGES_TAG:
            heading.no_changes = True
        else:
            heading.tag = tag
    return heading
