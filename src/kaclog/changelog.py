""" The in-memory model of a Keep a Changelog document and the edits that can be applied to it. """

from __future__ import annotations

import dataclasses
import datetime
import logging
import typing as t

from kaclog.change_group import ChangeGroup
from kaclog.errors import DuplicateVersion, EmptyChangeText, UnrecognizedChangeGroup
from kaclog.links import validate_link
from kaclog.version import ReleaseVersion, parse_release_date

if t.TYPE_CHECKING:
    from kaclog.configuration import ChangelogConfig

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Changelog"
DEFAULT_DESCRIPTION = (
    "All notable changes to this project will be documented in this file.\n\n"
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),\n"
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html)."
)


def _resolve_group(group: ChangeGroup | str) -> ChangeGroup:
    if isinstance(group, ChangeGroup):
        return group
    resolved = ChangeGroup.resolve(group)
    if resolved is None:
        raise UnrecognizedChangeGroup(group)
    return resolved


class Changes(t.MutableMapping[ChangeGroup, t.List[str]]):
    """Maps change groups to their entries. A group is only present while it has at least one entry. Iteration follows
    insertion order; use #ordered() for the canonical rendering order.

    Entries that were found in a release without a valid group heading are kept in #uncategorized so that no content
    of a parsed document is lost. They are not part of the mapping."""

    def __init__(
        self,
        entries: t.Mapping[ChangeGroup, t.Iterable[str]] | None = None,
        uncategorized: t.Iterable[str] | None = None,
    ) -> None:
        self._entries: dict[ChangeGroup, list[str]] = {}
        self.uncategorized: list[str] = list(uncategorized or ())
        for group, items in (entries or {}).items():
            self[_resolve_group(group)] = list(items)

    def __repr__(self) -> str:
        if self.uncategorized:
            return f"Changes({self._entries!r}, uncategorized={self.uncategorized!r})"
        return f"Changes({self._entries!r})"

    def __getitem__(self, group: ChangeGroup) -> list[str]:
        return self._entries[group]

    def __setitem__(self, group: ChangeGroup, items: list[str]) -> None:
        if not isinstance(group, ChangeGroup):
            raise TypeError(f"expected ChangeGroup, got {type(group).__name__}")
        if items:
            self._entries[group] = items
        else:
            self._entries.pop(group, None)

    def __delitem__(self, group: ChangeGroup) -> None:
        del self._entries[group]

    def __iter__(self) -> t.Iterator[ChangeGroup]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: t.Any) -> bool:
        if isinstance(other, Changes):
            return self._entries == other._entries and self.uncategorized == other.uncategorized
        if isinstance(other, t.Mapping):
            return self._entries == dict(other)
        return NotImplemented

    def add(self, group: ChangeGroup | str, text: str) -> None:
        self._entries.setdefault(_resolve_group(group), []).append(text)

    def ordered(self) -> list[tuple[ChangeGroup, list[str]]]:
        """Returns the non-empty groups in canonical order (Added, Changed, Deprecated, Removed, Fixed, Security)."""

        return [(group, self._entries[group]) for group in ChangeGroup.ordered(self._entries)]

    def count(self) -> int:
        """The number of categorized entries."""

        return sum(len(items) for items in self._entries.values())

    def is_empty(self) -> bool:
        return self.count() == 0 and not self.uncategorized

    def clear(self) -> None:
        self._entries.clear()
        self.uncategorized.clear()

    def copy(self) -> Changes:
        return Changes(self._entries, self.uncategorized)


@dataclasses.dataclass
class Release:
    """Either the Unreleased section (no #version, no #date) or a finalized release."""

    version: ReleaseVersion | None = None
    date: datetime.date | None = None
    yanked: bool = False

    #: Set for releases tagged `[NO CHANGES]`, i.e. a version bump without notable changes.
    no_changes: bool = False

    #: The compare link, bound to the release's label in the link reference definitions.
    link: str | None = None

    changes: Changes = dataclasses.field(default_factory=Changes)

    def __post_init__(self) -> None:
        if isinstance(self.version, str):
            self.version = ReleaseVersion.parse(self.version)
        if isinstance(self.date, str):
            self.date = parse_release_date(self.date)
        if not isinstance(self.changes, Changes):
            self.changes = Changes(self.changes)

    @property
    def is_unreleased(self) -> bool:
        return self.version is None

    @property
    def label(self) -> str:
        return "Unreleased" if self.version is None else str(self.version)

    def add(self, group: ChangeGroup | str, text: str) -> None:
        """Appends *text* to the entries of *group*, creating the group if needed.

        Raises:
          EmptyChangeText: If *text* is empty or only whitespace.
          UnrecognizedChangeGroup: If *group* is a string that does not name one of the change groups.
        """

        text = text.strip()
        if not text:
            raise EmptyChangeText()
        self.changes.add(group, text)


class Releases(t.Sequence[Release]):
    """The finalized releases of a changelog, most recent first. Every version occurs at most once."""

    def __init__(self, releases: t.Iterable[Release] | None = None) -> None:
        self._content: list[Release] = []
        self._index: dict[ReleaseVersion, Release] = {}
        for release in releases or ():
            self.append(release)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._content!r})"

    @t.overload
    def __getitem__(self, index: int) -> Release: ...

    @t.overload
    def __getitem__(self, index: slice) -> list[Release]: ...

    def __getitem__(self, index: int | slice) -> Release | list[Release]:
        return self._content[index]

    def __len__(self) -> int:
        return len(self._content)

    def __iter__(self) -> t.Iterator[Release]:
        return iter(self._content)

    def __contains__(self, item: t.Any) -> bool:
        if isinstance(item, Release):
            return item in self._content
        if isinstance(item, str):
            item = ReleaseVersion.parse(item)
        return item in self._index

    def __eq__(self, other: t.Any) -> bool:
        if isinstance(other, Releases):
            return self._content == other._content
        if isinstance(other, list):
            return self._content == other
        return NotImplemented

    def get(self, version: ReleaseVersion | str) -> Release | None:
        if isinstance(version, str):
            version = ReleaseVersion.parse(version)
        return self._index.get(version)

    def insert(self, index: int, release: Release) -> None:
        """Inserts a finalized release at *index*.

        Raises:
          DuplicateVersion: If a release with the same version already exists.
          ValueError: If *release* has no version.
        """

        if release.version is None:
            raise ValueError("the Unreleased section cannot be added to the list of releases")
        if release.version in self._index:
            raise DuplicateVersion(release.version)
        self._content.insert(index, release)
        self._index[release.version] = release

    def append(self, release: Release) -> None:
        self.insert(len(self._content), release)

    def remove(self, version: ReleaseVersion | str) -> Release:
        release = self.get(version)
        if release is None:
            raise KeyError(str(version))
        self._content.remove(release)
        del self._index[t.cast(ReleaseVersion, release.version)]
        return release


@dataclasses.dataclass
class PromoteOptions:
    """Describes the release that the Unreleased section is promoted to. A version and date may also be passed as
    strings."""

    version: ReleaseVersion

    #: The release date. If not set, the current date is used.
    date: datetime.date | None = None

    link: str | None = None
    yanked: bool = False
    no_changes: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.version, str):
            self.version = ReleaseVersion.parse(self.version)
        if isinstance(self.date, str):
            self.date = parse_release_date(self.date)
        if self.link is not None:
            validate_link(self.link)


@dataclasses.dataclass
class Changelog:
    """A changelog in [Keep a Changelog](https://keepachangelog.com/en/1.1.0/) format. The model is a plain tree: the
    changelog owns its releases and every release owns its changes."""

    title: str = ""

    #: The paragraphs between the title and the first release heading, separated by blank lines.
    description: str = ""

    #: The standing section for upcoming changes. It never has a version or a date.
    unreleased: Release = dataclasses.field(default_factory=Release)

    releases: Releases = dataclasses.field(default_factory=Releases)

    def __post_init__(self) -> None:
        if not isinstance(self.releases, Releases):
            self.releases = Releases(self.releases)

    def __str__(self) -> str:
        return self.to_markdown()

    @staticmethod
    def new(title: str = DEFAULT_TITLE, description: str = DEFAULT_DESCRIPTION) -> Changelog:
        """Creates an empty changelog with the conventional title and description."""

        return Changelog(title=title, description=description)

    @staticmethod
    def parse(text: str, config: ChangelogConfig | None = None) -> Changelog:
        """Parses *text* strictly, see #kaclog.parser.parse()."""

        from kaclog.parser import parse

        return parse(text, config)

    def to_markdown(self) -> str:
        from kaclog.render import render

        return render(self)

    def promote_unreleased(
        self,
        options: PromoteOptions,
        clock: t.Callable[[], datetime.date] = datetime.date.today,
    ) -> Release:
        """Moves the changes of the Unreleased section into a new release that is inserted at the top of #releases.
        The Unreleased section stays in place with no changes. If *options* carry no date, *clock* supplies it.

        Raises:
          DuplicateVersion: If a release with the target version already exists. The changelog is left unmodified.
        """

        if options.version in self.releases:
            raise DuplicateVersion(options.version)

        release = Release(
            version=options.version,
            date=options.date or clock(),
            yanked=options.yanked,
            no_changes=options.no_changes,
            link=options.link,
            changes=self.unreleased.changes.copy(),
        )
        self.releases.insert(0, release)
        self.unreleased.changes.clear()
        logger.debug(
            "Promoted Unreleased to <subj>%s</subj> with <val>%d</val> changes", release.version, release.changes.count()
        )
        return release

