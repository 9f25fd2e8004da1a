""" Builds a #Changelog from Markdown text in a single forward pass over the document's top-level blocks.

Parsing is error tolerant: problems are collected as #Diagnostic#s and the builder always produces a usable model.
Only invalid version and date syntax in a release heading are considered blocking; #parse() fails on those, while
#lint() reports everything. """

from __future__ import annotations

import dataclasses
import logging
import typing as t

from kaclog.change_group import ChangeGroup
from kaclog.changelog import Changelog, Release
from kaclog.configuration import ChangelogConfig
from kaclog.diagnostics import Diagnostic, DiagnosticKind, Diagnostics, Span
from kaclog.errors import InvalidDate, InvalidVersion, ParseChangelogError
from kaclog.links import UNRELEASED_LABEL, LinkReference, LinkReferenceTable
from kaclog.markdown import Block, BlockKind, SourceMap, parse_blocks
from kaclog.version import ReleaseVersion, parse_release_heading

__all__ = ["build", "parse", "lint"]
logger = logging.getLogger(__name__)


@dataclasses.dataclass
class _Section:
    """The state of the release section that is currently being read."""

    #: `None` if the heading could not be parsed; the content of the section is then read but discarded.
    release: Release | None
    span: Span

    #: The group that list items are added to. `None` before the first group heading and after an unrecognized one.
    group: ChangeGroup | None = None
    seen_group_heading: bool = False


class ChangelogBuilder:
    def __init__(self, text: str, config: ChangelogConfig | None = None) -> None:
        self.text = text
        self.config = config or ChangelogConfig()
        self.diagnostics = Diagnostics()
        self.changelog = Changelog()
        self.links = LinkReferenceTable()
        self._title_span: Span | None = None
        self._paragraphs: list[str] = []
        self._section: _Section | None = None
        self._first_section_span: Span | None = None
        self._unreleased_span: Span | None = None
        self._release_spans: dict[ReleaseVersion, Span] = {}

    def build(self) -> tuple[Changelog, list[Diagnostic]]:
        dispatch: dict[BlockKind, t.Callable[[Block], None]] = {
            BlockKind.HEADING: self._heading,
            BlockKind.LIST_ITEM: self._list_item,
            BlockKind.PARAGRAPH: self._paragraph,
            BlockKind.DEFINITION: self._definition,
            BlockKind.OTHER: self._other,
        }
        for block in parse_blocks(self.text):
            dispatch[block.kind](block)
        self._finish()

        logger.debug(
            "Built changelog with <val>%d</val> releases and <val>%d</val> diagnostics",
            len(self.changelog.releases),
            len(self.diagnostics),
        )
        return self.changelog, self.diagnostics.sorted()

    def _report(self, kind: DiagnosticKind, message: str, span: Span) -> None:
        self.diagnostics.report(kind, message, span)

    # Block handlers

    def _heading(self, block: Block) -> None:
        if block.level == 1:
            if self._title_span is None and self._section is None:
                self.changelog.title = block.text
                self._title_span = block.span
            else:
                self._report(DiagnosticKind.UNEXPECTED_CONTENT, f"Unexpected level 1 heading {block.text!r}", block.span)
        elif block.level == 2:
            self._open_section(block)
        elif block.level == 3 and self._section is not None:
            self._open_group(self._section, block)
        else:
            self._report(
                DiagnosticKind.UNEXPECTED_CONTENT, f"Unexpected level {block.level} heading {block.text!r}", block.span
            )

    def _open_section(self, block: Block) -> None:
        if self._first_section_span is None:
            self._first_section_span = block.span

        try:
            heading = parse_release_heading(block.text)
        except InvalidVersion as exc:
            self._report(DiagnosticKind.INVALID_VERSION, str(exc), block.span)
            self._section = _Section(None, block.span)
            return
        except InvalidDate as exc:
            self._report(DiagnosticKind.INVALID_DATE, str(exc), block.span)
            self._section = _Section(None, block.span)
            return

        if heading.version is None:
            if self._unreleased_span is not None:
                self._report(
                    DiagnosticKind.DUPLICATE_VERSION,
                    f"Duplicate Unreleased section, superseded by the one on line {block.span.start.line}",
                    self._unreleased_span,
                )
            if heading.suffix:
                self._report(
                    DiagnosticKind.UNEXPECTED_CONTENT,
                    f"Unexpected {heading.suffix!r} after [Unreleased], the Unreleased section has no date or tag",
                    block.span,
                )
            self.changelog.unreleased = Release()
            self._unreleased_span = block.span
            self._section = _Section(self.changelog.unreleased, block.span)
            return

        release = Release(
            version=heading.version,
            date=heading.date,
            yanked=heading.yanked,
            no_changes=heading.no_changes,
        )
        if heading.tag is not None:
            self._report(
                DiagnosticKind.UNRECOGNIZED_RELEASE_TAG,
                f"Unrecognized release tag [{heading.tag}], expected [YANKED] or [NO CHANGES]",
                block.span,
            )
        if heading.date is None and self.config.require_release_date:
            self._report(DiagnosticKind.MISSING_DATE, f"Release {heading.version} has no release date", block.span)

        previous_span = self._release_spans.get(heading.version)
        if previous_span is not None:
            self._report(
                DiagnosticKind.DUPLICATE_VERSION,
                f"Duplicate release {heading.version}, superseded by the one on line {block.span.start.line}",
                previous_span,
            )
            self.changelog.releases.remove(heading.version)

        self.changelog.releases.append(release)
        self._release_spans[heading.version] = block.span
        self._section = _Section(release, block.span)

    def _open_group(self, section: _Section, block: Block) -> None:
        section.seen_group_heading = True
        section.group = ChangeGroup.resolve(block.text)
        if section.group is None:
            choices = ", ".join(g.value for g in ChangeGroup)
            self._report(
                DiagnosticKind.UNRECOGNIZED_CHANGE_GROUP,
                f"Unrecognized change group {block.text!r}, expected one of {choices}",
                block.span,
            )

    def _list_item(self, block: Block) -> None:
        section = self._section
        if section is None:
            self._report(DiagnosticKind.UNEXPECTED_CONTENT, "Change entry outside of a release section", block.span)
            return
        if section.release is None:
            return
        if not block.text:
            self._report(DiagnosticKind.UNEXPECTED_CONTENT, "Empty change entry", block.span)
            return

        if section.group is not None:
            section.release.changes.add(section.group, block.text)
            return

        # Keep the entry so that nothing the author wrote is lost, but it is not rendered again.
        section.release.changes.uncategorized.append(block.text)
        if not section.seen_group_heading:
            self._report(
                DiagnosticKind.UNCATEGORIZED_CHANGE,
                f"Change entry in {section.release.label} is not in a change group (e.g. ### Added)",
                block.span,
            )

    def _paragraph(self, block: Block) -> None:
        if self._section is None:
            self._paragraphs.append(block.text)
        else:
            self._report(DiagnosticKind.UNEXPECTED_CONTENT, "Unexpected paragraph in a release section", block.span)

    def _definition(self, block: Block) -> None:
        if block.url is None:
            return
        if not self.links.add(LinkReference(block.text, block.url, block.span)):
            self._report(
                DiagnosticKind.DUPLICATE_LINK_REFERENCE,
                f"Duplicate link reference definition [{block.text}], only the first one is used",
                block.span,
            )

    def _other(self, block: Block) -> None:
        self._report(DiagnosticKind.UNEXPECTED_CONTENT, "Unexpected content in changelog", block.span)

    # Finalization

    def _finish(self) -> None:
        self.changelog.description = "\n\n".join(self._paragraphs)

        if self._unreleased_span is None:
            self._report(
                DiagnosticKind.MISSING_UNRELEASED,
                "Missing ## [Unreleased] section",
                self._first_section_span or _empty_span_at_end(self.text),
            )

        self._resolve_links()

        for release in self.changelog.releases:
            span = self._release_spans[t.cast(ReleaseVersion, release.version)]
            if release.changes.is_empty() and not release.no_changes:
                self._report(
                    DiagnosticKind.EMPTY_RELEASE,
                    f"Release {release.version} has no changes (tag it [NO CHANGES] if that is intended)",
                    span,
                )

        self._check_order()

    def _resolve_links(self) -> None:
        """Looks up the link of every release by its lower-cased version string, like CommonMark matches labels."""

        consumed = {UNRELEASED_LABEL}
        self.changelog.unreleased.link = self.links.get(UNRELEASED_LABEL)
        for release in self.changelog.releases:
            label = str(release.version)
            release.link = self.links.get(label)
            consumed.add(label.lower())

        for ref in self.links:
            if ref.key in consumed or ref.span is None:
                continue
            try:
                ReleaseVersion.parse(ref.label)
            except InvalidVersion:
                # Not a release link, e.g. a reference used by a change entry.
                continue
            self._report(
                DiagnosticKind.UNUSED_LINK_REFERENCE, f"Link reference [{ref.label}] matches no release", ref.span
            )

    def _check_order(self) -> None:
        """Releases should be listed most recent first, both by version and by date."""

        releases = list(self.changelog.releases)
        for above, below in zip(releases, releases[1:]):
            assert above.version is not None and below.version is not None
            span = self._release_spans[below.version]
            if below.version > above.version:
                self._report(
                    DiagnosticKind.RELEASE_ORDER,
                    f"Release {below.version} is listed below {above.version} but has a higher version",
                    span,
                )
            elif above.date is not None and below.date is not None and below.date > above.date:
                self._report(
                    DiagnosticKind.RELEASE_ORDER,
                    f"Release {below.version} ({below.date}) is listed below {above.version} ({above.date}) "
                    "but was released later",
                    span,
                )


def _empty_span_at_end(text: str) -> Span:
    point = SourceMap(text).end()
    return Span(point, point)


def build(text: str, config: ChangelogConfig | None = None) -> tuple[Changelog, list[Diagnostic]]:
    """Builds a changelog from *text* and returns it with all diagnostics, ordered by document position. This
    function never raises for malformed input."""

    return ChangelogBuilder(text, config).build()


def parse(text: str, config: ChangelogConfig | None = None) -> Changelog:
    """Parses *text* into a changelog, ignoring non-blocking diagnostics.

    Raises:
      ParseChangelogError: If a release heading has an invalid version or date.
    """

    changelog, diagnostics = build(text, config)
    errors = [d for d in diagnostics if d.blocking]
    if errors:
        raise ParseChangelogError(errors)
    return changelog


def lint(text: str, config: ChangelogConfig | None = None) -> list[Diagnostic]:
    """Returns every diagnostic for *text*, blocking or not, ordered by document position."""

    return build(text, config)[1]
