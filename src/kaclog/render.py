""" Renders a #Changelog to its canonical Markdown form. """

from __future__ import annotations

import typing as t

from kaclog.links import LinkReferenceTable
from kaclog.version import NO_CHANGES_TAG, YANKED_TAG

if t.TYPE_CHECKING:
    from kaclog.changelog import Changelog, Release


def render_release_heading(release: Release) -> str:
    if release.version is None:
        return "## [Unreleased]"
    heading = f"## [{release.version}]"
    if release.date is not None:
        heading += f" - {release.date.isoformat()}"
    if release.yanked:
        heading += f" [{YANKED_TAG}]"
    if release.no_changes:
        heading += f" [{NO_CHANGES_TAG}]"
    return heading


def render_entry(text: str) -> str:
    """Renders a change entry as a bullet item. Continuation lines are indented to the item's content column, otherwise
    a line that follows a blank line would end the list."""

    first, *rest = text.split("\n")
    lines = [f"- {first}"]
    for line in rest:
        if not line.strip():
            lines.append("")
        elif line.startswith("  "):
            lines.append(line)
        else:
            lines.append("  " + line)
    return "\n".join(lines)


def render_release(release: Release) -> list[str]:
    """Returns the Markdown blocks of a release: its heading followed by a heading and bullet list for each group
    that has entries, in canonical group order. Uncategorized entries are not rendered."""

    blocks = [render_release_heading(release)]
    for group, items in release.changes.ordered():
        blocks.append(f"### {group.value}")
        blocks.append("\n".join(render_entry(item) for item in items))
    return blocks


def render(changelog: Changelog) -> str:
    """Renders *changelog* to text. The Unreleased section is always present, even when empty. The link reference
    definitions are regenerated from the release links, with Unreleased first. The output ends with a newline."""

    blocks: list[str] = []
    if changelog.title:
        blocks.append(f"# {changelog.title}")
    if changelog.description:
        blocks.append(changelog.description)

    blocks += render_release(changelog.unreleased)
    for release in changelog.releases:
        blocks += render_release(release)

    links = LinkReferenceTable.from_changelog(changelog)
    if len(links):
        blocks.append(links.render())

    return "\n\n".join(blocks) + "\n"
