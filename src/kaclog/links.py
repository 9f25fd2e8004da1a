""" The table of footnote-style link reference definitions that attach compare links to release headings. """

from __future__ import annotations

import dataclasses
import typing as t
import urllib.parse

from kaclog.errors import InvalidLink

if t.TYPE_CHECKING:
    from kaclog.changelog import Changelog
    from kaclog.diagnostics import Span

UNRELEASED_LABEL = "unreleased"


def validate_link(url: str) -> str:
    """Returns *url* unchanged if it is an absolute URL (with a scheme and a network location or path).

    Raises:
      InvalidLink: If *url* is relative, contains whitespace or cannot be parsed.
    """

    if not url or any(c.isspace() for c in url):
        raise InvalidLink(url)
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        raise InvalidLink(url)
    if not parsed.scheme or not (parsed.netloc or parsed.path):
        raise InvalidLink(url)
    return url


@dataclasses.dataclass
class LinkReference:
    #: The label as it was written, e.g. `Unreleased` or `1.0.0`.
    label: str
    url: str
    span: Span | None = None

    @property
    def key(self) -> str:
        return self.label.lower()


class LinkReferenceTable:
    """An insertion ordered mapping of lower-cased labels to #LinkReference#s. Like in CommonMark, the first
    definition of a label wins."""

    def __init__(self) -> None:
        self._refs: dict[str, LinkReference] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._refs.values())!r})"

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> t.Iterator[LinkReference]:
        return iter(self._refs.values())

    def __contains__(self, label: str) -> bool:
        return label.lower() in self._refs

    def add(self, ref: LinkReference) -> bool:
        """Adds *ref* to the table. Returns `False` if a definition for the same label already exists, in which case
        the table is left unchanged."""

        if ref.key in self._refs:
            return False
        self._refs[ref.key] = ref
        return True

    def get(self, label: str) -> str | None:
        ref = self._refs.get(label.lower())
        return ref.url if ref else None

    def render(self) -> str:
        return "\n".join(f"[{ref.label}]: {ref.url}" for ref in self)

    @staticmethod
    def from_changelog(changelog: Changelog) -> LinkReferenceTable:
        """Regenerates the table from the links of the releases in *changelog*, starting with Unreleased and then
        following the order of #Changelog.releases. Releases without a link do not get an entry."""

        table = LinkReferenceTable()
        if changelog.unreleased.link:
            table.add(LinkReference(UNRELEASED_LABEL, changelog.unreleased.link))
        for release in changelog.releases:
            if release.link:
                table.add(LinkReference(str(release.version), release.link))
        return table
