import datetime

import pytest

from kaclog.change_group import ChangeGroup
from kaclog.changelog import Changelog, Changes, PromoteOptions, Release, Releases
from kaclog.errors import DuplicateVersion, EmptyChangeText, InvalidLink, InvalidVersion, UnrecognizedChangeGroup
from kaclog.version import ReleaseVersion


def test__Changes__drops_empty_groups():
    changes = Changes()
    changes[ChangeGroup.ADDED] = []
    assert ChangeGroup.ADDED not in changes
    changes.add("Fixed", "A bug")
    changes.add(ChangeGroup.ADDED, "A feature")
    assert list(changes) == [ChangeGroup.FIXED, ChangeGroup.ADDED]
    assert [g for g, _ in changes.ordered()] == [ChangeGroup.ADDED, ChangeGroup.FIXED]
    assert changes.count() == 2


def test__Release__add():
    release = Release()
    release.add("Added", "  Something new  ")
    release.add(ChangeGroup.ADDED, "Something else")
    assert release.changes == {ChangeGroup.ADDED: ["Something new", "Something else"]}


def test__Release__add__rejects_empty_text():
    release = Release()
    with pytest.raises(EmptyChangeText):
        release.add("Added", "   ")
    assert release.changes.is_empty()


def test__Release__add__rejects_unknown_group():
    release = Release()
    with pytest.raises(UnrecognizedChangeGroup) as excinfo:
        release.add("Addedd", "Typo")
    assert "Added, Changed, Deprecated, Removed, Fixed, Security" in str(excinfo.value)


def test__Releases__rejects_duplicate_versions():
    releases = Releases([Release("1.0.0")])
    with pytest.raises(DuplicateVersion):
        releases.append(Release("1.0.0"))
    with pytest.raises(ValueError):
        releases.append(Release())
    assert "1.0.0" in releases
    assert ReleaseVersion(1, 0, 0) in releases
    assert releases.remove("1.0.0").version == ReleaseVersion(1, 0, 0)
    assert len(releases) == 0


def test__Changelog__new():
    changelog = Changelog.new()
    assert changelog.to_markdown().startswith("# Changelog\n\nAll notable changes to this project")
    assert changelog.to_markdown().endswith("## [Unreleased]\n")


def test__Changelog__promote_unreleased():
    changelog = Changelog()
    changelog.unreleased.add("Fixed", "Bug")
    changelog.unreleased.add("Deprecated", "Old")

    release = changelog.promote_unreleased(
        PromoteOptions("0.0.1", link="https://example/v0.0.1"),
        clock=lambda: datetime.date(2024, 1, 2),
    )

    assert release is changelog.releases[0]
    assert release.date == datetime.date(2024, 1, 2)
    assert changelog.unreleased.changes.is_empty()
    assert changelog.to_markdown() == (
        "## [Unreleased]\n\n"
        "## [0.0.1] - 2024-01-02\n\n"
        "### Deprecated\n\n- Old\n\n"
        "### Fixed\n\n- Bug\n\n"
        "[0.0.1]: https://example/v0.0.1\n"
    )


def test__Changelog__promote_unreleased__inserts_at_the_top():
    changelog = Changelog(releases=[Release("1.0.0", "2020-01-01", changes={ChangeGroup.ADDED: ["A"]})])
    changelog.unreleased.add("Added", "B")
    changelog.promote_unreleased(PromoteOptions("1.1.0", "2021-01-01", yanked=True))
    assert [str(r.version) for r in changelog.releases] == ["1.1.0", "1.0.0"]
    assert changelog.releases[0].yanked
    assert changelog.releases[0].changes == {ChangeGroup.ADDED: ["B"]}


def test__Changelog__promote_unreleased__duplicate_version_leaves_changelog_unmodified():
    changelog = Changelog()
    changelog.unreleased.add("Added", "A")
    changelog.promote_unreleased(PromoteOptions("1.0.0", "2020-01-01"))
    changelog.unreleased.add("Added", "B")
    before = changelog.to_markdown()

    with pytest.raises(DuplicateVersion):
        changelog.promote_unreleased(PromoteOptions("1.0.0", "2020-01-02"))

    assert changelog.to_markdown() == before
    assert changelog.unreleased.changes == {ChangeGroup.ADDED: ["B"]}


def test__PromoteOptions__validates_input():
    with pytest.raises(InvalidVersion):
        PromoteOptions("1.0")
    with pytest.raises(InvalidLink):
        PromoteOptions("1.0.0", link="not a link")


def test__Changelog__promote_unreleased__twice_yields_empty_second_release():
    changelog = Changelog()
    changelog.unreleased.add("Fixed", "Bug")
    first = changelog.promote_unreleased(PromoteOptions("1.0.0", "2020-01-01"))
    second = changelog.promote_unreleased(PromoteOptions("1.0.1", "2020-01-02"))

    assert [str(r.version) for r in changelog.releases] == ["1.0.1", "1.0.0"]
    assert first.changes == {ChangeGroup.FIXED: ["Bug"]}
    assert second.changes.is_empty()
    assert changelog.unreleased.changes.is_empty()
    assert "## [1.0.1] - 2020-01-02\n\n## [1.0.0] - 2020-01-01\n\n### Fixed\n\n- Bug\n" in changelog.to_markdown()
