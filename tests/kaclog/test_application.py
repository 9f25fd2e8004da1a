import json
from pathlib import Path

from cleo.testers.command_tester import CommandTester

from kaclog.application import Application
from kaclog.configuration import ChangelogConfig


def make_tester(command: str, config: ChangelogConfig | None = None) -> CommandTester:
    return CommandTester(Application(config).find(command))


def test__lint__reports_problems(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("# Changelog\n\n## [1.0.0] - 2020-01-01\n\n### Addedd\n\n- Foo\n")
    tester = make_tester("lint")
    assert tester.execute(str(path)) == 1
    assert tester.io.fetch_output().splitlines() == [
        f"{path}:3:1: Missing ## [Unreleased] section",
        f"{path}:5:1: Unrecognized change group 'Addedd', expected one of Added, Changed, Deprecated, Removed, Fixed, "
        "Security",
    ]


def test__lint__json_output(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("## [Unreleased]\n\n## [1.0.0] - 2020-01-01\n")
    tester = make_tester("lint")
    assert tester.execute(f"--json {path}") == 1
    result = json.loads(tester.io.fetch_output())
    assert [d["kind"] for d in result[str(path)]] == ["empty-release"]
    assert result[str(path)][0]["start"] == {"line": 3, "column": 1, "offset": 17}


def test__lint__clean_file(tmp_path: Path, keep_a_changelog: str) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text(keep_a_changelog)
    tester = make_tester("lint")
    assert tester.execute(str(path)) == 0
    assert tester.io.fetch_output() == ""


def test__lint__uses_configured_filename(tmp_path: Path) -> None:
    path = tmp_path / "CHANGES.md"
    path.write_text("## [Unreleased]\n\n## [1.0.0]\n\n### Fixed\n\n- Foo\n")
    tester = make_tester("lint", ChangelogConfig(require_release_date=True, filename=str(path)))
    assert tester.execute("") == 1
    assert tester.io.fetch_output() == f"{path}:3:1: Release 1.0.0 has no release date\n"


def test__lint__missing_file(tmp_path: Path) -> None:
    tester = make_tester("lint")
    assert tester.execute(str(tmp_path / "CHANGELOG.md")) == 1
    assert "does not exist" in tester.io.fetch_error()


def test__add__creates_changelog(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    tester = make_tester("add")
    assert tester.execute(f"Fixed 'Crash on startup' --file {path}") == 0
    assert path.read_text().startswith("# Changelog\n")
    assert path.read_text().endswith("## [Unreleased]\n\n### Fixed\n\n- Crash on startup\n")


def test__add__rejects_unknown_group(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    tester = make_tester("add")
    assert tester.execute(f"Addedd 'Something' --file {path}") == 1
    assert "is not a change group" in tester.io.fetch_error()
    assert not path.exists()


def test__release__promotes_unreleased(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    path.write_text("# Changelog\n\n## [Unreleased]\n\n### Added\n\n- Foo\n")
    tester = make_tester("release")
    assert tester.execute(f"1.0.0 --date 2024-01-01 --link https://example.com/v1.0.0 --file {path}") == 0
    assert tester.io.fetch_output() == "Released 1.0.0 (2024-01-01) with 1 change(s)\n"
    assert path.read_text() == (
        "# Changelog\n\n"
        "## [Unreleased]\n\n"
        "## [1.0.0] - 2024-01-01\n\n"
        "### Added\n\n- Foo\n\n"
        "[1.0.0]: https://example.com/v1.0.0\n"
    )


def test__release__fails_on_blocking_problems(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    text = "## [Unreleased]\n\n## [1.0] - 2020-01-01\n"
    path.write_text(text)
    tester = make_tester("release")
    assert tester.execute(f"1.1.0 --file {path}") == 1
    assert f"{path}:3:1:" in tester.io.fetch_error()
    assert path.read_text() == text


def test__release__duplicate_version(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    text = "## [Unreleased]\n\n## [1.0.0] - 2020-01-01\n\n### Added\n\n- Foo\n"
    path.write_text(text)
    tester = make_tester("release")
    assert tester.execute(f"1.0.0 --file {path}") == 1
    assert "already exists" in tester.io.fetch_error()
    assert path.read_text() == text
