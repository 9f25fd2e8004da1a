""" The `kaclog` command-line interface. It reads changelog files, hands them to the library and reports the results;
all changelog semantics live in the library modules. """

from __future__ import annotations

import json
import logging
import textwrap
import typing as t
from pathlib import Path

from cleo.application import Application as BaseCleoApplication  # type: ignore[import]
from cleo.commands.command import Command as _BaseCommand  # type: ignore[import]
from cleo.formatters.formatter import Formatter  # type: ignore[import]
from cleo.formatters.style import Style  # type: ignore[import]
from cleo.helpers import argument, option  # type: ignore[import]
from cleo.io.io import IO  # type: ignore[import]

from kaclog import __version__
from kaclog.changelog import Changelog, PromoteOptions
from kaclog.configuration import ChangelogConfig, load_configuration
from kaclog.errors import ChangelogError, ParseChangelogError
from kaclog.parser import lint, parse

__all__ = ["Command", "Application", "main"]
logger = logging.getLogger(__name__)


class Command(_BaseCommand):
    help: str
    description: str

    def __init__(self, config: ChangelogConfig) -> None:
        super().__init__()
        self.config = config

    def __init_subclass__(cls) -> None:
        if not cls.help:
            first_line, remainder = (cls.__doc__ or "").partition("\n")[::2]
            cls.help = (first_line.strip() + "\n" + textwrap.dedent(remainder)).strip()
        cls.description = cls.description or (cls.help.strip().splitlines()[0] if cls.help else None) or ""

    def get_path(self) -> Path:
        return Path(self.option("file") or self.config.filename)

    def load_changelog(self, path: Path) -> Changelog:
        logger.info("Reading <subj>%s</subj>", path)
        return parse(path.read_text(encoding="utf-8"), self.config)

    def save_changelog(self, changelog: Changelog, path: Path) -> None:
        logger.info("Writing <subj>%s</subj>", path)
        path.write_text(changelog.to_markdown(), encoding="utf-8")

    def report_error(self, path: Path, error: ChangelogError) -> None:
        if isinstance(error, ParseChangelogError):
            for diagnostic in error.errors:
                self.line_error(
                    f"<fg=cyan>{path}</fg>:{diagnostic.start.line}:{diagnostic.start.column}: "
                    f"{Formatter.escape(diagnostic.message)}",
                    "error",
                )
        else:
            self.line_error(f"error: {Formatter.escape(str(error))}", "error")


class LintCommand(Command):
    """Check changelog files for problems.

    Every problem of a file is reported, one per line, in the form <u>file:line:column: message</u>.
    The command exits with status 1 if any problem was found in any of the files.

    <b>Example:</b>

      <fg=yellow>$</fg> kaclog lint CHANGELOG.md packages/*/CHANGELOG.md
    """

    name = "lint"
    arguments = [
        argument(
            "files",
            description="The changelog files to check. Defaults to the configured changelog file.",
            optional=True,
            multiple=True,
        ),
    ]
    options = [
        option("json", None, description="Print the problems as a JSON object that maps file names to diagnostics."),
    ]

    def handle(self) -> int:
        files: list[str] = self.argument("files") or [self.config.filename]
        results: dict[str, list[dict[str, t.Any]]] = {}
        failed = False

        for filename in files:
            path = Path(filename)
            if not path.is_file():
                self.line_error(f"error: <fg=cyan>{path}</fg> does not exist", "error")
                failed = True
                continue
            diagnostics = lint(path.read_text(encoding="utf-8"), self.config)
            logger.info("Found <val>%d</val> problem(s) in <subj>%s</subj>", len(diagnostics), path)
            failed = failed or bool(diagnostics)
            if self.option("json"):
                results[filename] = [d.to_json() for d in diagnostics]
                continue
            for d in diagnostics:
                self.line(f"<fg=cyan>{path}</fg>:{d.start.line}:{d.start.column}: {Formatter.escape(d.message)}")

        if self.option("json"):
            self.line(Formatter.escape(json.dumps(results, indent=2)))
        return 1 if failed else 0


class AddCommand(Command):
    """Add an entry to the Unreleased section of the changelog.

    The <u>group</u> must be one of Added, Changed, Deprecated, Removed, Fixed or Security. If the
    changelog file does not exist yet, it is created.

    <b>Example:</b>

      <fg=yellow>$</fg> kaclog add Fixed "Crash when the configuration file is empty"
    """

    name = "add"
    arguments = [
        argument("group", description="The change group of the entry, e.g. Added or Fixed."),
        argument("text", description="The Markdown text of the entry."),
    ]
    options = [
        option("file", "f", description="The changelog file. Defaults to the configured changelog file.", flag=False),
    ]

    def handle(self) -> int:
        path = self.get_path()
        try:
            changelog = self.load_changelog(path) if path.exists() else Changelog.new()
            changelog.unreleased.add(self.argument("group"), self.argument("text"))
        except ChangelogError as exc:
            self.report_error(path, exc)
            return 1
        self.save_changelog(changelog, path)
        return 0


class ReleaseCommand(Command):
    """Promote the Unreleased section of the changelog to a new release.

    The changes currently listed under Unreleased move into a release with the given version,
    which is inserted at the top of the changelog. The Unreleased section stays in place, empty.
    """

    name = "release"
    arguments = [
        argument("version", description="The semantic version of the new release."),
    ]
    options = [
        option("date", "d", description="The release date (YYYY-MM-DD). Defaults to today.", flag=False),
        option("link", "l", description="The URL that the release heading links to.", flag=False),
        option("yanked", None, description="Mark the release as yanked."),
        option("no-changes", None, description="Tag the release as having no notable changes."),
        option("file", "f", description="The changelog file. Defaults to the configured changelog file.", flag=False),
    ]

    def handle(self) -> int:
        path = self.get_path()
        if not path.is_file():
            self.line_error(f"error: <fg=cyan>{path}</fg> does not exist", "error")
            return 1
        try:
            changelog = self.load_changelog(path)
            options = PromoteOptions(
                version=self.argument("version"),
                date=self.option("date"),
                link=self.option("link"),
                yanked=self.option("yanked"),
                no_changes=self.option("no-changes"),
            )
            release = changelog.promote_unreleased(options)
        except ChangelogError as exc:
            self.report_error(path, exc)
            return 1
        self.save_changelog(changelog, path)
        self.line(f"Released <fg=cyan>{release.version}</fg> ({release.date}) with {release.changes.count()} change(s)")
        return 0


class Application(BaseCleoApplication):
    def __init__(self, config: ChangelogConfig | None = None) -> None:
        super().__init__("kaclog", __version__)
        self.config = config or ChangelogConfig()
        for command_type in (LintCommand, AddCommand, ReleaseCommand):
            self.add(command_type(self.config))

    def create_io(self, input: t.Any = None, output: t.Any = None, error_output: t.Any = None) -> IO:
        io = super().create_io(input, output, error_output)
        for formatter in (io.output.formatter, io.error_output.formatter):
            formatter.set_style("u", Style(options=["underline"]))
            formatter.set_style("b", Style(options=["bold"]))
        return io

    def _configure_io(self, io: IO) -> None:
        from kaclog.util.logging import TerminalColorFormatter

        fmt = "%(message)s"
        if io.input.has_parameter_option("-vvv"):
            fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
            level = logging.DEBUG
        elif io.input.has_parameter_option("-vv"):
            level = logging.DEBUG
        elif io.input.has_parameter_option("-v"):
            level = logging.INFO
        elif io.input.has_parameter_option("-q"):
            level = logging.ERROR
        else:
            level = logging.WARNING

        logging.basicConfig(level=level)
        TerminalColorFormatter(fmt).install("tty")
        TerminalColorFormatter(fmt, colored=False).install("notty")

        super()._configure_io(io)


def main() -> None:
    Application(load_configuration()).run()
