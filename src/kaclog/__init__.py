""" Read, lint, edit and write changelogs in the [Keep a Changelog](https://keepachangelog.com/en/1.1.0/) format. """

__version__ = "0.1.0"

from kaclog.change_group import ChangeGroup
from kaclog.changelog import Changelog, Changes, PromoteOptions, Release, Releases
from kaclog.diagnostics import Diagnostic, DiagnosticKind, Point
from kaclog.errors import (
    ChangelogError,
    DuplicateVersion,
    EmptyChangeText,
    InvalidDate,
    InvalidLink,
    InvalidVersion,
    ParseChangelogError,
    UnrecognizedChangeGroup,
)
from kaclog.parser import build, lint, parse
from kaclog.render import render
from kaclog.version import ReleaseVersion

__all__ = [
    "ChangeGroup",
    "Changelog",
    "ChangelogError",
    "Changes",
    "Diagnostic",
    "DiagnosticKind",
    "DuplicateVersion",
    "EmptyChangeText",
    "InvalidDate",
    "InvalidLink",
    "InvalidVersion",
    "ParseChangelogError",
    "Point",
    "PromoteOptions",
    "Release",
    "Releases",
    "ReleaseVersion",
    "UnrecognizedChangeGroup",
    "build",
    "lint",
    "parse",
    "render",
]
