""" Loads the changelog configuration from `kaclog.toml` or the `[tool.kaclog]` section of `pyproject.toml`. """

from __future__ import annotations

import dataclasses
import logging
import typing as t
from pathlib import Path

from databind.core.settings import Alias, ExtraKeys

logger = logging.getLogger(__name__)


@ExtraKeys(True)
@dataclasses.dataclass
class ChangelogConfig:
    #: When enabled, the linter reports finalized releases whose heading has no date. By default a missing date
    #: is accepted silently.
    require_release_date: t.Annotated[bool, Alias("require-release-date")] = False

    #: The changelog file that the command-line interface operates on when no file is specified.
    filename: str = "CHANGELOG.md"


def get_raw_configuration(directory: Path) -> dict[str, t.Any]:
    """Loads the raw configuration data from either `kaclog.toml` or the `[tool.kaclog]` section of `pyproject.toml`
    in *directory*. If neither of the files exist or the section does not exist, an empty dictionary is returned."""

    import tomli

    kaclog_toml = directory / "kaclog.toml"
    pyproject_toml = directory / "pyproject.toml"
    if kaclog_toml.is_file():
        logger.debug("Reading configuration from <val>%s</val>", kaclog_toml)
        return tomli.loads(kaclog_toml.read_text())
    if pyproject_toml.is_file():
        logger.debug("Reading configuration from <val>%s</val>", pyproject_toml)
        return tomli.loads(pyproject_toml.read_text()).get("tool", {}).get("kaclog", {})
    return {}


def load_configuration(directory: Path | None = None) -> ChangelogConfig:
    import databind.json

    directory = directory or Path.cwd()
    return databind.json.load(get_raw_configuration(directory), ChangelogConfig, filename=str(directory))
