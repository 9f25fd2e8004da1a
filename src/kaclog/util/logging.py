""" Provides a logging formatter that understands color hints in the message and decorates it with ANSI styles. """

from __future__ import annotations

import logging

import typing_extensions as te

from kaclog.util.terminal import StyleManager


def get_default_styles() -> StyleManager:
    manager = StyleManager()
    manager.add_style("info", "blue")
    manager.add_style("warning", "magenta")
    manager.add_style("error", "red")
    manager.add_style("critical", "bright red", "bold,underline")
    manager.add_style("subj", "blue")
    manager.add_style("obj", "yellow")
    manager.add_style("val", "cyan")
    return manager


class TerminalColorFormatter(logging.Formatter):
    """A formatter that converts HTML-style tags in log messages (e.g. `<subj>CHANGELOG.md</subj>`) to ANSI terminal
    colors, or removes the tags if no #styles are set."""

    def __init__(self, fmt: str, styles: StyleManager | None = None, colored: bool = True) -> None:
        super().__init__(fmt)
        self.styles = (styles or get_default_styles()) if colored else None

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self.styles is None:
            return StyleManager.strip_tags(message)
        return self.styles.format(message, True)

    def install(self, target: te.Literal["tty", "notty", "all"] = "all") -> None:
        """Install the formatter on the stream handlers of the root logger. With *target* set to `"tty"` or `"notty"`
        only handlers that are (or are not) attached to a TTY are considered."""

        for handler in logging.root.handlers:
            if not isinstance(handler, logging.StreamHandler):
                continue
            isatty = hasattr(handler.stream, "isatty") and handler.stream.isatty()
            if target == "all" or (target == "tty") == isatty:
                handler.setFormatter(self)
