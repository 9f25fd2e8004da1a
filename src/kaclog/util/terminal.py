""" Minimal ANSI styling for log messages that contain HTML-style tags such as `<subj>...</subj>`. """

from __future__ import annotations

import dataclasses
import re
import typing as t

#: SGR foreground codes of the colors available to log styles. The `bright` variant of a color adds 60.
COLORS = {"red": 31, "yellow": 33, "blue": 34, "magenta": 35, "cyan": 36}
ATTRIBUTES = {"bold": 1, "underline": 4}
RESET = "\033[0m"


def parse_color(color_string: str) -> int:
    """Returns the SGR code for `<color>` or `bright <color>` (case insensitive)."""

    name = color_string.strip().lower()
    bright = name.startswith("bright ")
    if bright:
        name = name[7:].strip()
    if name not in COLORS:
        raise ValueError(f"unrecognizable color string: {color_string!r}")
    return COLORS[name] + (60 if bright else 0)


@dataclasses.dataclass(frozen=True)
class Style:
    codes: tuple[int, ...] = ()

    @staticmethod
    def of(fg: str | None = None, attrs: str | None = None) -> Style:
        """Creates a style from a color name and a comma-separated list of attribute names."""

        codes = [parse_color(fg)] if fg else []
        codes += [ATTRIBUTES[x.strip().lower()] for x in (attrs or "").split(",") if x.strip()]
        return Style(tuple(codes))

    def to_escape_sequence(self) -> str:
        return "\033[" + ";".join(map(str, self.codes)) + "m"


class StyleManager:
    """Maps style names to #Style#s and replaces tags referencing them in a text."""

    TAG_REGEX = re.compile(r"<([^>=/]+)([^>]*)>(.*?)</\1>", re.S)

    def __init__(self) -> None:
        self._styles: dict[str, Style] = {}

    def add_style(self, name: str, fg: str | None = None, attrs: str | None = None) -> None:
        self._styles[name] = Style.of(fg, attrs)

    def get_style(self, style_string: str, safe: bool = False) -> Style:
        """Returns the style for the content of an opening tag, either a registered name or `fg=<color>`. With *safe*
        set, an unknown style yields an empty #Style instead of an error."""

        try:
            if style_string.startswith("fg="):
                return Style((parse_color(style_string[3:]),))
            return self._styles[style_string]
        except (ValueError, KeyError):
            if not safe:
                raise
        return Style()

    def format(self, text: str, safe: bool = False, repl: t.Callable[[str, str], str] | None = None) -> str:
        """Replaces the tags in *text* with escape sequences. A *repl* function can render the tags differently."""

        def _sub(m: re.Match) -> str:
            style_string = m.group(1) + m.group(2)
            if repl is not None:
                return repl(style_string, m.group(3))
            return self.get_style(style_string, safe).to_escape_sequence() + m.group(3) + RESET

        # Nested tags are resolved from the inside out, bounded for malformed input.
        for _ in range(15):
            new_text = self.TAG_REGEX.sub(_sub, text)
            if new_text == text:
                break
            text = new_text
        return text

    @classmethod
    def strip_tags(cls, text: str) -> str:
        return cls().format(text, True, lambda _, s: s)
