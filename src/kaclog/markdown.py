""" A thin adapter over #markdown_it that flattens a Markdown document into the top-level blocks that the changelog
grammar cares about, each carrying its exact source span. """

from __future__ import annotations

import dataclasses
import enum
import functools
import logging
import re

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from kaclog.diagnostics import Point, Span

logger = logging.getLogger(__name__)

LINE_BREAK_REGEX = re.compile(r"\r\n|\r|\n")
BULLET_MARKER_REGEX = re.compile(r"^[ \t]*[-*+](?:[ \t]+|$)")
DEFINITION_LABEL_REGEX = re.compile(r"^[ \t]{0,3}\[((?:[^\]\\]|\\.)+)\]:")


class BlockKind(enum.Enum):
    HEADING = enum.auto()
    LIST_ITEM = enum.auto()
    PARAGRAPH = enum.auto()
    DEFINITION = enum.auto()
    OTHER = enum.auto()


@dataclasses.dataclass
class Block:
    kind: BlockKind
    span: Span

    #: The inline text of headings and paragraphs, the raw item content (without the bullet marker) of list items,
    #: or the label as written for definitions.
    text: str = ""

    #: The heading level, `0` for anything but headings.
    level: int = 0

    #: The destination of a link reference definition.
    url: str | None = None

    @property
    def key(self) -> str:
        """The lower-cased label of a definition."""

        return self.text.lower()


class SourceMap:
    """Converts line/column positions of a text into #Point#s with UTF-8 byte offsets."""

    def __init__(self, text: str) -> None:
        self.lines: list[str] = []
        self._byte_starts: list[int] = []
        offset = 0
        pos = 0
        for match in LINE_BREAK_REGEX.finditer(text):
            line = text[pos : match.start()]
            self.lines.append(line)
            self._byte_starts.append(offset)
            offset += len(line.encode("utf-8")) + len(match.group(0))
            pos = match.end()
        self.lines.append(text[pos:])
        self._byte_starts.append(offset)

    def point(self, line_index: int, column_index: int) -> Point:
        """Returns the point for a 0-based line and character index."""

        line_index = min(line_index, len(self.lines) - 1)
        line = self.lines[line_index]
        offset = self._byte_starts[line_index] + len(line[:column_index].encode("utf-8"))
        return Point(line_index + 1, column_index + 1, offset)

    def end(self) -> Point:
        return self.point(len(self.lines) - 1, len(self.lines[-1]))

    def span(self, first: int, stop: int) -> Span:
        """Returns the span covering the lines *first* up to (excluding) *stop*, without leading indentation of the
        first line and without trailing blank lines."""

        last = max(first, min(stop, len(self.lines)) - 1)
        while last > first and not self.lines[last].strip():
            last -= 1
        first_line = self.lines[first]
        indent = len(first_line) - len(first_line.lstrip())
        return Span(self.point(first, indent), self.point(last, len(self.lines[last].rstrip())))

    def text(self, span: Span) -> str:
        return "\n".join(self.lines[span.start.line - 1 : span.end.line])


@functools.lru_cache(maxsize=1)
def _markdown_parser() -> MarkdownIt:
    # Inline definitions make link reference definitions show up as "definition" tokens with a source map instead
    # of being consumed silently into the environment.
    return MarkdownIt("commonmark", {"inline_definitions": True})


def parse_blocks(text: str) -> list[Block]:
    """Parses *text* and returns its top-level blocks in document order. This never fails: any construct the
    changelog grammar has no use for is returned as a #BlockKind.OTHER block."""

    source = SourceMap(text)
    root = SyntaxTreeNode(_markdown_parser().parse(text))
    blocks: list[Block] = []

    for node in root.children:
        if node.map is None:
            continue
        span = source.span(*node.map)

        if node.type == "heading":
            blocks.append(Block(BlockKind.HEADING, span, _inline_text(node), level=int(node.tag[1:])))
        elif node.type == "paragraph":
            blocks.append(Block(BlockKind.PARAGRAPH, span, _inline_text(node)))
        elif node.type == "bullet_list":
            for item in node.children:
                if item.map is not None:
                    item_span = source.span(*item.map)
                    blocks.append(Block(BlockKind.LIST_ITEM, item_span, _list_item_text(source.text(item_span))))
        elif node.type == "definition":
            raw = source.text(span)
            match = DEFINITION_LABEL_REGEX.match(raw)
            label = match.group(1) if match else str(node.meta.get("id", ""))
            blocks.append(Block(BlockKind.DEFINITION, span, label.strip(), url=node.meta.get("url")))
        else:
            blocks.append(Block(BlockKind.OTHER, span, source.text(span)))

    logger.debug("Parsed <val>%d</val> top-level Markdown blocks", len(blocks))
    return blocks


def _inline_text(node: SyntaxTreeNode) -> str:
    return "".join(child.content for child in node.children if child.type == "inline").strip()


def _list_item_text(raw: str) -> str:
    return BULLET_MARKER_REGEX.sub("", raw, count=1).strip()
