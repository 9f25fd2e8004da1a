from kaclog.diagnostics import Point, Span
from kaclog.markdown import BlockKind, SourceMap, parse_blocks


def test__parse_blocks__headings_and_list_items():
    blocks = parse_blocks("# Changelog\n\n## [Unreleased]\n- foo\n- bar\n")
    assert [b.kind for b in blocks] == [
        BlockKind.HEADING,
        BlockKind.HEADING,
        BlockKind.LIST_ITEM,
        BlockKind.LIST_ITEM,
    ]

    title, section, foo, bar = blocks
    assert (title.level, title.text) == (1, "Changelog")
    assert title.span == Span(Point(1, 1, 0), Point(1, 12, 11))
    assert (section.level, section.text) == (2, "[Unreleased]")
    assert section.span.start == Point(3, 1, 13)
    assert foo.text == "foo"
    assert foo.span == Span(Point(4, 1, 29), Point(4, 6, 34))
    assert bar.text == "bar"
    assert bar.span.start == Point(5, 1, 35)


def test__parse_blocks__offsets_count_utf8_bytes():
    blocks = parse_blocks("# Ä\n- ü\n")
    assert blocks[0].span.end == Point(1, 4, 4)
    assert blocks[1].span == Span(Point(2, 1, 5), Point(2, 4, 9))


def test__parse_blocks__multiline_list_item_keeps_raw_text():
    blocks = parse_blocks("- first line\n  second `line`\n")
    assert len(blocks) == 1
    assert blocks[0].text == "first line\n  second `line`"
    assert blocks[0].span.end.line == 2


def test__parse_blocks__link_reference_definitions():
    blocks = parse_blocks("[Unreleased]: https://example.com/compare/v1.0.0...HEAD\n[1.0.0]: https://example.com/v1.0.0\n")
    assert [b.kind for b in blocks] == [BlockKind.DEFINITION, BlockKind.DEFINITION]
    assert blocks[0].text == "Unreleased"
    assert blocks[0].key == "unreleased"
    assert blocks[0].url == "https://example.com/compare/v1.0.0...HEAD"
    assert blocks[1].text == "1.0.0"
    assert blocks[1].span.start.line == 2


def test__parse_blocks__paragraphs_and_other_content():
    blocks = parse_blocks("Hello *world*.\n\n```\ncode\n```\n")
    assert [b.kind for b in blocks] == [BlockKind.PARAGRAPH, BlockKind.OTHER]
    assert blocks[0].text == "Hello *world*."
    assert blocks[1].span.start.line == 3
    assert blocks[1].span.end.line == 5


def test__SourceMap__end():
    assert SourceMap("").end() == Point(1, 1, 0)
    assert SourceMap("ab\ncd\n").end() == Point(3, 1, 6)
    assert SourceMap("ab\r\ncd").end() == Point(2, 3, 6)
