import logging

from kaclog.util.logging import TerminalColorFormatter
from kaclog.util.terminal import StyleManager


def make_record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("kaclog", logging.INFO, __file__, 1, msg, args, None)


def test__StyleManager__strip_tags():
    assert StyleManager.strip_tags("Reading <subj>CHANGELOG.md</subj> (<val>3</val>)") == "Reading CHANGELOG.md (3)"


def test__StyleManager__format():
    manager = StyleManager()
    manager.add_style("subj", "blue")
    assert manager.format("<subj>x</subj>") == "\033[34mx\033[0m"
    assert manager.format("<fg=bright red>x</fg>") == "\033[91mx\033[0m"
    assert manager.format("<unknown>x</unknown>", safe=True) == "\033[mx\033[0m"


def test__TerminalColorFormatter():
    record = make_record("Found <val>%d</val> problem(s) in <subj>%s</subj>", 2, "CHANGELOG.md")
    assert TerminalColorFormatter("%(message)s", colored=False).format(record) == "Found 2 problem(s) in CHANGELOG.md"
    colored = TerminalColorFormatter("%(message)s").format(record)
    assert colored == "Found \033[36m2\033[0m problem(s) in \033[34mCHANGELOG.md\033[0m"
