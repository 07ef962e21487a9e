import copy

import pytest

from yamdc.model import AvMeta, FileContext
from yamdc.processor import (
    DEFAULT_PROCESSOR,
    DefaultProcessor,
    HandlerProcessor,
    Processor,
    ProcessorGroup,
)


class _AppendHandler:
    def __init__(self, word):
        self.word = word

    def handle(self, fc):
        fc.meta.genres.append(self.word)


class _FailingHandler:
    def __init__(self, message):
        self.message = message

    def handle(self, fc):
        raise RuntimeError(self.message)


def _context():
    return FileContext(full_file_path="/tmp/abc-123.mp4", meta=AvMeta(title="t"))


def test_default_processor_leaves_context_unchanged():
    fc = _context()
    before = copy.deepcopy(fc)
    DefaultProcessor().process(fc)
    assert fc == before
    assert DEFAULT_PROCESSOR.name == "default"


def test_handler_processor_runs_handler():
    fc = _context()
    proc = HandlerProcessor("tagger", _AppendHandler("x"))
    proc.process(fc)
    assert proc.name == "tagger"
    assert fc.meta.genres == ["x"]


def test_handler_processor_propagates_error():
    proc = HandlerProcessor("bad", _FailingHandler("boom"))
    with pytest.raises(RuntimeError, match="boom"):
        proc.process(_context())


def test_group_runs_all_in_order():
    fc = _context()
    group = ProcessorGroup(
        [HandlerProcessor("a", _AppendHandler("a")), HandlerProcessor("b", _AppendHandler("b"))]
    )
    group.process(fc)
    assert fc.meta.genres == ["a", "b"]
    assert group.name == "group"


def test_group_continues_after_failure_and_raises_last():
    fc = _context()
    group = ProcessorGroup(
        [
            HandlerProcessor("f1", _FailingHandler("first")),
            HandlerProcessor("a", _AppendHandler("a")),
            HandlerProcessor("f2", _FailingHandler("second")),
            HandlerProcessor("b", _AppendHandler("b")),
        ]
    )
    with pytest.raises(RuntimeError, match="second"):
        group.process(fc)
    assert fc.meta.genres == ["a", "b"]


def test_empty_group_is_noop():
    fc = _context()
    before = copy.deepcopy(fc)
    ProcessorGroup([]).process(fc)
    assert fc == before


def test_processor_is_abstract():
    with pytest.raises(TypeError):
        Processor()