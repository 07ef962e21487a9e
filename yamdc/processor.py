"""Processors that enrich or convert the metadata of a file context."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Protocol

from .model import FileContext

logger = logging.getLogger(__name__)


class _Handler(Protocol):
    def handle(self, fc: FileContext) -> None: ...


class Processor(ABC):
    """A named step that works on a file context."""

    name: str = ""

    @abstractmethod
    def process(self, fc: FileContext) -> None:
        """Work on the file context; raise on failure."""


class DefaultProcessor(Processor):
    """A processor that does nothing."""

    name = "default"

    def process(self, fc: FileContext) -> None:
        return None


class HandlerProcessor(Processor):
    """Runs one handler under a name."""

    def __init__(self, name: str, handler: _Handler) -> None:
        self.name = name
        self.handler = handler

    def process(self, fc: FileContext) -> None:
        self.handler.handle(fc)


class ProcessorGroup(Processor):
    """Runs every processor; failures are logged and the last one is raised."""

    name = "group"

    def __init__(self, processors: Iterable[Processor]) -> None:
        self.processors = list(processors)

    def process(self, fc: FileContext) -> None:
        last_error: Exception | None = None
        for proc in self.processors:
            try:
                proc.process(fc)
            except Exception as exc:  # each processor is independent of the others
                logger.error("process failed, name:%s, err:%s", proc.name, exc)
                last_error = exc
        if last_error is not None:
            raise last_error


DEFAULT_PROCESSOR = DefaultProcessor()