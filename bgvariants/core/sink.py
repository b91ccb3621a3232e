from __future__ import annotations

import logging
from typing import Iterable, List, Protocol

from bgvariants.core.records import OutputRecord

logger = logging.getLogger(__name__)


class RecordSink(Protocol):
    def emit(self, record: OutputRecord) -> None:
        ...


class ListSink:
    def __init__(self) -> None:
        self.records: List[OutputRecord] = []

    def emit(self, record: OutputRecord) -> None:
        self.records.append(record)


class LoggingSink:
    def __init__(self, log: logging.Logger = logger) -> None:
        self._log = log

    def emit(self, record: OutputRecord) -> None:
        self._log.info("%s", record.describe())


def emit_all(records: Iterable[OutputRecord], sink: RecordSink) -> None:
    for r in records:
        sink.emit(r)
