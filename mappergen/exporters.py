# File: mappergen/exporters.py
"""
mappergen - Output Sinks
==========================

Where rendered modules go:

    - ``FileSystemSink`` creates directories and writes each file atomically
      (temp file + rename), keeping a record per written file.
    - ``DryRunRecorder`` records what *would* be written and touches nothing.

The file-system sink exposes the two calls the generator needs,
``ensure_directory`` and ``write_file``.  Nothing is ever read back.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Protocol

from mappergen.utils import count_lines, ensure_directory, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.exporters")


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single emitted file."""

    path: str
    size_bytes: int
    line_count: int


@dataclass(frozen=True, slots=True)
class PlannedWrite:
    """A write captured in dry-run mode."""

    path: str
    content: str


class OutputSink(Protocol):
    def ensure_directory(self, path: Path) -> None: ...

    def write_file(self, path: Path, content: str) -> None: ...


@dataclass(slots=True)
class FileSystemSink:
    """Writes generated modules to disk."""

    atomic_writes: bool = True
    records: List[FileRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def ensure_directory(self, path: Path) -> None:
        ensure_directory(path)

    def write_file(self, path: Path, content: str) -> None:
        logger.info("Writing %s", path)
        size: int = write_file(path, content, atomic=self.atomic_writes)
        # Writes run on worker threads; the record list is shared.
        with self._lock:
            self.records.append(
                FileRecord(path=str(path), size_bytes=size, line_count=count_lines(content))
            )


@dataclass(slots=True)
class DryRunRecorder:
    """Captures intended writes instead of executing them."""

    planned: List[PlannedWrite] = field(default_factory=list)

    def record(self, path: Path, content: str) -> None:
        logger.info("Will populate %s with:", path)
        logger.info("%s", content)
        logger.info("---")
        self.planned.append(PlannedWrite(path=str(path), content=content))

    @property
    def records(self) -> List[FileRecord]:
        return [
            FileRecord(
                path=p.path,
                size_bytes=len(p.content.encode("utf-8")),
                line_count=count_lines(p.content),
            )
            for p in self.planned
        ]


__all__: List[str] = [
    "FileRecord",
    "PlannedWrite",
    "OutputSink",
    "FileSystemSink",
    "DryRunRecorder",
]
