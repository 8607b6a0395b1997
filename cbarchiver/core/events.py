#!/usr/bin/env python3
"""
Progress events sent from the packing pipeline to its caller.
The caller supplies an ``emit(event)`` sink; the pipeline is the only producer.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple, Optional, Union


@dataclass(frozen=True)
class Starting:
    """A folder is about to be processed (``index`` is 1-based)."""

    index: int
    total: int
    folder_name: str

    @property
    def text(self) -> str:
        return f"{self.index}/{self.total} {self.folder_name}"


@dataclass(frozen=True)
class Fraction:
    """Overall progress in ``[0, 1]``; never decreases within a run."""

    value: float


@dataclass(frozen=True)
class Message:
    text: str


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Aborted:
    reason: str


ProgressEvent = Union[Starting, Fraction, Message, Done, Aborted]


class FolderResult(NamedTuple):
    """Outcome of one leaf folder."""

    folder: Path
    archive: Path
    container_type: str
    pages: int = 0
    source_bytes: int = 0
    archive_bytes: int = 0
    skipped: bool = False


class RunResult(NamedTuple):
    """Outcome of a whole packing run."""

    results: List[FolderResult]
    aborted: bool = False
    reason: Optional[str] = None

    @property
    def archived(self) -> List[FolderResult]:
        return [r for r in self.results if not r.skipped]

    @property
    def skipped(self) -> List[FolderResult]:
        return [r for r in self.results if r.skipped]
