from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CompareResult(Enum):
    ERROR = "error"
    SRC_MISSING = "src_missing"
    SRC_NOT_FILE = "src_not_file"
    DST_MISSING = "dst_missing"
    DST_NOT_FILE = "dst_not_file"
    SAME_AGE = "same_age"
    DST_NEWER = "dst_newer"
    SRC_LARGER_NEWER = "src_larger_newer"
    SRC_NEWER = "src_newer"


@dataclass(slots=True, frozen=True)
class FileStat:
    size: int
    mtime: int
    is_regular: bool = True


@dataclass(slots=True, frozen=True)
class SyncDecision:
    label: str | None
    should_copy: bool


@dataclass(slots=True)
class SyncStats:
    copied: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass(slots=True)
class PurgeReport:
    entries: list[str] = field(default_factory=list)
    failed_directories: int = 0

    def add(self, relative_path: str) -> None:
        self.entries.append(relative_path)
