from dataclasses import dataclass, field
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional, Tuple

MOVED = "Moved"
COPIED = "Copied"
SKIPPED = "Skipped"
ERROR = "Error"
NOT_PROCESSED = "NotProcessed"

STATUSES = (MOVED, COPIED, SKIPPED, ERROR, NOT_PROCESSED)


@dataclass(frozen=True)
class FileRecord:
    path: Path
    name: str
    size: int
    created: datetime
    modified: datetime
    relative_path: Path

    @property
    def ext(self) -> str:
        """Lowercase extension without the leading dot ('' when absent)."""
        return self.path.suffix.lower().lstrip(".")


@dataclass(frozen=True)
class ScanResult:
    records: List[FileRecord]
    denied: int = 0


@dataclass(frozen=True)
class CategoryRule:
    category: str
    extensions: Tuple[str, ...]


@dataclass(frozen=True)
class OrganizePolicy:
    keep_original: bool = False
    skip_executables: bool = True
    custom_destination: Optional[Path] = None


@dataclass(frozen=True)
class LogEntry:
    status: str
    name: str
    source: Optional[Path] = None
    target: Optional[Path] = None
    message: str = ""


@dataclass
class Report:
    base: Optional[Path]
    path: Optional[Path]
    entries: List[LogEntry] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for e in self.entries if e.status == status)

    @property
    def counts(self) -> Dict[str, int]:
        return {status: self.count(status) for status in STATUSES}

    @property
    def moved(self) -> int:
        return self.count(MOVED)

    @property
    def copied(self) -> int:
        return self.count(COPIED)

    @property
    def skipped(self) -> int:
        return self.count(SKIPPED)

    @property
    def errors(self) -> int:
        return self.count(ERROR)

    @property
    def not_processed(self) -> int:
        return self.count(NOT_PROCESSED)


@dataclass(frozen=True)
class UndoEntry:
    src: Path
    dst: Path
    performed: bool
    reason: str = ""


@dataclass
class UndoReport:
    dated_dir: Path
    entries: List[UndoEntry] = field(default_factory=list)
    removed_dirs: List[Path] = field(default_factory=list)

    @property
    def restored(self) -> int:
        return sum(1 for e in self.entries if e.performed)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.entries if not e.performed)
