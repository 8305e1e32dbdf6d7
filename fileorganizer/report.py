import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from .default_rules import REPORT_NAME
from .errors import DestinationError
from .models import COPIED, ERROR, MOVED, NOT_PROCESSED, SKIPPED, LogEntry
from .utils import date_stamp

logger = logging.getLogger(__name__)

ARROW = "→"

_LINE_PATTERNS = [
    (MOVED, re.compile(r"^✔ Moved: (?P<name>.*?) → (?P<target>.*)$")),
    (COPIED, re.compile(r"^✔ Copied: (?P<name>.*?) → (?P<target>.*)$")),
    (SKIPPED, re.compile(r"^⏭ Skipped: (?P<name>.*)$")),
    (ERROR, re.compile(r"^✘ Error moving (?P<name>.*?): (?P<message>.*)$")),
    (NOT_PROCESSED, re.compile(r"^⏹ Not processed: (?P<name>.*)$")),
]


def report_path(base: Path, day: Optional[date] = None) -> Path:
    return base / REPORT_NAME.format(date=date_stamp(day))


def format_entry(entry: LogEntry) -> str:
    if entry.status == MOVED:
        return f"✔ Moved: {entry.name} {ARROW} {entry.target}"
    if entry.status == COPIED:
        return f"✔ Copied: {entry.name} {ARROW} {entry.target}"
    if entry.status == SKIPPED:
        return f"⏭ Skipped: {entry.name}"
    if entry.status == ERROR:
        # One entry per line, whatever the OS put in the message.
        message = " ".join(entry.message.splitlines())
        return f"✘ Error moving {entry.name}: {message}"
    if entry.status == NOT_PROCESSED:
        return f"⏹ Not processed: {entry.name}"
    raise ValueError(f"Unknown log entry status: {entry.status!r}")


def parse_line(line: str) -> Optional[LogEntry]:
    line = line.rstrip("\r\n")
    for status, pattern in _LINE_PATTERNS:
        m = pattern.match(line)
        if not m:
            continue
        groups = m.groupdict()
        target = groups.get("target")
        return LogEntry(
            status=status,
            name=groups["name"],
            target=Path(target) if target else None,
            message=groups.get("message") or "",
        )
    return None


class ReportWriter:
    """Append-only per-date report, colocated with the destination base."""

    def __init__(self, base: Path, day: Optional[date] = None):
        self.base = base
        self.path = report_path(base, day)

    def append(self, entries: Iterable[LogEntry]) -> Path:
        lines = [format_entry(e) for e in entries]
        if not lines:
            return self.path
        block = "\n" + "\n".join(lines)
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(block)
        except OSError as err:
            raise DestinationError(f"Cannot write report {self.path}: {err}") from err
        logger.info("Appended %d entries to %s", len(lines), self.path)
        return self.path


def parse_report(path: Path) -> List[LogEntry]:
    """Read a report back into entries; blank and unknown lines are ignored."""
    entries: List[LogEntry] = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            entry = parse_line(line)
            if entry is None:
                logger.debug("%s:%d: unrecognised report line", path, lineno)
                continue
            entries.append(entry)
    return entries
