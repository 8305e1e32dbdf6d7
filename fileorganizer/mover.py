import logging
import os
import shutil
import threading
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .classifier import Classifier, RuleSet
from .default_rules import EXECUTABLE_EXTENSIONS
from .errors import DestinationError
from .models import (
    COPIED,
    ERROR,
    MOVED,
    NOT_PROCESSED,
    SKIPPED,
    CategoryRule,
    FileRecord,
    LogEntry,
    OrganizePolicy,
    Report,
)
from .report import ReportWriter
from .utils import date_stamp

logger = logging.getLogger(__name__)


class Relocator:
    """Copies or moves files into ``<base>/<category>/`` folders.

    The base is the policy's custom destination, or a ``dd-MM-yyyy`` folder
    next to the first file. A file already present at the target is
    overwritten.
    """

    def __init__(
        self,
        policy: OrganizePolicy,
        rules: Sequence[CategoryRule],
        run_date: Optional[date] = None,
    ):
        self.policy = policy
        self.classifier = Classifier(RuleSet(rules))
        self.run_date = run_date or date.today()

    def resolve_base(self, files: Sequence[FileRecord]) -> Path:
        custom = self.policy.custom_destination
        if custom is not None and str(custom).strip():
            return Path(custom).expanduser()
        return files[0].path.parent / date_stamp(self.run_date)

    def is_skipped(self, rec: FileRecord) -> bool:
        return self.policy.skip_executables and rec.ext in EXECUTABLE_EXTENSIONS

    def target_for(self, rec: FileRecord, category: str, base: Path) -> Path:
        return base / category / rec.name

    def plan(self, files: Sequence[FileRecord]) -> List[Tuple[FileRecord, Optional[Path]]]:
        """Dry run: targets ``organize`` would use, None for skipped files."""
        if not files:
            return []
        base = self.resolve_base(files)
        return [
            (rec, None if self.is_skipped(rec) else self.target_for(rec, category, base))
            for rec, category in self.classifier.assign(list(files))
        ]

    def relocate_one(self, rec: FileRecord, category: str, base: Path) -> LogEntry:
        if self.is_skipped(rec):
            logger.debug("Skipping executable %s", rec.path)
            return LogEntry(SKIPPED, rec.name, source=rec.path)

        target = self.target_for(rec, category, base)
        status = COPIED if self.policy.keep_original else MOVED
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if target.is_dir():
                raise IsADirectoryError(f"Target is a directory: {target}")
            if target.exists() and os.path.samefile(rec.path, target):
                # Already in place, e.g. picked up again by a recursive rescan.
                logger.debug("%s is already at its target", rec.path)
            elif self.policy.keep_original:
                shutil.copy2(str(rec.path), str(target))
            else:
                # Replaces an existing file at target, falls back to copy+delete across devices.
                shutil.move(str(rec.path), str(target))
        except OSError as err:
            logger.warning("Failed to relocate %s: %s", rec.path, err)
            return LogEntry(ERROR, rec.name, source=rec.path, target=target, message=str(err))

        logger.debug("%s %s -> %s", status, rec.path, target)
        return LogEntry(status, rec.name, source=rec.path, target=target)

    def organize(
        self,
        files: Sequence[FileRecord],
        cancel: Optional[threading.Event] = None,
    ) -> Report:
        files = list(files)
        if not files:
            return Report(base=None, path=None)

        base = self.resolve_base(files)
        try:
            base.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise DestinationError(f"Cannot create destination {base}: {err}") from err

        entries: List[LogEntry] = []
        for rec, category in self.classifier.assign(files):
            if cancel is not None and cancel.is_set():
                entries.append(LogEntry(NOT_PROCESSED, rec.name, source=rec.path))
                continue
            entries.append(self.relocate_one(rec, category, base))

        writer = ReportWriter(base, self.run_date)
        path = writer.append(entries)
        report = Report(base=base, path=path, entries=entries)
        logger.info(
            "Finished: moved=%d copied=%d skipped=%d errors=%d not_processed=%d",
            report.moved, report.copied, report.skipped, report.errors, report.not_processed,
        )
        return report
