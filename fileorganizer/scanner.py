import logging
import os
from pathlib import Path
from datetime import datetime
from typing import Iterable, List, Optional

from .models import FileRecord, ScanResult
from .utils import is_hidden

logger = logging.getLogger(__name__)


def _creation_time(stat: os.stat_result) -> datetime:
    # st_birthtime is missing on most Linux filesystems; fall back to mtime.
    birth = getattr(stat, "st_birthtime", None)
    if birth is None:
        birth = stat.st_mtime
    return datetime.fromtimestamp(birth)


class FolderScanner:
    """Scans root folders (optionally recursively) into FileRecord objects.

    Directories that cannot be read are counted in ``ScanResult.denied``
    instead of aborting the scan.
    """

    def __init__(self, roots: Iterable[Path], recursive: bool = True, ignore_hidden: bool = False):
        if isinstance(roots, (str, Path)):
            roots = [roots]
        self.roots = [Path(r) for r in roots]
        self.recursive = recursive
        self.ignore_hidden = ignore_hidden
        self._denied = 0

    def scan(self) -> ScanResult:
        self._denied = 0
        files: List[FileRecord] = []
        seen = set()
        for root in self.roots:
            if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
                logger.warning("Skipping unreadable root %s", root)
                self._denied += 1
                continue
            for p in self._iter_files(root):
                if p in seen:
                    continue
                rec = self._record(root, p)
                if rec is None:
                    continue
                seen.add(p)
                files.append(rec)
        if self._denied:
            logger.warning("%d directories could not be read", self._denied)
        return ScanResult(records=files, denied=self._denied)

    def _on_error(self, err: OSError) -> None:
        logger.warning("Cannot read %s: %s", err.filename, err.strerror)
        self._denied += 1

    def _iter_files(self, root: Path):
        if not self.recursive:
            try:
                entries = list(os.scandir(root))
            except OSError as err:
                self._on_error(err)
                return
            for entry in entries:
                if entry.is_file():
                    yield Path(entry.path)
            return

        # followlinks=False keeps symlinked directories (and their cycles) out.
        for dirpath, _dirnames, filenames in os.walk(root, onerror=self._on_error):
            for name in filenames:
                p = Path(dirpath) / name
                if p.is_file():
                    yield p

    def _record(self, root: Path, p: Path) -> Optional[FileRecord]:
        relative = p.relative_to(root)
        if self.ignore_hidden and is_hidden(relative):
            return None
        try:
            stat = os.stat(p)
        except OSError as err:
            # Keep the file listed with placeholder attributes.
            logger.debug("stat failed for %s: %s", p, err)
            now = datetime.now()
            return FileRecord(p, p.name, 0, now, now, relative)
        return FileRecord(
            path=p,
            name=p.name,
            size=stat.st_size,
            created=_creation_time(stat),
            modified=datetime.fromtimestamp(stat.st_mtime),
            relative_path=relative,
        )
