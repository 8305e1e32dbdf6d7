import logging
import os
import shutil
from datetime import date
from pathlib import Path
from typing import Optional

from .errors import InvalidPathError
from .models import UndoEntry, UndoReport
from .utils import date_stamp

logger = logging.getLogger(__name__)


class UndoManager:
    """Moves everything under ``<root>/<dd-MM-yyyy>`` back into ``root``.

    Files are restored deepest first; directories left empty are removed,
    the dated folder included. Existing files in ``root`` are overwritten.
    """

    def __init__(self, root: Path, day: Optional[date] = None, folder_name: Optional[str] = None):
        self.root = Path(root)
        self.dated_dir = self.root / (folder_name or date_stamp(day))

    def undo(self) -> UndoReport:
        if not self.dated_dir.is_dir():
            raise InvalidPathError(f"Folder {self.dated_dir.name!r} does not exist in {self.root}")

        report = UndoReport(dated_dir=self.dated_dir)
        for dirpath, _dirnames, filenames in os.walk(self.dated_dir, topdown=False):
            current = Path(dirpath)
            for name in sorted(filenames):
                report.entries.append(self._restore(current / name))
            if current == self.dated_dir:
                continue
            self._remove_if_empty(current, report)
        self._remove_if_empty(self.dated_dir, report)

        logger.info("Undo of %s: restored=%d failed=%d", self.dated_dir, report.restored, report.failed)
        return report

    def _restore(self, src: Path) -> UndoEntry:
        dst = self.root / src.name
        try:
            if dst.is_dir():
                raise IsADirectoryError(f"Target is a directory: {dst}")
            shutil.move(str(src), str(dst))
        except OSError as err:
            logger.warning("Failed to restore %s: %s", src, err)
            return UndoEntry(src, dst, performed=False, reason=str(err))
        logger.debug("Restored %s -> %s", src, dst)
        return UndoEntry(src, dst, performed=True)

    def _remove_if_empty(self, directory: Path, report: UndoReport) -> None:
        try:
            if any(directory.iterdir()):
                return
            directory.rmdir()
        except OSError as err:
            logger.warning("Cannot remove %s: %s", directory, err)
            return
        report.removed_dirs.append(directory)
