import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fileorganizer.errors import DestinationError  # noqa: E402
from fileorganizer.models import COPIED, ERROR, MOVED, NOT_PROCESSED, SKIPPED, LogEntry  # noqa: E402
from fileorganizer.report import (  # noqa: E402
    ReportWriter,
    format_entry,
    parse_line,
    parse_report,
    report_path,
)


class ReportTests(unittest.TestCase):
    def test_report_path_uses_date_stamp(self) -> None:
        path = report_path(Path("/data/out"), date(2024, 7, 4))
        self.assertEqual(path, Path("/data/out/organizer_report-04-07-2024.txt"))

    def test_format_entry_tags(self) -> None:
        target = Path("/out/documents/pdf/a.pdf")
        self.assertEqual(format_entry(LogEntry(MOVED, "a.pdf", target=target)), f"✔ Moved: a.pdf → {target}")
        self.assertEqual(format_entry(LogEntry(COPIED, "a.pdf", target=target)), f"✔ Copied: a.pdf → {target}")
        self.assertEqual(format_entry(LogEntry(SKIPPED, "a.exe")), "⏭ Skipped: a.exe")
        self.assertEqual(format_entry(LogEntry(NOT_PROCESSED, "b.txt")), "⏹ Not processed: b.txt")
        self.assertEqual(
            format_entry(LogEntry(ERROR, "c.txt", message="Permission denied\nmore")),
            "✘ Error moving c.txt: Permission denied more",
        )

    def test_parse_line_reads_back_entries(self) -> None:
        entry = parse_line("✔ Copied: my file.txt → /out/others/my file.txt\n")
        self.assertEqual(entry.status, COPIED)
        self.assertEqual(entry.name, "my file.txt")
        self.assertEqual(entry.target, Path("/out/others/my file.txt"))
        error = parse_line("✘ Error moving x.pdf: [Errno 13] Permission denied")
        self.assertEqual(error.status, ERROR)
        self.assertEqual(error.message, "[Errno 13] Permission denied")
        self.assertIsNone(parse_line("garbage"))

    def test_writer_appends_newline_prefixed_blocks(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            writer = ReportWriter(base, date(2024, 7, 4))
            writer.append([LogEntry(SKIPPED, "a.exe")])
            writer.append([LogEntry(SKIPPED, "b.lnk"), LogEntry(NOT_PROCESSED, "c.txt")])
            text = writer.path.read_text(encoding="utf-8")
            self.assertEqual(text, "\n⏭ Skipped: a.exe\n⏭ Skipped: b.lnk\n⏹ Not processed: c.txt")
            statuses = [e.status for e in parse_report(writer.path)]
            self.assertEqual(statuses, [SKIPPED, SKIPPED, NOT_PROCESSED])

    def test_writer_without_entries_creates_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            writer = ReportWriter(Path(tmp))
            writer.append([])
            self.assertFalse(writer.path.exists())

    def test_writer_missing_base_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            writer = ReportWriter(Path(tmp) / "missing")
            with self.assertRaises(DestinationError):
                writer.append([LogEntry(SKIPPED, "a.exe")])


if __name__ == "__main__":
    unittest.main()
