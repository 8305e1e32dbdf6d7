import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fileorganizer.scanner import FolderScanner  # noqa: E402


class ScannerTests(unittest.TestCase):
    def _tree(self, root: Path) -> None:
        (root / "top.txt").write_text("top", encoding="utf-8")
        sub = root / "sub"
        sub.mkdir()
        (sub / "nested.pdf").write_bytes(b"%PDF")
        (root / ".hidden").write_text("h", encoding="utf-8")

    def test_non_recursive_lists_direct_files_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._tree(root)
            result = FolderScanner([root], recursive=False).scan()
            names = {r.name for r in result.records}
            self.assertEqual(names, {"top.txt", ".hidden"})
            self.assertEqual(result.denied, 0)

    def test_recursive_walks_subtree_with_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._tree(root)
            result = FolderScanner([root], recursive=True).scan()
            rel = {str(r.relative_path) for r in result.records}
            self.assertEqual(rel, {"top.txt", os.path.join("sub", "nested.pdf"), ".hidden"})
            nested = next(r for r in result.records if r.name == "nested.pdf")
            self.assertEqual(nested.size, 4)
            self.assertEqual(nested.ext, "pdf")
            self.assertLessEqual(abs((nested.created - nested.modified).days), 1)

    def test_ignore_hidden(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._tree(root)
            result = FolderScanner(root, recursive=True, ignore_hidden=True).scan()
            self.assertNotIn(".hidden", {r.name for r in result.records})

    def test_missing_root_is_counted_as_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("a", encoding="utf-8")
            result = FolderScanner([root / "missing", root], recursive=True).scan()
            self.assertEqual(result.denied, 1)
            self.assertEqual([r.name for r in result.records], ["a.txt"])

    def test_overlapping_roots_list_each_file_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._tree(root)
            result = FolderScanner([root, root / "sub"], recursive=True).scan()
            names = [r.name for r in result.records]
            self.assertEqual(names.count("nested.pdf"), 1)

    def test_stat_failure_keeps_record_with_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            target = root / "locked.txt"
            target.write_text("data", encoding="utf-8")
            scanner = FolderScanner([root])
            with mock.patch("fileorganizer.scanner.os.stat", side_effect=PermissionError("denied")):
                rec = scanner._record(root, target)
            self.assertIsNotNone(rec)
            self.assertEqual(rec.name, "locked.txt")
            self.assertEqual(rec.size, 0)
            self.assertEqual(rec.created, rec.modified)
            self.assertEqual(rec.relative_path, Path("locked.txt"))

    @unittest.skipIf(os.name == "nt" or os.geteuid() == 0, "permissions not enforced")
    def test_unreadable_subdirectory_is_counted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._tree(root)
            locked = root / "locked"
            locked.mkdir()
            (locked / "secret.txt").write_text("s", encoding="utf-8")
            locked.chmod(0)
            try:
                result = FolderScanner([root], recursive=True).scan()
            finally:
                locked.chmod(0o755)
            self.assertEqual(result.denied, 1)
            self.assertIn("nested.pdf", {r.name for r in result.records})
            self.assertNotIn("secret.txt", {r.name for r in result.records})


if __name__ == "__main__":
    unittest.main()
