import sys
import unittest
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fileorganizer.classifier import (  # noqa: E402
    Classifier,
    RuleSet,
    classify,
    default_rules,
    make_rule,
)
from fileorganizer.models import FileRecord  # noqa: E402


def _rec(name: str) -> FileRecord:
    now = datetime.now()
    return FileRecord(Path("/tmp") / name, name, 1, now, now, Path(name))


class ClassifierTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rules = [
            make_rule("documents/pdf", ["pdf"]),
            make_rule("images/photos", ["jpg", "jpeg"]),
        ]

    def test_classify_is_case_insensitive(self) -> None:
        self.assertEqual(classify("JPG", self.rules), classify("jpg", self.rules))
        self.assertEqual(classify("JPG", self.rules), "images/photos")

    def test_classify_accepts_leading_dot(self) -> None:
        self.assertEqual(classify(".pdf", self.rules), "documents/pdf")

    def test_unmatched_extension_is_others(self) -> None:
        self.assertEqual(classify("xyz", self.rules), "others")
        self.assertEqual(classify("", self.rules), "others")

    def test_first_declared_rule_wins_on_overlap(self) -> None:
        rules = [make_rule("a/first", ["txt"]), make_rule("b/second", ["TXT", "md"])]
        self.assertEqual(classify("txt", rules), "a/first")
        self.assertEqual(RuleSet(rules).classify(_rec("notes.txt")), "a/first")
        self.assertEqual(RuleSet(rules).classify(_rec("notes.md")), "b/second")

    def test_make_rule_normalizes_extensions(self) -> None:
        rule = make_rule("docs/", [".PDF", " pdf ", "", "Doc"])
        self.assertEqual(rule.category, "docs")
        self.assertEqual(rule.extensions, ("pdf", "doc"))

    def test_assign_pairs_each_record_once(self) -> None:
        files = [_rec("a.pdf"), _rec("b.JPEG"), _rec("c")]
        pairs = Classifier(RuleSet(self.rules)).assign(files)
        self.assertEqual(
            [cat for _, cat in pairs], ["documents/pdf", "images/photos", "others"]
        )

    def test_default_rules_order(self) -> None:
        categories = [r.category for r in default_rules()]
        self.assertEqual(
            categories,
            ["documents/pdf", "images/photos", "presentations/ppt", "archives/all"],
        )


if __name__ == "__main__":
    unittest.main()
