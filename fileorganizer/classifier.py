from typing import Dict, Iterable, List, Sequence, Tuple

from .models import CategoryRule, FileRecord
from .default_rules import DEFAULT_CATEGORY_RULES, DEFAULT_OTHER_FOLDER
from .utils import normalize_extension


def make_rule(category: str, extensions: Iterable[str]) -> CategoryRule:
    exts: List[str] = []
    for ext in extensions:
        ext = normalize_extension(ext)
        if ext and ext not in exts:
            exts.append(ext)
    return CategoryRule(category=category.strip().strip("/"), extensions=tuple(exts))


def default_rules() -> List[CategoryRule]:
    return [make_rule(category, exts) for category, exts in DEFAULT_CATEGORY_RULES]


def classify(extension: str, rules: Sequence[CategoryRule]) -> str:
    """First rule (in declaration order) listing the extension wins."""
    ext = normalize_extension(extension)
    for rule in rules:
        if ext in rule.extensions:
            return rule.category
    return DEFAULT_OTHER_FOLDER


class RuleSet:
    """Extension→category index built once from an ordered rule list."""

    def __init__(self, rules: Sequence[CategoryRule]):
        self.rules = list(rules)
        self.map: Dict[str, str] = {}
        for rule in self.rules:
            for ext in rule.extensions:
                # Overlapping rules: keep the earlier declaration.
                self.map.setdefault(ext, rule.category)

    def classify(self, rec: FileRecord) -> str:
        return self.map.get(rec.ext, DEFAULT_OTHER_FOLDER)

class Classifier:
    """Given a list of FileRecord, return (record, category) tuples."""
    def __init__(self, rule_set: RuleSet):
        self.rules = rule_set

    def assign(self, files: List[FileRecord]) -> List[Tuple[FileRecord, str]]:
        return [(f, self.rules.classify(f)) for f in files]
