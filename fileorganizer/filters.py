"""Composable predicates for narrowing a scan before organizing."""
import re
from datetime import date
from typing import Callable, Iterable, List, Optional

from .models import FileRecord

Predicate = Callable[[FileRecord], bool]

_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024 ** 2, "GB": 1024 ** 3}
_SIZE_RE = re.compile(r"^(\d[\d ]*)\s*([KMG]?B)?$", re.IGNORECASE)


def parse_size(raw: str) -> Optional[int]:
    """'10 MB' -> 10485760. Blank or unparsable input gives None."""
    if not raw or not raw.strip():
        return None
    m = _SIZE_RE.match(raw.strip())
    if not m:
        return None
    number = int(m.group(1).replace(" ", ""))
    return number * _UNITS[(m.group(2) or "").upper()]


def like_to_regex(pattern: str) -> "re.Pattern[str]":
    """SQL LIKE: '%' is any run of characters, '_' a single one."""
    parts = []
    for ch in pattern.strip():
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def name_like(pattern: str) -> Predicate:
    regex = like_to_regex(pattern)
    return lambda rec: regex.fullmatch(rec.name) is not None


def size_between(min_size: Optional[int] = None, max_size: Optional[int] = None) -> Predicate:
    def check(rec: FileRecord) -> bool:
        if min_size is not None and rec.size < min_size:
            return False
        if max_size is not None and rec.size > max_size:
            return False
        return True
    return check


def modified_between(start: Optional[date] = None, end: Optional[date] = None) -> Predicate:
    """Inclusive on both ends, compared by calendar day."""
    def check(rec: FileRecord) -> bool:
        day = rec.modified.date()
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True
    return check


def all_of(*predicates: Predicate) -> Predicate:
    return lambda rec: all(p(rec) for p in predicates)


def apply_filters(records: Iterable[FileRecord], predicate: Predicate) -> List[FileRecord]:
    return [rec for rec in records if predicate(rec)]


def build_filter(
    pattern: str = "",
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
    modified_from: Optional[date] = None,
    modified_to: Optional[date] = None,
) -> Predicate:
    predicates: List[Predicate] = []
    if pattern and pattern.strip():
        predicates.append(name_like(pattern))
    if min_size is not None or max_size is not None:
        predicates.append(size_between(min_size, max_size))
    if modified_from is not None or modified_to is not None:
        predicates.append(modified_between(modified_from, modified_to))
    return all_of(*predicates)
