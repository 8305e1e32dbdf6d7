from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from .default_rules import DATE_FORMAT
from .errors import InvalidPathError


def ensure_path(path_str: str) -> Path:
    """Return a resolved Path object and ensure it exists."""
    p = Path(path_str).expanduser().resolve()
    if not p.exists():
        raise InvalidPathError(f"Path does not exist: {p}")
    return p


def date_stamp(day: Optional[Union[date, datetime]] = None) -> str:
    """Folder/report date label, e.g. '18-10-2026'."""
    return (day or date.today()).strftime(DATE_FORMAT)


def parse_date_stamp(text: str) -> date:
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidPathError(f"Expected a dd-MM-yyyy date, got {text!r}") from None


def normalize_extension(raw: str) -> str:
    return raw.strip().lower().lstrip(".")


def is_hidden(path: Path) -> bool:
    return any(part.startswith(".") for part in path.parts)


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 ** 2:
        value, unit = size / 1024, "KB"
    elif size < 1024 ** 3:
        value, unit = size / 1024 ** 2, "MB"
    else:
        value, unit = size / 1024 ** 3, "GB"
    return f"{value:,.2f}".rstrip("0").rstrip(".") + f" {unit}"
