import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from .classifier import default_rules, make_rule
from .default_rules import DEFAULT_EXE_ENTRY, EXE_KEY
from .errors import ConfigError
from .models import CategoryRule, OrganizePolicy

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("file-organizer.cfg")
CONFIG_ENV = "FILE_ORGANIZER_CONFIG"

KEEP_ORIGINAL = "keepOriginal"
SKIP_EXE = "skipExe"
USE_CUSTOM_DESTINATION = "useCustomDestination"
CUSTOM_DESTINATION = "customDestination"
BOOLEAN_KEYS = (KEEP_ORIGINAL, SKIP_EXE, USE_CUSTOM_DESTINATION)

HEADER = """\
# File Organizer config
#
# Add your own categories, e.g.:
# images/gimp=psd,xcf
# documents/word=doc,docx
#
# Format: folder/name=extension1,extension2,...
# Only keys containing "/" are categories.
# The first category listing an extension wins.
#
# Everything unassigned goes to "others".
#
"""

_EXTENSION_RE = re.compile(r"^[^\s./\\]+$")


@dataclass
class OrganizerConfig:
    rules: List[CategoryRule] = field(default_factory=default_rules)
    keep_original: bool = False
    skip_executables: bool = True
    use_custom_destination: bool = False
    custom_destination: str = ""
    exe_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXE_ENTRY))

    def to_policy(self) -> OrganizePolicy:
        custom = None
        if self.use_custom_destination and self.custom_destination.strip():
            custom = Path(self.custom_destination.strip()).expanduser()
        return OrganizePolicy(
            keep_original=self.keep_original,
            skip_executables=self.skip_executables,
            custom_destination=custom,
        )

    def with_policy(self, policy: OrganizePolicy) -> "OrganizerConfig":
        """Copy carrying the toggles of ``policy``, to be saved after a run."""
        custom = policy.custom_destination
        return replace(
            self,
            keep_original=policy.keep_original,
            skip_executables=policy.skip_executables,
            use_custom_destination=custom is not None,
            custom_destination=str(custom) if custom is not None else self.custom_destination,
        )


def config_path(explicit: Optional[str] = None) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return CONFIG_FILE


def _parse_bool(key: str, value: str, path, lineno: int) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ConfigError(f"{key} must be true or false, got {value!r}", path, lineno)


def _parse_extensions(key: str, value: str, path, lineno: int) -> List[str]:
    raw_exts = [e for e in value.split(",") if e.strip()]
    if not raw_exts:
        raise ConfigError(f"{key!r} lists no extensions", path, lineno)
    for ext in raw_exts:
        if not _EXTENSION_RE.match(ext.strip().lstrip(".")):
            raise ConfigError(f"Invalid extension {ext.strip()!r} in {key!r}", path, lineno)
    return raw_exts


def _parse_rule(key: str, value: str, path, lineno: int) -> CategoryRule:
    if key.startswith("/") or "\\" in key:
        raise ConfigError(f"Category {key!r} must be a relative path using '/'", path, lineno)
    segments = key.split("/")
    if any(seg.strip() in ("", ".", "..") for seg in segments):
        raise ConfigError(f"Category {key!r} has an empty or relative segment", path, lineno)
    return make_rule(key, _parse_extensions(key, value, path, lineno))


def parse_config(text: str, path=None) -> OrganizerConfig:
    """Parse ``key=value`` lines. Any malformed entry raises ConfigError."""
    cfg = OrganizerConfig(rules=[])
    seen: Dict[str, int] = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith(("#", "!")):
            continue
        if "=" not in line:
            raise ConfigError(f"Expected key=value, got {line!r}", path, lineno)
        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            raise ConfigError("Empty key", path, lineno)
        if key in seen:
            raise ConfigError(f"Duplicate key {key!r} (first on line {seen[key]})", path, lineno)
        seen[key] = lineno

        if key in BOOLEAN_KEYS:
            flag = _parse_bool(key, value, path, lineno)
            if key == KEEP_ORIGINAL:
                cfg.keep_original = flag
            elif key == SKIP_EXE:
                cfg.skip_executables = flag
            else:
                cfg.use_custom_destination = flag
        elif key == CUSTOM_DESTINATION:
            cfg.custom_destination = value
        elif "/" in key or "\\" in key:
            cfg.rules.append(_parse_rule(key, value, path, lineno))
        elif key == EXE_KEY:
            cfg.exe_extensions = list(make_rule(key, _parse_extensions(key, value, path, lineno)).extensions)
        else:
            raise ConfigError(
                f"Unknown key {key!r}; category keys need a '/', e.g. images/gimp=psd", path, lineno
            )
    return cfg


def dump_config(cfg: OrganizerConfig) -> str:
    lines = [
        f"{KEEP_ORIGINAL}={str(cfg.keep_original).lower()}",
        f"{SKIP_EXE}={str(cfg.skip_executables).lower()}",
        f"{USE_CUSTOM_DESTINATION}={str(cfg.use_custom_destination).lower()}",
        f"{CUSTOM_DESTINATION}={cfg.custom_destination}",
        f"{EXE_KEY}={','.join(cfg.exe_extensions)}",
    ]
    for rule in cfg.rules:
        lines.append(f"{rule.category}={','.join(rule.extensions)}")
    return HEADER + "\n".join(lines) + "\n"


def save_config(cfg: OrganizerConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_config(cfg), encoding="utf-8")
    logger.debug("Saved config to %s", path)


def load_config(path: Path) -> OrganizerConfig:
    """Load ``path``, writing the defaults first when it does not exist."""
    if not path.exists():
        cfg = OrganizerConfig()
        save_config(cfg, path)
        logger.info("Created default config at %s", path)
        return cfg
    return parse_config(path.read_text(encoding="utf-8"), path)


def regenerate_config(path: Path) -> OrganizerConfig:
    """Replace ``path`` with defaults, keeping the old file as ``<name>.bak``."""
    if path.exists():
        backup = path.with_name(path.name + ".bak")
        os.replace(path, backup)
        logger.warning("Moved existing config to %s", backup)
    cfg = OrganizerConfig()
    save_config(cfg, path)
    return cfg
