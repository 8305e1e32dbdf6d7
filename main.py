import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from fileorganizer.config import (
    config_path,
    dump_config,
    load_config,
    regenerate_config,
    save_config,
)
from fileorganizer.errors import ConfigError, FileOrganizerError
from fileorganizer.filters import apply_filters, build_filter, parse_size
from fileorganizer.models import STATUSES, OrganizePolicy
from fileorganizer.mover import Relocator
from fileorganizer.report import parse_report
from fileorganizer.scanner import FolderScanner
from fileorganizer.undo import UndoManager
from fileorganizer.utils import ensure_path, format_size, parse_date_stamp

TIME_FMT = "%Y-%m-%d %H:%M"


def _size_arg(raw: str) -> int:
    size = parse_size(raw)
    if size is None:
        raise argparse.ArgumentTypeError(f"invalid size: {raw!r} (e.g. 500, 20 KB, 3 MB)")
    return size


def _date_arg(raw: str):
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {raw!r} (expected YYYY-MM-DD)") from None


def _add_scan_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("roots", nargs="+", help="Folders to scan")
    p.add_argument("--recursive", "-r", action="store_true", help="Include subfolders")
    p.add_argument("--name", default="", help="SQL LIKE name pattern, e.g. %%.pdf")
    p.add_argument("--min-size", type=_size_arg)
    p.add_argument("--max-size", type=_size_arg)
    p.add_argument("--modified-from", type=_date_arg)
    p.add_argument("--modified-to", type=_date_arg)


def _collect(args):
    # Missing or unreadable roots are counted as denied by the scanner.
    roots = [Path(r).expanduser() for r in args.roots]
    result = FolderScanner(roots, recursive=args.recursive).scan()
    predicate = build_filter(
        args.name, args.min_size, args.max_size, args.modified_from, args.modified_to
    )
    files = apply_filters(result.records, predicate)
    if result.denied:
        print(f"Skipped {result.denied} items without permission.")
    return files


def scan_flow(args) -> int:
    files = _collect(args)
    for rec in files:
        print(
            f"{str(rec.relative_path):50} {format_size(rec.size):>10}  "
            f"{rec.created.strftime(TIME_FMT)}  {rec.modified.strftime(TIME_FMT)}"
        )
    print(f"\nFiles: {len(files)}")
    return 0


def organize_flow(args) -> int:
    cfg_file = config_path(args.config)
    cfg = load_config(cfg_file)
    base_policy = cfg.to_policy()

    keep = base_policy.keep_original if args.keep is None else args.keep
    skip = base_policy.skip_executables if args.skip_exe is None else args.skip_exe
    dest = Path(args.dest).expanduser() if args.dest else base_policy.custom_destination
    policy = OrganizePolicy(keep_original=keep, skip_executables=skip, custom_destination=dest)

    files = _collect(args)
    if not files:
        print("No files selected")
        return 0

    relocator = Relocator(policy, cfg.rules)
    if args.dry_run:
        print("--- DRY RUN ---")
        for rec, target in relocator.plan(files):
            print(f"{rec.name:40} -> {target if target else '(skipped)'}")
        print(f"\nTotal files planned: {len(files)}")
        return 0

    report = relocator.organize(files)
    save_config(cfg.with_policy(policy), cfg_file)

    print("Finished!")
    print(f"Moved: {report.moved}")
    print(f"Copied: {report.copied}")
    print(f"Skipped: {report.skipped}")
    print(f"Errors: {report.errors}")
    print(f"Report: {report.path}")
    return 1 if report.errors else 0


def undo_flow(args) -> int:
    root = ensure_path(args.root)
    day = parse_date_stamp(args.date) if args.date else None
    result = UndoManager(root, day=day).undo()
    print("===== UNDO REPORT =====")
    for e in result.entries:
        if e.performed:
            print(f"✔  {e.src}  →  {e.dst}")
        else:
            print(f"✘  {e.src}  –  {e.reason}")
    print(f"Done: restored {result.restored} files.")
    return 1 if result.failed else 0


def report_flow(args) -> int:
    entries = parse_report(ensure_path(args.path))
    for status in STATUSES:
        print(f"{status}: {sum(1 for e in entries if e.status == status)}")
    return 0


def config_flow(args) -> int:
    cfg_file = config_path(args.config)
    if args.reset:
        regenerate_config(cfg_file)
        print(f"Wrote default config to {cfg_file}")
        return 0
    print(dump_config(load_config(cfg_file)), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-organizer",
        description="Sort files into category folders by extension.",
    )
    parser.add_argument("--config", help="Config file (default: $FILE_ORGANIZER_CONFIG or ./file-organizer.cfg)")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scan = sub.add_parser("scan", help="List files with size and dates")
    _add_scan_args(p_scan)
    p_scan.set_defaults(func=scan_flow)

    p_org = sub.add_parser("organize", help="Move or copy files into category folders")
    _add_scan_args(p_org)
    mode = p_org.add_mutually_exclusive_group()
    mode.add_argument("--keep", dest="keep", action="store_true", default=None, help="Copy, keep originals")
    mode.add_argument("--move", dest="keep", action="store_false", default=None, help="Move files")
    p_org.add_argument("--skip-exe", dest="skip_exe", action=argparse.BooleanOptionalAction, default=None)
    p_org.add_argument("--dest", help="Custom destination folder")
    p_org.add_argument("--dry-run", action="store_true", help="Only print the planned targets")
    p_org.set_defaults(func=organize_flow)

    p_undo = sub.add_parser("undo", help="Move files from a dated folder back to its root")
    p_undo.add_argument("root")
    p_undo.add_argument("--date", help="dd-MM-yyyy (default: today)")
    p_undo.set_defaults(func=undo_flow)

    p_rep = sub.add_parser("report", help="Summarize an organizer report file")
    p_rep.add_argument("path")
    p_rep.set_defaults(func=report_flow)

    p_cfg = sub.add_parser("config", help="Print the config, or --reset it to defaults")
    p_cfg.add_argument("--reset", action="store_true")
    p_cfg.set_defaults(func=config_flow)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except ConfigError as err:
        print(f"Config error: {err}", file=sys.stderr)
        print("Fix the file or run 'file-organizer config --reset' to regenerate defaults.", file=sys.stderr)
        return 2
    except FileOrganizerError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
