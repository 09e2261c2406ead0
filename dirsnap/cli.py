from __future__ import annotations

import argparse
import json as _json
import logging
import os
import sys
from typing import List, Optional

from dirsnap import __version__
from dirsnap.builder import SnapshotBuilder
from dirsnap.catalog import scan_snapshots, sorted_by_date
from dirsnap.constants import FORMAT_VERSION
from dirsnap.errors import RetriesExceededError, SnapshotError


def cmd_list(directory: str, *, as_json: bool = False) -> bool:
    """List the snapshots stored in a directory.

    Args:
        directory: Directory to scan (not recursive).
        as_json: When True, print a JSON document including skipped archives.
    """
    scan = scan_snapshots(directory)
    snapshots = sorted_by_date(scan.snapshots)
    if as_json:
        print(_json.dumps({
            "snapshots": [s.to_dict() for s in snapshots],
            "skipped": [{"location": k.location, "reason": k.reason} for k in scan.skipped],
        }))
        return True
    print("Existing Snapshots:\n")
    for s in snapshots:
        print(f"   {os.path.splitext(s.display_name)[0]} ({s.file_count} files) - \"{s.comment}\"")
    if scan.skipped:
        print(f"\n{len(scan.skipped)} damaged snapshot(s) skipped", file=sys.stderr)
    return True


def cmd_create(
    directory: str,
    *,
    comment: Optional[str] = None,
    overwrite: bool = False,
    exclude: Optional[str] = None,
    quiet: bool = False,
) -> bool:
    """Create a snapshot of ``directory`` inside ``directory``.

    Args:
        directory: Directory to snapshot.
        comment: Comment stored with the snapshot.
        overwrite: Replace a snapshot made earlier today.
        exclude: Regular expression; files whose name matches are skipped.
        quiet: Suppress the summary line.
    """
    path = SnapshotBuilder().create(
        directory,
        FORMAT_VERSION,
        comment=comment,
        exclude_pattern=exclude,
        overwrite=overwrite,
    )
    if not quiet:
        print(f"Snapshot written: {path}")
    return True


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="dirsnap",
        description="Directory snapshot utility",
        epilog="Snapshots are written into the snapshotted directory as 'snapshot YYYY-MM-DD[ N].zip'.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="log progress to stderr (-vv for debug)")
    sub = ap.add_subparsers(dest="cmd")

    sub.add_parser("help", help="Print this help message")

    ap_list = sub.add_parser("list", help="List the snapshots in a directory")
    ap_list.add_argument("directory", help="Directory containing snapshots")
    ap_list.add_argument("--json", action="store_true", help="Emit a JSON document")

    ap_create = sub.add_parser("create", help="Create a snapshot of a directory")
    ap_create.add_argument("directory", help="Directory to snapshot")
    ap_create.add_argument("-c", "--comment", help="Comment to store with the snapshot")
    ap_create.add_argument(
        "-f", "--force", action="store_true",
        help="Overwrite a previous snapshot made on the same date",
    )
    ap_create.add_argument(
        "-e", "--exclude", metavar="REGEX",
        help="Regular expression matching file names to exclude from the snapshot",
    )
    ap_create.add_argument("--quiet", help="do not print the summary line", action="store_true")

    args = ap.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        if args.cmd is None or args.cmd == "help":
            ap.print_help()
        elif args.cmd == "list":
            cmd_list(args.directory, as_json=args.json)
        elif args.cmd == "create":
            cmd_create(
                args.directory,
                comment=args.comment,
                overwrite=args.force,
                exclude=args.exclude,
                quiet=args.quiet,
            )
    except RetriesExceededError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Note: the incomplete snapshot was left on disk.", file=sys.stderr)
        sys.exit(2)
    except (SnapshotError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
