"""Local command line for inspecting log segments.

This runs in a terminal on the host that owns the logs, so ``cat`` accepts
absolute paths to any segment file.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence

from mcp_log_segments.core.config import default_config
from mcp_log_segments.core.entries import JsonLinesEntryDecoder
from mcp_log_segments.core.errors import LogSegmentError
from mcp_log_segments.core.fetch import fetch_entries
from mcp_log_segments.core.files import list_log_files, open_log_file
from mcp_log_segments.core.models import LogEntry, Severity
from mcp_log_segments.core.time_window import resolve_time_window, window_to_nanos


def _parse_severity(s: str) -> Severity:
    severity = Severity.from_name(s.strip().upper())
    if severity is None:
        allowed = ", ".join(sev.name for sev in Severity)
        raise argparse.ArgumentTypeError(f"Invalid severity. Allowed: {allowed}")
    return severity


def _print_entries(entries: Iterable[LogEntry]) -> int:
    count = 0
    for e in entries:
        where = f" {e.file}:{e.line}" if e.file else ""
        print(f"{e.timestamp.isoformat()} [{e.severity.name}]{where} {e.message}")
        count += 1
    return count


def _cmd_ls(args: argparse.Namespace) -> None:
    files = list_log_files(default_config())
    files.sort(key=lambda f: (f.details.time_nanos, f.name))
    for f in files:
        print(f"{f.details.time.isoformat()} {f.details.severity.name:<7} {f.size_bytes:>12} {f.name}")


def _cmd_fetch(args: argparse.Namespace) -> None:
    since, until = resolve_time_window(
        since=args.since,
        until=args.until,
        date_=args.date,
        hour=args.hour,
        hours_lookback=args.hours,
    )
    start_nanos, end_nanos = window_to_nanos(since, until)
    entries = fetch_entries(default_config(), args.severity, start_nanos, end_nanos, cutoff=args.max)
    n = _print_entries(entries)
    print(f"\nFound {n} matching entries.")


def _cmd_cat(args: argparse.Namespace) -> None:
    with open_log_file(default_config(), args.path, allow_absolute=True) as f:
        _print_entries(JsonLinesEntryDecoder(f))


def main(argv: Sequence[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Inspect rotated log segments.")
    sub = p.add_subparsers(dest="command", required=True)

    p_ls = sub.add_parser("ls", help="List log segments, oldest first")
    p_ls.set_defaults(func=_cmd_ls)

    p_fetch = sub.add_parser("fetch", help="Print entries of one severity stream, oldest first")
    p_fetch.add_argument("--severity", type=_parse_severity, default=Severity.INFO)
    p_fetch.add_argument("--max", type=int, default=1000, help="Max entries (most recent kept)")
    p_fetch.add_argument("--hours", type=int, default=None, help="Look back N hours (default 24)")
    p_fetch.add_argument("--since", default=None, help="ISO8601 start time (assumes UTC if tz missing)")
    p_fetch.add_argument("--until", default=None, help="ISO8601 end time, exclusive (default now)")
    p_fetch.add_argument("--date", default=None, help="YYYY-MM-DD (UTC day)")
    p_fetch.add_argument("--hour", default=None, help="YYYY-MM-DDTHH (UTC hour)")
    p_fetch.set_defaults(func=_cmd_fetch)

    p_cat = sub.add_parser("cat", help="Decode one segment by name or absolute path")
    p_cat.add_argument("path")
    p_cat.set_defaults(func=_cmd_cat)

    args = p.parse_args(argv)
    try:
        args.func(args)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (ValueError, LogSegmentError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
