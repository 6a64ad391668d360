"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: list segments and fetch entries across them
- Resources: segment contents by name, help and the entry schema
- Prompts: a template for investigating recent errors

Run locally (stdio):
    python -m mcp_log_segments
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_segments.prompts.registry import register_prompts
from mcp_log_segments.resources.registry import register_resources
from mcp_log_segments.tools.segments import fetch_log_entries_impl, list_log_files_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the MCP stream."""
    level_name = os.getenv("LOG_SEGMENTS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


mcp = FastMCP("log-segments", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def list_log_files() -> dict[str, Any]:
    """List the log segments found in the configured log directories, newest first.

    Returns
    -------
    dict:
        {"count": int, "files": list[dict]} where each file carries its name,
        size, modification time and the details decoded from its name.
    """
    return await asyncio.to_thread(list_log_files_impl)


@mcp.tool()
async def fetch_log_entries(
    severity: str = "INFO",
    since: str | None = None,
    until: str | None = None,
    date: str | None = None,
    hour: str | None = None,
    hours_lookback: int | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return log entries from the segments of one severity, oldest first.

    Parameters
    ----------
    severity:
        Segment stream to read: INFO, WARNING, ERROR or FATAL (case-insensitive).
        The INFO stream holds every entry; ERROR holds ERROR and FATAL.
    since/until:
        ISO-8601 datetimes (e.g., 2025-12-31T20:00:00Z). If timezone is omitted,
        UTC is assumed. ``until`` is exclusive and defaults to now.
    date/hour:
        Convenience selectors (``2025-12-31`` or ``2025-12-31T20``) that override
        since/until.
    hours_lookback:
        Window length when ``since`` is not given (default 24).
    limit:
        Maximum number of entries; the most recent ones are kept.

    Returns
    -------
    dict:
        {"count": int, "since": str, "until": str, "entries": list[dict]}
    """
    return await asyncio.to_thread(
        fetch_log_entries_impl,
        severity=severity,
        since=since,
        until=until,
        date=date,
        hour=hour,
        hours_lookback=hours_lookback,
        limit=limit,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
