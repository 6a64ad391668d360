"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio

from mcp.server.fastmcp import FastMCP

from mcp_log_segments.core.config import LogConfig, default_config
from mcp_log_segments.core.entries import EntryRecord
from mcp_log_segments.core.files import open_log_file
from mcp_log_segments.core.models import Severity

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


def read_log_text(filename: str, *, config: LogConfig | None = None) -> str:
    """Read a segment by bare name from the configured log directories.

    Absolute paths and anything with a path separator are rejected, so this
    is safe to expose to remote clients.
    """
    with open_log_file(config or default_config(), filename, allow_absolute=False) as f:
        return f.read().decode(TEXT_ENCODING, errors=TEXT_ERRORS)


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://log-segments/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        cfg = default_config()
        dirs = "\n".join(f"  - {d}" for d in cfg.log_dirs)
        return (
            "Resources:\n"
            "- app://log-segments/help\n"
            "- app://log-segments/schemas/log-entry\n"
            "- log://{filename} (bare segment name from list_log_files)\n"
            "\nSegment names look like "
            "{program}.{host}.{user}.log.{SEVERITY}.{time}.{pid}\n"
            f"Severities: {', '.join(s.name for s in Severity)}\n"
            f"Log directories:\n{dirs}\n"
        )

    @mcp.resource("app://log-segments/schemas/log-entry")
    def entry_schema() -> dict:
        """Return the JSON schema of one stored log entry."""
        return EntryRecord.model_json_schema()

    @mcp.resource("log://{filename}")
    async def read_log(filename: str) -> str:
        """Return the raw contents of a log segment."""
        return await asyncio.to_thread(read_log_text, filename)
