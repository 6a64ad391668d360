"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def investigate_errors(
        severity: str = "ERROR",
        hours_lookback: int = 24,
        limit: int = 200,
    ) -> list[dict[str, Any]]:
        """Build a prompt that fetches recent entries and asks for a diagnosis."""
        return [
            {
                "role": "system",
                "content": (
                    "You are an on-call engineer reading rotated process logs. Group related "
                    "entries, identify the first occurrence of each distinct problem, and "
                    "suggest the next debugging step. Quote timestamps exactly."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Call the `fetch_log_entries` tool with "
                    f'severity="{severity.upper()}", hours_lookback={hours_lookback}, '
                    f"limit={limit}. If nothing comes back, call `list_log_files` to check "
                    "which segments exist and report the time span they cover."
                ),
            },
        ]
