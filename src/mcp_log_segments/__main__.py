"""Module entrypoint.

Allows:
    python -m mcp_log_segments
"""

from __future__ import annotations

from mcp_log_segments.server.log_server import main

if __name__ == "__main__":
    main()
