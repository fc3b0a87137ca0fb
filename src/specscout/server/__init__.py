"""MCP server -- expose the document store and endpoint search over stdio.

Sub-modules:

* :mod:`~specscout.server.protocol` -- JSON-RPC / MCP message models.
* :mod:`~specscout.server.tools` -- tool catalogue and implementations.
* :mod:`~specscout.server.server` -- :class:`MCPServer` read/dispatch loop.
"""

from specscout.server.server import SERVER_NAME, MCPServer

__all__ = ["MCPServer", "SERVER_NAME"]
