"""MCP server registration."""

from __future__ import annotations

import asyncio

from signoff.server import SERVER_NAME, create_server
from signoff.session import Session
from signoff.tools import TOOLS


def test_server_registers_every_tool(session: Session) -> None:
    server = create_server(session)
    assert server.name == SERVER_NAME

    tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}
    assert set(tools) == set(TOOLS)

    schema = tools["signoff_new_initiative"].inputSchema
    assert sorted(schema["required"]) == ["key", "title"]
    assert "initiative_key" not in tools["signoff_status"].inputSchema.get("required", [])
