"""
Smoke script for the Odoo MCP server over stdio.

It performs:
 1) Spawns the server module (reads ODOO_* from the environment or .env)
 2) Lists the tools
 3) Calls every tool with a small limit and prints the text it returns
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any

_REPO_ROOT = Path(__file__).resolve().parents[1]


def _unwrap_tool_result(res: Any) -> Any:
    content = getattr(res, "content", None)
    if not content:
        return res
    c0 = content[0]
    if isinstance(c0, dict) and "text" in c0:
        return c0["text"]
    return getattr(c0, "text", c0)


async def smoke() -> bool:
    from mcp import ClientSession
    from mcp.client.stdio import StdioServerParameters, stdio_client

    server_module = os.getenv("ODOO_MCP_MODULE", "odoo_mcp.server")
    python_cmd = os.getenv("MCP_PYTHON") or sys.executable
    limit = int(os.getenv("ODOO_SMOKE_LIMIT", "3"))

    print(f"[smoke] Repo root: {_REPO_ROOT}")
    print(f"[smoke] Server module: {server_module}")
    print(f"[smoke] Python: {python_cmd}")

    src = str(_REPO_ROOT / "src")
    env = dict(os.environ, MCP_TRANSPORT="stdio")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src, env.get("PYTHONPATH")) if p)

    server = StdioServerParameters(command=python_cmd, args=["-m", server_module], env=env)

    ok = True
    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            names = [t.name for t in tools.tools]
            print("\n[smoke] TOOLS:")
            for n in names:
                print(f" - {n}")

            for name in names:
                try:
                    res = await session.call_tool(name, {"limit": limit})
                except Exception as e:
                    print(f"[smoke] ERROR: {name} failed: {e}")
                    ok = False
                    continue
                text = _unwrap_tool_result(res)
                print(f"\n[smoke] CALL {name}(limit={limit}):")
                print(text)
                if isinstance(text, str) and text.startswith("❌ Error"):
                    ok = False

    return ok


def main() -> int:
    ok = asyncio.run(smoke())
    print("\n[smoke] OK" if ok else "\n[smoke] Completed with warnings")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
