"""TotalCompMX MCP server -- FastMCP entry point with lifespan and shared context.

Usage:
    python -m totalcompmx.mcp.server          # stdio

Environment variables (also read from .env):
    TOTALCOMP_TABLES        -- fiscal tables YAML file (default: built-in tables)
    TOTALCOMP_YEAR          -- built-in fiscal year (default: 2025)
    TOTALCOMP_EXCHANGE_RATE -- USD/MXN rate of the fiscal year
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from totalcompmx.mexico.store import StaticFiscalStore, store_from_environment


@dataclass
class AppContext:
    """Context injected into every MCP tool through the lifespan."""

    store: StaticFiscalStore


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Load the fiscal tables at startup and share them with the tools."""
    load_dotenv()
    yield AppContext(store=store_from_environment())


mcp = FastMCP("TotalCompMX", lifespan=app_lifespan)

# Import the tool modules (they register through @mcp.tool())
import totalcompmx.mcp.tools.nomina  # noqa: E402, F401

if __name__ == "__main__":
    mcp.run(transport="stdio")
