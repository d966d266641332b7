"""
Candidate that forwards searches to a name matching tool on a running MCP server.

Score it with `--candidate name_challenge.candidates.mcp_candidate:McpCandidate`.
"""

import json
import logging
from contextlib import AsyncExitStack
from typing import Any, List, Optional

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from name_challenge.packages.scoring_framework import Candidate, QueryText, RecordId

logger = logging.getLogger(__name__)

# Suppress httpx INFO logs
logging.getLogger("httpx").setLevel(logging.WARNING)


class McpCandidateSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NAME_CHALLENGE_MCP_")

    url: str = Field("http://localhost:8000/mcp", description="Streamable HTTP endpoint")
    search_tool: str = Field("search", description="Tool called once per query")
    setup_tool: str = Field("setup", description="Tool called with the dataset path, if served")


class McpCandidate(Candidate):
    """Candidate backed by an MCP server session."""

    def __init__(self, settings: Optional[McpCandidateSettings] = None):
        """Initialize MCP candidate; the connection is opened in setup."""
        self.settings = settings or McpCandidateSettings()
        logger.info(f"Initializing McpCandidate with url={self.settings.url}")
        self._session: Optional[ClientSession] = None
        self._stack: Optional[AsyncExitStack] = None

    async def setup(self, dataset_path: str) -> None:
        """Connect to the server and hand it the dataset path when it serves a setup tool."""
        logger.info(f"Connecting to MCP server at {self.settings.url}")
        self._stack = AsyncExitStack()
        try:
            read_stream, write_stream, _ = await self._stack.enter_async_context(
                streamablehttp_client(self.settings.url))
            self._session = await self._stack.enter_async_context(
                ClientSession(read_stream, write_stream))
            await self._session.initialize()
            logger.debug("MCP session established")

            tools_result = await self._session.list_tools()
            tool_names = {tool.name for tool in tools_result.tools}
            if self.settings.search_tool not in tool_names:
                raise ValueError(
                    f"MCP server does not serve a '{self.settings.search_tool}' tool; "
                    f"available: {sorted(tool_names)}")
            if self.settings.setup_tool in tool_names:
                logger.info(f"Calling '{self.settings.setup_tool}' tool with {dataset_path}")
                await self._session.call_tool(
                    self.settings.setup_tool, arguments={"dataset_path": dataset_path})
        except BaseException:
            # Close the transport here; cleanup is never called after a failed setup
            await self._stack.aclose()
            self._stack = None
            self._session = None
            raise

    async def search(self, query: QueryText) -> List[RecordId]:
        """Retrieve matching ids for a query by calling the MCP server."""
        if self._session is None:
            raise RuntimeError("McpCandidate.search called before setup")
        logger.debug(f"Calling '{self.settings.search_tool}' tool for query: '{query}'")
        result = await self._session.call_tool(
            self.settings.search_tool, arguments={"query": query})
        ids = self._extract_ids(result)
        logger.debug(f"Extracted {len(ids)} record ids")
        return ids

    async def cleanup(self) -> None:
        """Close the MCP session and transport."""
        if self._stack is not None:
            logger.info("Closing MCP session")
            await self._stack.aclose()
        self._stack = None
        self._session = None

    def _extract_ids(self, result: Any) -> List[RecordId]:
        """Pull record ids out of a tool result.

        Accepts structured output or JSON text shaped as a list of ids, a list of
        objects with `id`, or an object holding either under `ids` or `results`.
        """
        content = getattr(result, "content", None) or []
        if getattr(result, "isError", False):
            message = content[0].text if content and hasattr(content[0], "text") else "tool error"
            raise RuntimeError(f"MCP search tool failed: {message}")

        payload = getattr(result, "structuredContent", None)
        if payload is None:
            if not content or not hasattr(content[0], "text"):
                raise ValueError("Empty content received from MCP tool")
            try:
                payload = json.loads(content[0].text)
            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse JSON from text content: {e}")
                raise

        if isinstance(payload, dict):
            payload = payload.get("ids", payload.get("results", []))
        if not isinstance(payload, list):
            return []

        ids: List[RecordId] = []
        for item in payload:
            value = item.get("id") if isinstance(item, dict) else item
            if value is not None:
                ids.append(RecordId(str(value)))
        return ids
