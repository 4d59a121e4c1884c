"""
Assistant tools.

Two families share one contract (text in, text out, never raises):
- Data tools: read-only queries against the AML core API
- Import tool: uploads a file attached to the chat turn
"""

from __future__ import annotations

import httpx

from janbot.config.settings import Settings

from .base import ERROR_PREFIX, NoArguments, ToolDefinition, ToolInput, ToolSet
from .data_tools import create_data_tools
from .import_tool import FileUpload, create_import_tool


def build_toolset(
    jwt: str | None,
    file_upload: FileUpload | None = None,
    org_slug: str | None = None,
    *,
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ToolSet:
    """
    Tools for one chat turn.

    Without a JWT the assistant gets no tools at all; the import tool is only
    added when a file is attached.
    """
    if not jwt:
        return {}

    tools = create_data_tools(jwt, settings=settings, http_client=http_client)
    if file_upload is not None:
        tools.update(
            create_import_tool(
                jwt, file_upload, org_slug, settings=settings, http_client=http_client
            )
        )
    return tools


__all__ = [
    "ERROR_PREFIX",
    "FileUpload",
    "NoArguments",
    "ToolDefinition",
    "ToolInput",
    "ToolSet",
    "build_toolset",
    "create_data_tools",
    "create_import_tool",
]
