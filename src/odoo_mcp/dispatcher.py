from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from mcp.types import TextContent

from odoo_common.errors import NotConnectedError, UnknownToolError, typed_error
from odoo_mcp import formatting as fmt
from odoo_mcp.catalog import TOOL_CATALOG, ToolSpec, get_tool
from odoo_mcp.domain.models import ReadFailed
from odoo_mcp.domain.ports import RecordSourcePort


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolReply:
    """Outcome of one tool call: always text, with a typed error envelope on failure."""

    text: str
    error: Optional[dict] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def content(self) -> List[TextContent]:
        return [TextContent(type="text", text=self.text)]

    @classmethod
    def failure(cls, code: str, text: str, message: str) -> "ToolReply":
        return cls(text=text, error=typed_error(code, message))

    @classmethod
    def from_exception(cls, exc: Exception) -> "ToolReply":
        return cls.failure("internal", fmt.error_text(str(exc)), str(exc))


def resolve_limit(args: Mapping[str, Any] | None, default: int) -> int:
    """``args["limit"]`` when present, truthy and a positive integer; the default otherwise."""
    raw = (args or {}).get("limit")
    if not raw:
        return default
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric limit %r, using %d", raw, default)
        return default
    return limit if limit > 0 else default


class ToolDispatcher:
    """
    Maps tool names onto connector reads and renders the results.

    The connector is injected; ``None`` means startup never produced a
    session, and every known tool then answers with the no-connection text.
    call_tool never raises.
    """

    def __init__(self, connector: Optional[RecordSourcePort] = None) -> None:
        self.connector = connector

    def list_tools(self) -> Tuple[ToolSpec, ...]:
        return TOOL_CATALOG

    def call_tool(self, name: str, args: Mapping[str, Any] | None = None) -> ToolReply:
        try:
            tool = get_tool(name)
        except UnknownToolError as e:
            logger.warning("Unknown tool requested: %s", name)
            return ToolReply.failure(e.code, fmt.tool_not_found(name), str(e))

        if self.connector is None:
            return ToolReply.failure(NotConnectedError.code, fmt.NO_CONNECTION, "No connector configured")

        q = tool.query
        limit = resolve_limit(args, q.default_limit)
        try:
            result = self.connector.read(q.model, list(q.domain), list(q.fields), limit)
            if isinstance(result, ReadFailed):
                return self._failed(result)
            return ToolReply(text=tool.render(result.records))
        except Exception as e:
            logger.exception("Tool %s failed", name)
            return ToolReply.from_exception(e)

    @staticmethod
    def _failed(result: ReadFailed) -> ToolReply:
        if result.code == NotConnectedError.code:
            return ToolReply.failure(result.code, fmt.NO_CONNECTION, result.message)
        return ToolReply.failure(result.code, fmt.error_text(result.message), result.message)
