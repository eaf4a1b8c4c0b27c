from __future__ import annotations

from typing import Any

REDACT_TOKEN = "***redacted***"


class OdooMCPError(Exception):
    """Base exception for all Odoo MCP errors."""
    code = "internal"


class ConfigError(OdooMCPError):
    """Configuration error (missing credentials, invalid URL)."""
    code = "config"


class AuthenticationError(OdooMCPError):
    """The authentication handshake failed. Fatal at startup."""
    code = "authentication"


class NotConnectedError(OdooMCPError):
    """A read was attempted before a successful authentication."""
    code = "not_connected"

    def __init__(self, message: str = "No connection to Odoo") -> None:
        super().__init__(message)


class TransportError(OdooMCPError):
    """A remote call failed (fault, protocol, HTTP or socket error)."""
    code = "transport"


class UnknownToolError(OdooMCPError):
    """No tool with the requested name exists in the catalog."""
    code = "tool_not_found"

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' not found")
        self.name = name


def typed_error(code: str, message: str, *, details: dict | None = None, **extra: Any) -> dict:
    """
    Standard error envelope:
      {"error": {"code": code, "message": message, "details": {...}}, ...extra}
    """
    err: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        err["error"]["details"] = details
    if extra:
        err.update(extra)
    return err
