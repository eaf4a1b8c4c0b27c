"""Shared helpers for the Odoo MCP server: errors, request context, telemetry and tool instrumentation."""
