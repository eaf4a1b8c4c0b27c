"""MCP façade over an Odoo ERP instance.

Exposes four read-only queries (customers, products, sale orders, users) as
MCP tools backed by Odoo's XML-RPC ``search_read``.
"""

__version__ = "1.0.0"
