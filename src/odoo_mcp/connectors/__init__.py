from .odoo_connector import OdooConnector

__all__ = ["OdooConnector"]
