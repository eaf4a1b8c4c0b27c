"""Runtime configuration: dotenv loading, logging setup and Odoo connection settings."""
