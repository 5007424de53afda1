"""Store catalog and World Bank open-data tools over MCP."""

__version__ = "1.0.0"
