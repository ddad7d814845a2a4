"""Quarterly Calc MCP server."""
