"""MCP server exposing the Azure tools."""
