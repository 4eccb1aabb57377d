"""Azure MCP Tools plugins.

Each subpackage is a plugin; its ``*tool.py`` modules are imported during
tool discovery.
"""
