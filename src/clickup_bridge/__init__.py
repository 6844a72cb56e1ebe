"""
ClickUp MCP Bridge
==================
Servidor MCP que expõe a API REST do ClickUp (v2 e Docs v3) como tools.
"""

__version__ = "1.0.0"
