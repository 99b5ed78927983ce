"""Core logic: settings, API clients, response normalization, and card fields.

This module is framework-agnostic. It has no dependency on MCP or FastMCP;
the server module wires these functions into tools and routes.
"""
