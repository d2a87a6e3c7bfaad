"""Quiz diagnostic MCP tools."""
from . import lint, validate

__all__ = ["lint", "validate"]
