"""Tool registry contract. Concrete tools are registered by the host application."""

from .registry import ToolHandler, ToolOutcome, ToolRegistry

__all__ = ["ToolHandler", "ToolOutcome", "ToolRegistry"]
