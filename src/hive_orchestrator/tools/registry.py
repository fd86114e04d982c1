"""
Tool registry - the catalog of tools an agent may invoke.

Execution never raises: unknown tools and failing handlers both come back
as textual error results so the model can correct itself.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

from ..providers.base import ToolDefinition

logger = logging.getLogger(__name__)

ToolFn = Callable[[dict[str, Any]], Union[str, Awaitable[str]]]


@dataclass
class ToolOutcome:
	"""Text returned to the model, and whether the call failed."""
	content: str
	is_error: bool = False


@dataclass
class ToolHandler:
	"""A tool definition paired with the callable that executes it."""
	definition: ToolDefinition
	execute: ToolFn


class ToolRegistry:
	"""Name-keyed collection of tool handlers."""

	def __init__(self):
		self._tools: dict[str, ToolHandler] = {}

	def register(self, handler: ToolHandler) -> None:
		"""Register a handler, replacing any tool with the same name."""
		self._tools[handler.definition.name] = handler

	def tool(
		self,
		name: str,
		description: str,
		parameters: Optional[dict[str, Any]] = None,
	) -> Callable[[ToolFn], ToolFn]:
		"""Decorator form of register()."""
		def decorator(fn: ToolFn) -> ToolFn:
			self.register(ToolHandler(
				definition=ToolDefinition(name=name, description=description, parameters=parameters or {}),
				execute=fn,
			))
			return fn
		return decorator

	def get(self, name: str) -> Optional[ToolHandler]:
		return self._tools.get(name)

	def names(self) -> list[str]:
		return list(self._tools.keys())

	def get_definitions(self) -> list[ToolDefinition]:
		"""Tool catalog in registration order, as sent to the backend."""
		return [t.definition for t in self._tools.values()]

	async def invoke(self, name: str, args: dict[str, Any]) -> ToolOutcome:
		"""Run a tool, flagging unknown names and raising handlers as errors."""
		tool = self._tools.get(name)
		if tool is None:
			logger.warning(f"Model requested unknown tool: {name}")
			return ToolOutcome(content=f'Error: Unknown tool "{name}"', is_error=True)

		try:
			result = tool.execute(args)
			if inspect.isawaitable(result):
				result = await result
			return ToolOutcome(content=str(result))
		except Exception as e:
			logger.error(f"Tool {name} failed: {e}")
			return ToolOutcome(content=f"Error executing {name}: {e}", is_error=True)

	async def execute(self, name: str, args: dict[str, Any]) -> str:
		"""Run a tool and return its textual result."""
		outcome = await self.invoke(name, args)
		return outcome.content

	def __len__(self) -> int:
		return len(self._tools)
