"""
Typed event channels.

Agents, budgets and the orchestrator publish events on a channel;
reporting collaborators subscribe without the publisher knowing who
they are. A failing subscriber is logged and skipped.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)


class AgentEventType(str, Enum):
	"""Events emitted by a single agent run."""
	THINKING = "thinking"
	TOOL_CALL = "tool_call"
	TOOL_RESULT = "tool_result"
	COST_UPDATE = "cost_update"
	DONE = "done"
	ERROR = "error"


class BudgetEventType(str, Enum):
	"""Events emitted by a BudgetManager."""
	SPEND = "spend"
	WARNING = "warning"
	EXHAUSTED = "exhausted"


class TaskEventType(str, Enum):
	"""Events emitted by the orchestrator for one task."""
	STARTED = "started"
	AGENT_STARTED = "agent_started"
	AGENT_THINKING = "agent_thinking"
	AGENT_TOOL_CALL = "agent_tool_call"
	AGENT_TOOL_RESULT = "agent_tool_result"
	COST_UPDATE = "cost_update"
	AGENT_DONE = "agent_done"
	COMPLETED = "completed"
	ERROR = "error"


E = TypeVar("E", bound=Enum)


@dataclass
class Event(Generic[E]):
	"""A published event."""
	type: E
	source: str
	payload: dict[str, Any] = field(default_factory=dict)

	def __getitem__(self, key: str) -> Any:
		return self.payload[key]


Handler = Callable[[Event], None]


class EventChannel(Generic[E]):
	"""Synchronous publish/subscribe channel for one family of event types."""

	def __init__(self, source: str = ""):
		self.source = source
		self._handlers: dict[Optional[E], list[Handler]] = {}

	def subscribe(self, event_type: E, handler: Handler) -> None:
		"""Call handler for every event of the given type."""
		self._handlers.setdefault(event_type, []).append(handler)

	def subscribe_all(self, handler: Handler) -> None:
		"""Call handler for every event on this channel."""
		self._handlers.setdefault(None, []).append(handler)

	def unsubscribe(self, handler: Handler) -> None:
		"""Remove a handler from every type it is subscribed to."""
		for handlers in self._handlers.values():
			while handler in handlers:
				handlers.remove(handler)

	def emit(self, event_type: E, **payload: Any) -> Event:
		"""Publish an event to type-specific subscribers, then catch-all ones."""
		event = Event(type=event_type, source=self.source, payload=payload)
		for handler in [*self._handlers.get(event_type, []), *self._handlers.get(None, [])]:
			try:
				handler(event)
			except Exception as e:
				logger.error(f"Event handler for {event_type.value} failed: {e}")
		return event

	def handler_count(self) -> int:
		return sum(len(handlers) for handlers in self._handlers.values())

	def clear(self) -> None:
		self._handlers.clear()
