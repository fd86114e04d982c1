"""
Backend contract for text-generation providers.

Defines the message history, tool invocation and usage types exchanged
with a provider, plus the LLMProvider protocol that wire-level adapters
implement.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

from ..pricing import calculate_cost


class Role(str, Enum):
	"""Author of a message in the conversation history."""
	USER = "user"
	ASSISTANT = "assistant"
	TOOL = "tool"


class StopReason(str, Enum):
	"""Why the backend stopped generating."""
	END_TURN = "end_turn"
	TOOL_USE = "tool_use"
	MAX_TOKENS = "max_tokens"
	BUDGET = "budget"


@dataclass
class ToolDefinition:
	"""A tool advertised to the model."""
	name: str
	description: str
	parameters: dict[str, Any] = field(default_factory=dict)  # JSON schema


@dataclass
class ToolCall:
	"""A tool invocation requested by the model."""
	id: str
	name: str
	arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
	"""Result of one tool invocation, fed back to the model."""
	tool_call_id: str
	content: str
	is_error: bool = False


@dataclass
class ImageAttachment:
	"""Media attached to a user message."""
	kind: str  # base64 | url
	media_type: str  # image/jpeg | image/png | image/gif | image/webp
	data: str


@dataclass
class Message:
	"""One role-tagged entry of the conversation history."""
	role: Role
	content: str
	images: list[ImageAttachment] = field(default_factory=list)
	tool_calls: list[ToolCall] = field(default_factory=list)
	tool_results: list[ToolResult] = field(default_factory=list)


@dataclass
class Usage:
	"""Token usage and dollar cost of a single backend call."""
	input_tokens: int = 0
	output_tokens: int = 0
	cost: float = 0.0

	@classmethod
	def from_tokens(cls, model: str, input_tokens: int, output_tokens: int) -> "Usage":
		"""Build a usage record priced by the model pricing table."""
		return cls(
			input_tokens=input_tokens,
			output_tokens=output_tokens,
			cost=calculate_cost(model, input_tokens, output_tokens),
		)


@dataclass
class LLMResponse:
	"""A complete backend response."""
	content: str
	tool_calls: list[ToolCall] = field(default_factory=list)
	usage: Usage = field(default_factory=Usage)
	stop_reason: StopReason = StopReason.END_TURN


@runtime_checkable
class LLMProvider(Protocol):
	"""Protocol implemented by text-generation backend adapters."""

	name: str

	async def chat(
		self,
		messages: list[Message],
		tools: list[ToolDefinition],
		model: str,
		system_prompt: Optional[str] = None,
	) -> LLMResponse:
		"""Send the full history and tool catalog, return the model's reply."""
		...
