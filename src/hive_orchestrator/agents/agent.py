"""
Agent - one bounded tool-calling conversation with a backend.

The loop follows the usual pattern:
  history → backend call → record usage → if no tool calls, done;
  otherwise run every requested tool in order → append results → repeat

It stops on completion, budget ceiling, turn limit, abort, or error.
The budget check runs before each call, so it only prevents a new call
from starting once the ceiling is met; it cannot bound a call in flight.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..events import AgentEventType, EventChannel
from ..providers.base import (
	ImageAttachment,
	LLMProvider,
	Message,
	Role,
	ToolResult,
)
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 100


class AgentStatus(str, Enum):
	"""Terminal status of an agent run."""
	COMPLETED = "completed"
	BUDGET_EXHAUSTED = "budget_exhausted"
	MAX_TURNS = "max_turns"
	ERROR = "error"


@dataclass
class AgentResult:
	"""Outcome of one agent run."""
	id: str
	name: str
	output: str
	total_cost: float
	total_input_tokens: int
	total_output_tokens: int
	turns: int
	status: AgentStatus


class Agent:
	"""
	Runs one conversation against a provider and a tool catalog.

	Events (on self.events):
		thinking(text)
		tool_call(name, arguments)
		tool_result(name, result)
		cost_update(cost, total_cost, budget)   cost is this call's cost
		done(result)
		error(error)
	"""

	def __init__(
		self,
		name: str,
		model: str,
		system_prompt: str,
		provider: LLMProvider,
		tools: ToolRegistry,
		budget: float,
		max_turns: int = DEFAULT_MAX_TURNS,
		id: Optional[str] = None,
	):
		self.id = id or str(uuid.uuid4())
		self.name = name
		self.model = model
		self.system_prompt = system_prompt
		self.provider = provider
		self.tools = tools
		self.budget = budget
		self.max_turns = max_turns

		self.messages: list[Message] = []
		self.total_cost = 0.0
		self.total_input_tokens = 0
		self.total_output_tokens = 0
		self.turns = 0
		self._aborted = False
		self.events: EventChannel[AgentEventType] = EventChannel(source=self.id)

	@property
	def spent(self) -> float:
		return self.total_cost

	@property
	def remaining_budget(self) -> float:
		return max(0.0, self.budget - self.total_cost)

	@property
	def aborted(self) -> bool:
		return self._aborted

	def abort(self) -> None:
		"""Ask the loop to stop at the top of its next iteration."""
		self._aborted = True

	async def run(self, task: str, images: Optional[list[ImageAttachment]] = None) -> AgentResult:
		"""
		Run the agent on a task until a terminal status is reached.

		Args:
			task: Initial user message
			images: Optional attachments for the initial message

		Returns:
			AgentResult; output is never empty
		"""
		self.messages.append(Message(role=Role.USER, content=task, images=list(images or [])))
		logger.info(f"Agent {self.name} ({self.id[:8]}) starting with ${self.budget:.4f} budget")

		try:
			while True:
				if self._aborted:
					return self._finish(AgentStatus.ERROR)
				if self.turns >= self.max_turns:
					return self._finish(AgentStatus.MAX_TURNS)
				if self.total_cost >= self.budget:
					return self._finish(AgentStatus.BUDGET_EXHAUSTED)

				response = await self.provider.chat(
					self.messages,
					self.tools.get_definitions(),
					self.model,
					self.system_prompt,
				)

				usage = response.usage
				self.total_cost += usage.cost
				self.total_input_tokens += usage.input_tokens
				self.total_output_tokens += usage.output_tokens
				self.turns += 1

				self.events.emit(
					AgentEventType.COST_UPDATE,
					cost=usage.cost,
					total_cost=self.total_cost,
					budget=self.budget,
				)

				if response.content:
					self.events.emit(AgentEventType.THINKING, text=response.content)

				if not response.tool_calls:
					self.messages.append(Message(role=Role.ASSISTANT, content=response.content))
					return self._finish(AgentStatus.COMPLETED, response.content)

				self.messages.append(Message(
					role=Role.ASSISTANT,
					content=response.content,
					tool_calls=list(response.tool_calls),
				))

				# Sequential on purpose: side effects must land in the order requested
				tool_results: list[ToolResult] = []
				for call in response.tool_calls:
					self.events.emit(AgentEventType.TOOL_CALL, name=call.name, arguments=call.arguments)
					outcome = await self.tools.invoke(call.name, call.arguments)
					self.events.emit(AgentEventType.TOOL_RESULT, name=call.name, result=outcome.content)
					tool_results.append(ToolResult(
						tool_call_id=call.id,
						content=outcome.content,
						is_error=outcome.is_error,
					))

				self.messages.append(Message(role=Role.TOOL, content="", tool_results=tool_results))

		except Exception as e:
			logger.error(f"Agent {self.name} ({self.id[:8]}) failed: {e}")
			self.events.emit(AgentEventType.ERROR, error=e)
			return self._finish(AgentStatus.ERROR, f"Error: {e}")

	def _finish(self, status: AgentStatus, output: Optional[str] = None) -> AgentResult:
		"""Build the result, falling back to the last assistant text for the output."""
		final_output = output or self._last_assistant_text() or (
			f"Agent {self.name} finished with status: {status.value}"
		)

		result = AgentResult(
			id=self.id,
			name=self.name,
			output=final_output,
			total_cost=self.total_cost,
			total_input_tokens=self.total_input_tokens,
			total_output_tokens=self.total_output_tokens,
			turns=self.turns,
			status=status,
		)

		logger.info(
			f"Agent {self.name} ({self.id[:8]}) {status.value}: "
			f"${self.total_cost:.4f} over {self.turns} turns"
		)
		self.events.emit(AgentEventType.DONE, result=result)
		return result

	def _last_assistant_text(self) -> Optional[str]:
		for message in reversed(self.messages):
			if message.role == Role.ASSISTANT and message.content:
				return message.content
		return None
