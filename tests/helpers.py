"""Shared stubs and builders for hive-orchestrator tests."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from hive_orchestrator.agents.presets import AgentPreset, get_preset
from hive_orchestrator.config import Config
from hive_orchestrator.providers.base import (
	LLMResponse,
	Message,
	StopReason,
	ToolCall,
	ToolDefinition,
	Usage,
)
from hive_orchestrator.tools.registry import ToolRegistry


@dataclass
class RecordedCall:
	"""One chat() call seen by a stub provider."""
	messages: list[Message]
	tools: list[ToolDefinition]
	model: str
	system_prompt: Optional[str]


Responder = Callable[[RecordedCall], LLMResponse]


class StubProvider:
	"""
	Provider that answers from a responder function or a fixed script.

	A script is consumed in order; once exhausted the last response repeats.
	"""

	def __init__(
		self,
		script: Optional[list[LLMResponse]] = None,
		responder: Optional[Responder] = None,
		name: str = "anthropic",
	):
		self.name = name
		self.script = list(script or [])
		self.responder = responder
		self.calls: list[RecordedCall] = []

	async def chat(self, messages, tools, model, system_prompt=None) -> LLMResponse:
		call = RecordedCall(
			messages=list(messages),
			tools=list(tools),
			model=model,
			system_prompt=system_prompt,
		)
		self.calls.append(call)
		if self.responder is not None:
			return self.responder(call)
		index = min(len(self.calls) - 1, len(self.script) - 1)
		return self.script[index]


class FailingProvider:
	"""Provider whose every call raises."""

	name = "anthropic"

	def __init__(self, message: str = "connection reset", error: Optional[Exception] = None):
		self.error = error or RuntimeError(message)
		self.calls = 0

	async def chat(self, messages, tools, model, system_prompt=None) -> LLMResponse:
		self.calls += 1
		raise self.error


def text_response(content: str, cost: float = 0.0, input_tokens: int = 100, output_tokens: int = 50) -> LLMResponse:
	"""A response that ends the conversation."""
	return LLMResponse(
		content=content,
		usage=Usage(input_tokens=input_tokens, output_tokens=output_tokens, cost=cost),
		stop_reason=StopReason.END_TURN,
	)


def tool_response(
	*calls: tuple[str, dict],
	content: str = "",
	cost: float = 0.0,
) -> LLMResponse:
	"""A response requesting one tool call per (name, arguments) pair."""
	return LLMResponse(
		content=content,
		tool_calls=[
			ToolCall(id=f"call-{i}", name=name, arguments=args)
			for i, (name, args) in enumerate(calls)
		],
		usage=Usage(input_tokens=100, output_tokens=50, cost=cost),
		stop_reason=StopReason.TOOL_USE,
	)


def plan_json(*subtasks: dict) -> str:
	"""Planner-style output wrapping a JSON array in prose."""
	return f"Here is the plan:\n{json.dumps(list(subtasks), indent=2)}\nLet me know."


def subtask(
	id: int,
	description: Optional[str] = None,
	agent_type: str = "coder",
	complexity: str = "simple",
	depends_on: Optional[list[int]] = None,
) -> dict:
	return {
		"id": id,
		"description": description or f"Subtask {id}",
		"agentType": agent_type,
		"complexity": complexity,
		"dependsOn": depends_on or [],
	}


def role_of(call: RecordedCall) -> Optional[AgentPreset]:
	"""Which preset issued a call, identified by its system prompt."""
	for preset in AgentPreset:
		if get_preset(preset).system_prompt == call.system_prompt:
			return preset
	return None


def task_text(call: RecordedCall) -> str:
	"""The initial user message of the conversation."""
	return call.messages[0].content


def make_tools(log: Optional[list] = None) -> ToolRegistry:
	"""Registry with an 'echo' tool and a 'boom' tool that raises."""
	registry = ToolRegistry()
	calls = log if log is not None else []

	@registry.tool("echo", "Echo the text argument", {"type": "object", "properties": {"text": {"type": "string"}}})
	def echo(args):
		calls.append(args.get("text"))
		return f"echo: {args.get('text')}"

	@registry.tool("boom", "Always fails")
	def boom(args):
		raise RuntimeError("kaboom")

	return registry


def make_config(tmp_path: Path, **overrides) -> Config:
	"""Config rooted in a temp directory."""
	values = {
		"config_dir": tmp_path / "config",
		"data_dir": tmp_path / "data",
	}
	values.update(overrides)
	return Config(**values)
