"""
Planning boundary - turn free-form planner output into validated subtasks.

Planner text is untrusted. The first well-formed JSON array found in it is
validated against the SubTask schema; anything else (no array, an empty
array, a shape error) means "no decomposition" and the task runs as a
single agent.
"""

import json
import logging
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..agents.presets import AgentPreset
from ..errors import PlanningParseError

logger = logging.getLogger(__name__)


class Complexity(str, Enum):
	"""Planner's size estimate for a subtask."""
	SIMPLE = "simple"
	MEDIUM = "medium"
	COMPLEX = "complex"


# Share of the task's total budget requested for a subtask
COMPLEXITY_MULTIPLIERS: dict[Complexity, float] = {
	Complexity.SIMPLE: 0.10,
	Complexity.MEDIUM: 0.20,
	Complexity.COMPLEX: 0.35,
}


def _normalize_id(value: Any) -> Any:
	# Planners emit numeric ids; bool is an int subclass and is not an id
	if isinstance(value, int) and not isinstance(value, bool):
		return str(value)
	return value


class SubTask(BaseModel):
	"""A unit of work produced by decomposition."""
	model_config = ConfigDict(populate_by_name=True, frozen=True)

	id: str = Field(description="Subtask identifier, unique within a plan")
	description: str = Field(min_length=1, description="What needs to be done")
	agent_type: AgentPreset = Field(alias="agentType", description="Role that runs the subtask")
	complexity: Complexity = Field(description="Drives the sub-budget size")
	depends_on: tuple[str, ...] = Field(
		default=(),
		alias="dependsOn",
		description="Ids of subtasks that must finish first",
	)

	@field_validator("id", mode="before")
	@classmethod
	def coerce_id(cls, value: Any) -> Any:
		return _normalize_id(value)

	@field_validator("depends_on", mode="before")
	@classmethod
	def coerce_depends_on(cls, value: Any) -> Any:
		if value is None:
			return ()
		if isinstance(value, (list, tuple)):
			# Declared order, duplicates dropped
			return tuple(dict.fromkeys(_normalize_id(v) for v in value))
		return value

	@property
	def budget_multiplier(self) -> float:
		return COMPLEXITY_MULTIPLIERS[self.complexity]


def find_first_json_array(text: str) -> Optional[list]:
	"""Return the first substring of text that decodes as a JSON array."""
	decoder = json.JSONDecoder()
	start = text.find("[")
	while start != -1:
		try:
			value, _ = decoder.raw_decode(text, start)
		except json.JSONDecodeError:
			pass
		else:
			if isinstance(value, list):
				return value
		start = text.find("[", start + 1)
	return None


def parse_subtasks(text: str) -> list[SubTask]:
	"""
	Parse planner output strictly.

	Raises:
		PlanningParseError: No array, an empty array, or a schema violation
	"""
	raw = find_first_json_array(text)
	if raw is None:
		raise PlanningParseError("No JSON array in planner output")
	if not raw:
		raise PlanningParseError("Planner returned an empty decomposition")

	try:
		subtasks = [SubTask.model_validate(item) for item in raw]
	except ValidationError as e:
		raise PlanningParseError(f"Subtask failed validation: {e.error_count()} error(s)") from e

	ids = [s.id for s in subtasks]
	if len(set(ids)) != len(ids):
		raise PlanningParseError(f"Duplicate subtask ids: {ids}")

	return subtasks


def decompose(text: str) -> list[SubTask]:
	"""Parse planner output, degrading any failure to an empty decomposition."""
	try:
		return parse_subtasks(text)
	except PlanningParseError as e:
		logger.info(f"No decomposition from planner: {e}")
		return []


def topological_sort(subtasks: list[SubTask]) -> list[SubTask]:
	"""
	Order subtasks so each one's dependencies come before it.

	Depth-first postorder in input order, visiting dependencies in the
	order they were declared. Dependency ids that name no subtask are
	ignored. Cycles are broken at the first revisited node.
	"""
	by_id = {s.id: s for s in subtasks}
	ordered: list[SubTask] = []
	visited: set[str] = set()

	def visit(subtask: SubTask) -> None:
		if subtask.id in visited:
			return
		visited.add(subtask.id)
		for dep_id in subtask.depends_on:
			dep = by_id.get(dep_id)
			if dep is not None:
				visit(dep)
		ordered.append(subtask)

	for subtask in subtasks:
		visit(subtask)
	return ordered


def is_ready(subtask: SubTask, completed: set[str], known_ids: set[str]) -> bool:
	"""All of the subtask's known dependencies have completed."""
	return all(dep in completed for dep in subtask.depends_on if dep in known_ids)
