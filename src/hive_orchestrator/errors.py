"""Exception taxonomy for the hive orchestrator."""


class HiveError(Exception):
	"""Base class for all orchestrator errors."""


class ConfigurationError(HiveError):
	"""Missing credentials or invalid settings. Raised before any spend."""


class PlanningParseError(HiveError):
	"""Planner output could not be turned into subtasks."""


class BackendCallError(HiveError):
	"""A text-generation backend call failed."""

	def __init__(self, provider: str, message: str):
		super().__init__(f"{provider}: {message}")
		self.provider = provider
