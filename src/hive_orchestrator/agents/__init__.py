"""Agent presets and the bounded tool-calling loop."""

from .agent import Agent, AgentResult, AgentStatus
from .presets import AGENT_PRESETS, AgentPreset, PresetConfig, get_preset

__all__ = [
	"AGENT_PRESETS",
	"Agent",
	"AgentPreset",
	"AgentResult",
	"AgentStatus",
	"PresetConfig",
	"get_preset",
]
