"""hive-orchestrator - budget-constrained scheduling of cooperating LLM agents."""

from .agents import Agent, AgentPreset, AgentResult, AgentStatus
from .config import Config, get_config, load_config
from .errors import BackendCallError, ConfigurationError, HiveError, PlanningParseError
from .logging_config import setup_logging, setup_logging_from_config
from .orchestrator import BudgetManager, Orchestrator, TaskHandle, TaskResult, TaskStatus
from .providers import LLMProvider, LLMResponse, ProviderRegistry, ToolCall, Usage
from .tools import ToolHandler, ToolRegistry

__version__ = "0.1.0"

__all__ = [
	"Agent",
	"AgentPreset",
	"AgentResult",
	"AgentStatus",
	"BackendCallError",
	"BudgetManager",
	"Config",
	"ConfigurationError",
	"HiveError",
	"LLMProvider",
	"LLMResponse",
	"Orchestrator",
	"PlanningParseError",
	"ProviderRegistry",
	"TaskHandle",
	"TaskResult",
	"TaskStatus",
	"ToolCall",
	"ToolHandler",
	"ToolRegistry",
	"Usage",
	"get_config",
	"load_config",
	"setup_logging",
	"setup_logging_from_config",
]
