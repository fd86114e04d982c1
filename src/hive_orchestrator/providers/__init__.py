"""Backend provider contract and registry."""

from .base import (
	ImageAttachment,
	LLMProvider,
	LLMResponse,
	Message,
	Role,
	StopReason,
	ToolCall,
	ToolDefinition,
	ToolResult,
	Usage,
)
from .registry import ProviderRegistry

__all__ = [
	"ImageAttachment",
	"LLMProvider",
	"LLMResponse",
	"Message",
	"ProviderRegistry",
	"Role",
	"StopReason",
	"ToolCall",
	"ToolDefinition",
	"ToolResult",
	"Usage",
]
