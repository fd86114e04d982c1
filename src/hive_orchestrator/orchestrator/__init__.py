"""Orchestrator module - budget ledger, planning boundary, and task scheduling."""

from .budget import BudgetManager, BudgetSnapshot, SubLedger
from .orchestrator import (
	Orchestrator,
	TaskConfig,
	TaskHandle,
	TaskResult,
	TaskStatus,
)
from .planning import Complexity, SubTask, decompose, parse_subtasks, topological_sort

__all__ = [
	"BudgetManager",
	"BudgetSnapshot",
	"Complexity",
	"Orchestrator",
	"SubLedger",
	"SubTask",
	"TaskConfig",
	"TaskHandle",
	"TaskResult",
	"TaskStatus",
	"decompose",
	"parse_subtasks",
	"topological_sort",
]
