"""Reporting package - console views of task progress and results."""

from .console import ConsoleReporter, render_task_result
from .utils import format_cost, truncate

__all__ = [
	"ConsoleReporter",
	"format_cost",
	"render_task_result",
	"truncate",
]
