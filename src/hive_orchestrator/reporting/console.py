"""Console reporting - logs task events and renders task results with Rich."""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..events import Event, TaskEventType
from ..orchestrator.orchestrator import Orchestrator, TaskResult
from .utils import format_cost, format_percent, status_style, truncate

logger = logging.getLogger(__name__)


class ConsoleReporter:
	"""
	Subscribes to an orchestrator's events and reports progress.

	Progress lines go to the logger; the final result is rendered as a
	Rich panel when a console is given.
	"""

	def __init__(self, console: Optional[Console] = None, render_results: bool = True):
		self.console = console or Console()
		self.render_results = render_results

	def attach(self, orchestrator: Orchestrator) -> None:
		"""Wire this reporter to every task the orchestrator runs."""
		handlers = {
			TaskEventType.STARTED: self.on_task_started,
			TaskEventType.AGENT_STARTED: self.on_agent_started,
			TaskEventType.AGENT_DONE: self.on_agent_done,
			TaskEventType.COST_UPDATE: self.on_cost_update,
			TaskEventType.COMPLETED: self.on_task_completed,
			TaskEventType.ERROR: self.on_error,
		}
		for event_type, handler in handlers.items():
			orchestrator.events.subscribe(event_type, handler)

	def on_task_started(self, event: Event) -> None:
		self._log(
			f"Task started: {event['task_id'][:8]} "
			f"({format_cost(event['budget'])} on {event['model']})"
		)

	def on_agent_started(self, event: Event) -> None:
		self._log(f"Agent {event['name']} ({event['agent_id']}) started: {truncate(event['subtask'])}")

	def on_agent_done(self, event: Event) -> None:
		result = event["result"]
		self._log(
			f"Agent {result.name} done [{result.status.value}] - "
			f"{format_cost(result.total_cost)} spent, {result.turns} turns"
		)

	def on_cost_update(self, event: Event) -> None:
		logger.debug(
			f"[Hive] Cost: {format_cost(event['spent'])} / ${event['budget']:.2f} "
			f"({format_percent(event['spent'], event['budget'])})"
		)

	def on_task_completed(self, event: Event) -> None:
		result: TaskResult = event["result"]
		self._log(f"Task {result.status.value}: {format_cost(result.total_cost)} spent")
		if self.render_results:
			render_task_result(result, console=self.console)

	def on_error(self, event: Event) -> None:
		logger.error(f"[Hive] Error: {event['error']}")
		if self.render_results:
			render_task_result(event["result"], console=self.console)

	def _log(self, msg: str) -> None:
		logger.info(f"[Hive] {msg}")


def render_task_result(result: TaskResult, console: Optional[Console] = None) -> None:
	"""Render a summary panel and a per-agent table for a finished task."""
	console = console or Console()
	style = status_style(result.status.value)

	summary = (
		f"[bold]Task:[/bold] {truncate(result.task, 80)}\n"
		f"[bold]Status:[/bold] [{style}]{result.status.value}[/{style}]  |  "
		f"[bold]Cost:[/bold] {format_cost(result.total_cost)}  |  "
		f"[bold]Agents:[/bold] {len(result.agent_results)}"
	)
	console.print(Panel(summary, title=f"Task {result.task_id[:8]}", border_style=style))

	agents = list(result.agent_results)
	if result.planner_result is not None:
		agents.insert(0, result.planner_result)

	if not agents:
		console.print("[dim]No agents ran.[/dim]")
		return

	table = Table(title="Agents")
	table.add_column("Agent", style="cyan")
	table.add_column("Status", justify="center")
	table.add_column("Turns", justify="right")
	table.add_column("Cost", justify="right")
	table.add_column("Output")

	for r in agents:
		agent_style = status_style(r.status.value)
		table.add_row(
			f"{r.name} ({r.id})",
			f"[{agent_style}]{r.status.value}[/{agent_style}]",
			str(r.turns),
			format_cost(r.total_cost),
			truncate(r.output, 60),
		)

	console.print(table)
