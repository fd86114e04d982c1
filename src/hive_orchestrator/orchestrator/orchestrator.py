"""
Orchestrator - budget-constrained scheduling of agents for one task.

Flow for each task:
1. Plan: a planner agent gets 10% of the budget and may decompose the task
2. Simple path: no subtasks, one coder agent gets the remaining budget
3. Complex path: subtasks run one at a time in dependency order, each
   under a complexity-scaled sub-budget that is released when it returns
4. Aggregate: per-agent results and total spend become one TaskResult

Scheduling is best-effort: a failed subtask still counts as completed for
its dependents, and once the budget has no headroom the remaining subtasks
are abandoned.
"""

import asyncio
import logging
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..agents.agent import Agent, AgentResult
from ..agents.presets import AgentPreset, get_preset
from ..config import Config, get_config
from ..events import AgentEventType, Event, EventChannel, TaskEventType
from ..providers.base import LLMProvider
from ..providers.registry import ProviderRegistry
from ..tools.registry import ToolRegistry
from .budget import BudgetManager, BudgetSnapshot
from .planning import SubTask, decompose, is_ready, topological_sort

logger = logging.getLogger(__name__)

PLANNER_ID = "planner"
SINGLE_AGENT_ID = "single-coder"

PLANNER_SHARE = 0.10
CANCELLED_OUTPUT = "Task cancelled"
OUTPUT_PREVIEW_CHARS = 500

PLANNING_INSTRUCTIONS = (
	"Plan this task. If it's simple enough for one agent, return an empty array []. "
	"Otherwise decompose it into subtasks."
)


class TaskStatus(str, Enum):
	"""Overall status of a task run."""
	COMPLETED = "completed"
	BUDGET_EXHAUSTED = "budget_exhausted"
	ERROR = "error"


@dataclass
class TaskConfig:
	"""A submitted task."""
	task: str
	budget: float
	model: str
	repo: Optional[str] = None


@dataclass
class TaskResult:
	"""Aggregated outcome of a task."""
	task_id: str
	task: str
	output: str
	total_cost: float
	agent_results: list[AgentResult] = field(default_factory=list)
	status: TaskStatus = TaskStatus.COMPLETED
	planner_result: Optional[AgentResult] = None


@dataclass
class TaskHandle:
	"""Handle to a task submitted with Orchestrator.submit()."""
	task_id: str
	future: "asyncio.Task[TaskResult]"

	def done(self) -> bool:
		return self.future.done()

	async def result(self) -> TaskResult:
		return await self.future

	def __await__(self):
		return self.future.__await__()


@dataclass
class ActiveTask:
	"""Bookkeeping for a task that has not finished yet."""
	task_id: str
	config: TaskConfig
	budget: BudgetManager
	agents: dict[str, Agent] = field(default_factory=dict)
	subscriptions: list[Callable[[Event], None]] = field(default_factory=list)


class Orchestrator:
	"""
	Runs tasks as sequences of budget-bounded agents.

	Providers and tools are injected and shared by every task this
	instance runs. Tasks share the active-task map; safety relies on
	the single-threaded asyncio event loop.

	Events (on self.events, every payload carries task_id):
		started, agent_started, agent_thinking, agent_tool_call,
		agent_tool_result, cost_update, agent_done, completed, error
	"""

	def __init__(
		self,
		providers: Union[ProviderRegistry, dict[str, LLMProvider]],
		tools: Optional[ToolRegistry] = None,
		config: Optional[Config] = None,
	):
		self.providers = providers if isinstance(providers, ProviderRegistry) else ProviderRegistry(providers)
		self.tools = tools or ToolRegistry()
		self.config = config or get_config()
		self.events: EventChannel[TaskEventType] = EventChannel(source="orchestrator")
		self._active_tasks: dict[str, ActiveTask] = {}

	# ── Submission surface ───────────────────────────────────────────

	async def run_task(
		self,
		task: str,
		budget: Optional[float] = None,
		model: Optional[str] = None,
		repo: Optional[str] = None,
	) -> TaskResult:
		"""
		Run a task to completion.

		The budget defaults to config.default_budget.

		Raises:
			ValueError: Empty task or non-positive budget
			ConfigurationError: No provider configured for the model
		"""
		active = self._register(task, budget, model, repo)
		return await self._execute(active)

	def submit(
		self,
		task: str,
		budget: Optional[float] = None,
		model: Optional[str] = None,
		repo: Optional[str] = None,
	) -> TaskHandle:
		"""Start a task in the background of the running event loop."""
		active = self._register(task, budget, model, repo)
		future = asyncio.get_running_loop().create_task(self._execute(active))
		return TaskHandle(task_id=active.task_id, future=future)

	def run_task_sync(
		self,
		task: str,
		budget: Optional[float] = None,
		model: Optional[str] = None,
		repo: Optional[str] = None,
	) -> TaskResult:
		"""
		Blocking variant of run_task() for callers without an event loop.

		Raises:
			RuntimeError: Called while an event loop is running; await run_task() there
		"""
		try:
			asyncio.get_running_loop()
		except RuntimeError:
			pass
		else:
			raise RuntimeError("run_task_sync() cannot be called from a running event loop, await run_task() instead")
		return asyncio.run(self.run_task(task, budget, model, repo))

	def get_active_task_ids(self) -> list[str]:
		return list(self._active_tasks.keys())

	def get_task_budget(self, task_id: str) -> Optional[BudgetSnapshot]:
		active = self._active_tasks.get(task_id)
		if not active:
			return None
		return active.budget.get_summary()

	def cancel_task(self, task_id: str) -> bool:
		"""
		Best-effort cancel: abort the task's running agents and drop it.

		An agent notices the abort at the top of its next iteration, so an
		in-flight backend call or tool batch still finishes.
		"""
		active = self._active_tasks.pop(task_id, None)
		if not active:
			return False
		for agent in list(active.agents.values()):
			agent.abort()
		logger.info(f"Task {task_id[:8]} cancelled, aborted {len(active.agents)} agent(s)")
		return True

	def subscribe_task(
		self,
		task_id: str,
		handler: Callable[[Event], None],
		event_type: Optional[TaskEventType] = None,
	) -> Callable[[Event], None]:
		"""
		Subscribe to the events of one task. Returns the registered handler.

		The handler is removed once the task finishes.

		Raises:
			KeyError: The task is not active
		"""
		active = self._active_tasks.get(task_id)
		if active is None:
			raise KeyError(f"No active task {task_id}")

		def filtered(event: Event) -> None:
			if event.payload.get("task_id") == task_id:
				handler(event)

		active.subscriptions.append(filtered)
		if event_type is None:
			self.events.subscribe_all(filtered)
		else:
			self.events.subscribe(event_type, filtered)
		return filtered

	# ── Task execution ───────────────────────────────────────────────

	def _register(self, task: str, budget: Optional[float], model: Optional[str], repo: Optional[str]) -> ActiveTask:
		"""Check preconditions and create the task's ledger. No spend happens here."""
		if budget is None:
			budget = self.config.default_budget
		if not task or not task.strip():
			raise ValueError("Task description must not be empty")
		if not isinstance(budget, (int, float)) or not math.isfinite(budget) or budget <= 0:
			raise ValueError(f"Budget must be a positive number, got {budget!r}")

		model = model or self.config.default_model
		self.providers.resolve(model)

		task_id = str(uuid.uuid4())
		active = ActiveTask(
			task_id=task_id,
			config=TaskConfig(task=task, budget=float(budget), model=model, repo=repo),
			budget=BudgetManager(budget, reserve_percent=self.config.reserve_percent, name=task_id),
		)
		self._active_tasks[task_id] = active
		return active

	async def _execute(self, active: ActiveTask) -> TaskResult:
		task_id = active.task_id
		config = active.config
		budget = active.budget
		agent_results: list[AgentResult] = []
		planner_result: Optional[AgentResult] = None

		logger.info(f"Task {task_id[:8]} started: ${config.budget:.2f} on {config.model}")
		self._emit(TaskEventType.STARTED, task_id, task=config.task, budget=config.budget, model=config.model)

		try:
			provider = self.providers.resolve(config.model)

			plan_budget = budget.allocate(PLANNER_ID, config.budget * PLANNER_SHARE)
			subtasks: list[SubTask] = []
			if plan_budget > 0:
				planner_result = await self._run_agent(
					active,
					PLANNER_ID,
					AgentPreset.PLANNER,
					f"{PLANNING_INSTRUCTIONS}\n\nTask: {config.task}",
					provider,
					plan_budget,
				)
				subtasks = decompose(planner_result.output)
			else:
				budget.release(PLANNER_ID)

			if not subtasks:
				if self._is_active(task_id):
					agent_budget = budget.allocate(SINGLE_AGENT_ID, budget.remaining)
					result = await self._run_agent(
						active,
						SINGLE_AGENT_ID,
						AgentPreset.CODER,
						config.task,
						provider,
						agent_budget,
					)
					agent_results.append(result)
			else:
				logger.info(f"Task {task_id[:8]} decomposed into {len(subtasks)} subtasks")
				await self._run_subtasks(active, subtasks, provider, agent_results)

			if not self._is_active(task_id):
				return self._cancelled_result(active, agent_results, planner_result)

			status = TaskStatus.BUDGET_EXHAUSTED if budget.remaining <= 0 else TaskStatus.COMPLETED
			task_result = TaskResult(
				task_id=task_id,
				task=config.task,
				output=self._aggregate_output(agent_results),
				total_cost=budget.spent,
				agent_results=agent_results,
				status=status,
				planner_result=planner_result,
			)
			logger.info(f"Task {task_id[:8]} {status.value}: ${budget.spent:.4f} spent")
			self._emit(TaskEventType.COMPLETED, task_id, result=task_result)
			return task_result

		except Exception as e:
			logger.error(f"Task {task_id[:8]} failed: {e}")
			task_result = TaskResult(
				task_id=task_id,
				task=config.task,
				output=f"Error: {e}",
				total_cost=budget.spent,
				agent_results=agent_results,
				status=TaskStatus.ERROR,
				planner_result=planner_result,
			)
			self._emit(TaskEventType.ERROR, task_id, error=e, result=task_result)
			return task_result

		finally:
			self._active_tasks.pop(task_id, None)
			for handler in active.subscriptions:
				self.events.unsubscribe(handler)
			active.subscriptions.clear()

	def _cancelled_result(
		self,
		active: ActiveTask,
		agent_results: list[AgentResult],
		planner_result: Optional[AgentResult],
	) -> TaskResult:
		"""Result for a task cancelled while running, keeping whatever agents finished."""
		output = CANCELLED_OUTPUT
		if agent_results:
			output = f"{CANCELLED_OUTPUT}\n\n{self._aggregate_output(agent_results)}"
		task_result = TaskResult(
			task_id=active.task_id,
			task=active.config.task,
			output=output,
			total_cost=active.budget.spent,
			agent_results=agent_results,
			status=TaskStatus.ERROR,
			planner_result=planner_result,
		)
		logger.info(f"Task {active.task_id[:8]} cancelled: ${active.budget.spent:.4f} spent")
		self._emit(TaskEventType.ERROR, active.task_id, error=CANCELLED_OUTPUT, result=task_result)
		return task_result

	async def _run_subtasks(
		self,
		active: ActiveTask,
		subtasks: list[SubTask],
		provider: LLMProvider,
		agent_results: list[AgentResult],
	) -> None:
		"""Run subtasks in dependency order until done, cancelled, or out of budget."""
		budget = active.budget
		known_ids = {s.id for s in subtasks}
		completed: set[str] = set()

		for subtask in topological_sort(subtasks):
			if not self._is_active(active.task_id):
				logger.info(f"Task {active.task_id[:8]} cancelled, stopping scheduling")
				break
			if budget.remaining <= 0:
				break

			# Only fails for subtasks caught in a dependency cycle
			if not is_ready(subtask, completed, known_ids):
				logger.warning(f"Subtask {subtask.id} has unfinished dependencies, skipping")
				continue

			agent_id = f"agent-{subtask.id}"
			agent_budget = budget.allocate(agent_id, active.config.budget * subtask.budget_multiplier)
			if agent_budget <= 0:
				budget.release(agent_id)
				logger.info(f"No budget headroom left for subtask {subtask.id}, stopping scheduling")
				break

			result = await self._run_agent(
				active,
				agent_id,
				subtask.agent_type,
				subtask.description,
				provider,
				agent_budget,
			)
			agent_results.append(result)
			# Failed subtasks still unblock their dependents
			completed.add(subtask.id)

	async def _run_agent(
		self,
		active: ActiveTask,
		agent_id: str,
		preset: AgentPreset,
		task_text: str,
		provider: LLMProvider,
		agent_budget: float,
	) -> AgentResult:
		"""Run one agent under its sub-ledger and release the ledger afterwards."""
		task_id = active.task_id
		preset_config = get_preset(preset)
		agent = Agent(
			name=preset_config.name,
			model=active.config.model,
			system_prompt=preset_config.system_prompt,
			provider=provider,
			tools=self.tools,
			budget=agent_budget,
			max_turns=self.config.max_turns,
			id=agent_id,
		)
		self._wire_agent(agent, active)
		active.agents[agent_id] = agent

		self._emit(
			TaskEventType.AGENT_STARTED,
			task_id,
			agent_id=agent_id,
			name=agent.name,
			subtask=task_text,
			budget=agent_budget,
		)

		try:
			result = await agent.run(self._with_repo_hint(task_text, active.config.repo))
		finally:
			active.agents.pop(agent_id, None)
			active.budget.release(agent_id)

		self._emit(TaskEventType.AGENT_DONE, task_id, agent_id=agent_id, result=result)
		return result

	def _wire_agent(self, agent: Agent, active: ActiveTask) -> None:
		"""Forward agent events to the task channel and record spend."""
		task_id = active.task_id
		budget = active.budget

		def on_cost(event: Event) -> None:
			budget.record_spend(agent.id, event["cost"])
			self._emit(TaskEventType.COST_UPDATE, task_id, agent_id=agent.id, spent=budget.spent, budget=budget.total)

		agent.events.subscribe(AgentEventType.COST_UPDATE, on_cost)
		agent.events.subscribe(
			AgentEventType.THINKING,
			lambda e: self._emit(TaskEventType.AGENT_THINKING, task_id, agent_id=agent.id, text=e["text"]),
		)
		agent.events.subscribe(
			AgentEventType.TOOL_CALL,
			lambda e: self._emit(
				TaskEventType.AGENT_TOOL_CALL, task_id, agent_id=agent.id, tool=e["name"], arguments=e["arguments"],
			),
		)
		agent.events.subscribe(
			AgentEventType.TOOL_RESULT,
			lambda e: self._emit(
				TaskEventType.AGENT_TOOL_RESULT, task_id, agent_id=agent.id, tool=e["name"], result=e["result"],
			),
		)

	def _emit(self, event_type: TaskEventType, task_id: str, **payload: Any) -> None:
		self.events.emit(event_type, task_id=task_id, **payload)

	def _is_active(self, task_id: str) -> bool:
		return task_id in self._active_tasks

	@staticmethod
	def _with_repo_hint(task_text: str, repo: Optional[str]) -> str:
		if not repo:
			return task_text
		return f"{task_text}\n\nRepository: {repo}"

	@staticmethod
	def _aggregate_output(agent_results: list[AgentResult]) -> str:
		if not agent_results:
			return "No agents ran"
		return "\n\n".join(
			f"[{r.name}] {r.status.value}: {r.output[:OUTPUT_PREVIEW_CHARS]}"
			for r in agent_results
		)
