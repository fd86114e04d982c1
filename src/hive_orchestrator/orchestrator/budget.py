"""
Budget Manager - hierarchical dollar ledger for one task.

One global ceiling, per-agent sub-allocations, spend recording with
threshold warnings, and reclamation of unspent allocations.

Spend is strictly additive: a recorded cost already happened and is
never refunded. Releasing a sub-ledger only forgets the allocation;
global spend keeps reflecting real cost.
"""

import logging
from dataclasses import asdict, dataclass, field

from ..events import BudgetEventType, EventChannel

logger = logging.getLogger(__name__)

DEFAULT_RESERVE_PERCENT = 0.10
WARNING_THRESHOLDS = (80.0, 90.0)


@dataclass
class SubLedger:
	"""Budget tracked against one running agent."""
	agent_id: str
	allocated: float
	spent: float = 0.0

	@property
	def unspent(self) -> float:
		return max(0.0, self.allocated - self.spent)


@dataclass
class BudgetSnapshot:
	"""Point-in-time view of a task's budget."""
	total: float
	spent: float
	remaining: float
	per_agent: list[SubLedger] = field(default_factory=list)

	def to_dict(self) -> dict:
		return asdict(self)


class BudgetManager:
	"""
	Spend ledger with a global ceiling and per-agent sub-ledgers.

	A reserve (default 10% of the total) is never handed out by allocate(),
	so a late agent such as a reviewer still has headroom after an earlier
	agent overspends its allocation.

	Events (on self.events):
		spend(agent_id, amount, total_spent, remaining)
		warning(agent_id, percent_used, threshold)
		exhausted(agent_id, total_spent)
	"""

	def __init__(self, total_budget: float, reserve_percent: float = DEFAULT_RESERVE_PERCENT, name: str = ""):
		if total_budget < 0:
			raise ValueError(f"total_budget must be non-negative, got {total_budget}")
		if not 0 <= reserve_percent < 1:
			raise ValueError(f"reserve_percent must be in [0, 1), got {reserve_percent}")

		self._total = total_budget
		self._spent = 0.0
		self._reserve_percent = reserve_percent
		self._reserve = total_budget * reserve_percent
		self._ledgers: dict[str, SubLedger] = {}
		self._warned: set[float] = set()
		self.events: EventChannel[BudgetEventType] = EventChannel(source=name or "budget")

	@property
	def total(self) -> float:
		return self._total

	@property
	def spent(self) -> float:
		return self._spent

	@property
	def reserve(self) -> float:
		return self._reserve

	@property
	def remaining(self) -> float:
		return max(0.0, self._total - self._spent)

	@property
	def available(self) -> float:
		"""Headroom that allocate() may still hand out."""
		return max(0.0, self._total - self._spent - self._reserve)

	@property
	def percent_used(self) -> float:
		if self._total <= 0:
			return 100.0 if self._spent > 0 else 0.0
		return self._spent / self._total * 100

	def allocate(self, agent_id: str, requested: float) -> float:
		"""
		Register a fresh sub-ledger for an agent.

		Args:
			agent_id: Sub-ledger id. Allocating an existing id overwrites it.
			requested: Amount asked for

		Returns:
			min(requested, available headroom), never negative
		"""
		allocated = max(0.0, min(requested, self.available))

		if agent_id in self._ledgers:
			logger.warning(f"Sub-ledger {agent_id} allocated twice, overwriting")
		self._ledgers[agent_id] = SubLedger(agent_id=agent_id, allocated=allocated)

		logger.debug(
			f"Allocated ${allocated:.4f} to {agent_id} "
			f"(requested ${requested:.4f}, spent ${self._spent:.4f} of ${self._total:.2f})"
		)
		return allocated

	def record_spend(self, agent_id: str, amount: float) -> bool:
		"""
		Record a cost that has already been incurred.

		Returns:
			False once global spend has reached the total, else True
		"""
		if amount < 0:
			raise ValueError(f"Spend amount must be non-negative, got {amount}")

		before = self.percent_used
		self._spent += amount

		ledger = self._ledgers.get(agent_id)
		if ledger:
			ledger.spent += amount

		remaining = self._total - self._spent
		self.events.emit(
			BudgetEventType.SPEND,
			agent_id=agent_id,
			amount=amount,
			total_spent=self._spent,
			remaining=remaining,
		)

		after = self.percent_used
		crossed = [t for t in WARNING_THRESHOLDS if before < t <= after and t not in self._warned]
		if crossed:
			self._warned.update(crossed)
			logger.warning(f"Budget {after:.1f}% used after spend by {agent_id}")
			self.events.emit(
				BudgetEventType.WARNING,
				agent_id=agent_id,
				percent_used=after,
				threshold=max(crossed),
			)

		if self._spent >= self._total:
			logger.warning(f"Budget exhausted by {agent_id}: ${self._spent:.4f} of ${self._total:.2f}")
			self.events.emit(BudgetEventType.EXHAUSTED, agent_id=agent_id, total_spent=self._spent)
			return False

		return True

	def can_spend(self, agent_id: str) -> bool:
		"""Advisory check: the agent's sub-ledger and the global pool both have room."""
		ledger = self._ledgers.get(agent_id)
		if not ledger:
			return False
		return ledger.spent < ledger.allocated and self._spent < self._total

	def release(self, agent_id: str) -> float:
		"""
		Drop an agent's sub-ledger and return its unspent portion.

		Unknown ids return 0 and change nothing.
		"""
		ledger = self._ledgers.pop(agent_id, None)
		if ledger is None:
			return 0.0
		logger.debug(f"Released ${ledger.unspent:.4f} from {agent_id}")
		return ledger.unspent

	def get_ledger(self, agent_id: str) -> SubLedger | None:
		return self._ledgers.get(agent_id)

	def get_summary(self) -> BudgetSnapshot:
		"""Snapshot of totals and live sub-ledgers."""
		return BudgetSnapshot(
			total=self._total,
			spent=self._spent,
			remaining=self.remaining,
			per_agent=[
				SubLedger(agent_id=ledger.agent_id, allocated=ledger.allocated, spent=ledger.spent)
				for ledger in self._ledgers.values()
			],
		)
