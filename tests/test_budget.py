"""Tests for the BudgetManager ledger."""

import pytest

from hive_orchestrator.events import BudgetEventType
from hive_orchestrator.orchestrator.budget import BudgetManager


def collect(budget: BudgetManager, event_type: BudgetEventType) -> list:
	events = []
	budget.events.subscribe(event_type, events.append)
	return events


class TestAllocate:
	"""Tests for sub-budget allocation."""

	def test_allocation_capped_by_request(self):
		budget = BudgetManager(10.0)
		assert budget.allocate("a", 2.0) == 2.0

	def test_allocation_capped_by_headroom_minus_reserve(self):
		"""The reserve is never handed out."""
		budget = BudgetManager(10.0, reserve_percent=0.1)
		assert budget.allocate("a", 100.0) == pytest.approx(9.0)

	def test_allocation_accounts_for_spend(self):
		budget = BudgetManager(10.0, reserve_percent=0.1)
		budget.record_spend("x", 4.0)
		assert budget.allocate("a", 100.0) == pytest.approx(5.0)

	def test_allocation_never_negative(self):
		budget = BudgetManager(10.0, reserve_percent=0.1)
		budget.record_spend("x", 9.5)
		assert budget.allocate("a", 1.0) == 0.0

	def test_allocation_bounds_hold_across_requests(self):
		budget = BudgetManager(5.0)
		for i, (spend, request) in enumerate([(0.0, 3.0), (1.0, 0.2), (2.5, 4.0), (1.3, 1.0)]):
			budget.record_spend("x", spend)
			headroom = max(0.0, budget.total - budget.spent - budget.reserve)
			allocated = budget.allocate(f"a{i}", request)
			assert allocated <= request
			assert allocated <= headroom + 1e-12

	def test_double_allocation_overwrites(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 1.0)
		budget.record_spend("a", 0.5)
		budget.allocate("a", 3.0)

		ledger = budget.get_ledger("a")
		assert ledger.allocated == 3.0
		assert ledger.spent == 0.0


class TestRecordSpend:
	"""Tests for spend recording and threshold events."""

	def test_spent_is_sum_of_amounts(self):
		budget = BudgetManager(100.0)
		amounts = [0.5, 1.25, 0.0, 3.0, 0.01]
		previous = 0.0
		for amount in amounts:
			budget.record_spend("a", amount)
			assert budget.spent >= previous
			previous = budget.spent
		assert budget.spent == pytest.approx(sum(amounts))

	def test_spend_updates_sub_ledger(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 2.0)
		budget.record_spend("a", 0.75)
		assert budget.get_ledger("a").spent == 0.75

	def test_spend_for_unknown_agent_still_counts_globally(self):
		budget = BudgetManager(10.0)
		assert budget.record_spend("ghost", 1.0) is True
		assert budget.spent == 1.0
		assert budget.get_ledger("ghost") is None

	def test_negative_spend_rejected(self):
		budget = BudgetManager(10.0)
		with pytest.raises(ValueError):
			budget.record_spend("a", -1.0)
		assert budget.spent == 0.0

	def test_spend_event_emitted_every_call(self):
		budget = BudgetManager(10.0)
		spends = collect(budget, BudgetEventType.SPEND)
		budget.record_spend("a", 1.0)
		budget.record_spend("b", 2.0)

		assert [e["amount"] for e in spends] == [1.0, 2.0]
		assert spends[-1]["total_spent"] == 3.0
		assert spends[-1]["remaining"] == 7.0

	def test_warning_fires_on_crossing_80_and_90(self):
		budget = BudgetManager(10.0)
		warnings = collect(budget, BudgetEventType.WARNING)

		budget.record_spend("a", 7.0)   # 70%
		assert warnings == []
		budget.record_spend("a", 1.0)   # 80%
		assert len(warnings) == 1
		assert warnings[0]["threshold"] == 80.0
		budget.record_spend("a", 0.5)   # 85%
		assert len(warnings) == 1
		budget.record_spend("a", 0.6)   # 91%
		assert len(warnings) == 2
		assert warnings[1]["threshold"] == 90.0
		budget.record_spend("a", 0.2)   # 93%
		assert len(warnings) == 2

	def test_single_call_crossing_both_bands_warns_once(self):
		budget = BudgetManager(10.0)
		warnings = collect(budget, BudgetEventType.WARNING)
		budget.record_spend("a", 9.5)
		assert len(warnings) == 1
		assert warnings[0]["threshold"] == 90.0

	def test_exhausted_iff_spent_reaches_total(self):
		budget = BudgetManager(2.0)
		exhausted = collect(budget, BudgetEventType.EXHAUSTED)

		assert budget.record_spend("a", 1.0) is True
		assert exhausted == []
		assert budget.record_spend("a", 1.0) is False
		assert len(exhausted) == 1
		assert budget.record_spend("a", 0.5) is False
		assert len(exhausted) == 2
		assert budget.remaining == 0.0


class TestCanSpendAndRelease:
	"""Tests for advisory checks and reclamation."""

	def test_can_spend_within_allocation(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 1.0)
		assert budget.can_spend("a")
		budget.record_spend("a", 1.0)
		assert not budget.can_spend("a")

	def test_can_spend_false_when_global_exhausted(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 5.0)
		budget.record_spend("other", 10.0)
		assert not budget.can_spend("a")

	def test_can_spend_unknown_agent(self):
		assert not BudgetManager(10.0).can_spend("nobody")

	def test_release_returns_unspent(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 3.0)
		budget.record_spend("a", 1.0)

		assert budget.release("a") == pytest.approx(2.0)
		assert budget.get_ledger("a") is None
		assert budget.spent == 1.0

	def test_release_of_overspent_ledger_returns_zero(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 1.0)
		budget.record_spend("a", 1.5)
		assert budget.release("a") == 0.0

	def test_release_unknown_id_is_noop(self):
		budget = BudgetManager(10.0)
		budget.allocate("a", 2.0)
		budget.record_spend("a", 0.5)
		before = budget.get_summary()

		assert budget.release("missing") == 0

		assert budget.get_summary() == before

	def test_summary_snapshot(self):
		budget = BudgetManager(5.0)
		budget.allocate("a", 1.0)
		budget.record_spend("a", 0.25)

		summary = budget.get_summary().to_dict()
		assert summary["total"] == 5.0
		assert summary["spent"] == 0.25
		assert summary["remaining"] == 4.75
		assert summary["per_agent"] == [{"agent_id": "a", "allocated": 1.0, "spent": 0.25}]


def test_invalid_construction():
	with pytest.raises(ValueError):
		BudgetManager(-1.0)
	with pytest.raises(ValueError):
		BudgetManager(1.0, reserve_percent=1.0)
