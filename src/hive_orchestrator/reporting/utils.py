"""Shared formatting helpers for reporting views."""


def format_cost(amount: float) -> str:
	"""Format a dollar amount, e.g. '$0.0123'."""
	return f"${amount:.4f}"


def format_percent(spent: float, total: float) -> str:
	if total <= 0:
		return "n/a"
	return f"{spent / total * 100:.1f}%"


def truncate(text: str, max_len: int = 100) -> str:
	"""Shorten text to one line for display."""
	if not text:
		return ""
	line = " ".join(text.split())
	if len(line) <= max_len:
		return line
	return line[:max_len - 3] + "..."


def status_style(status: str) -> str:
	"""Return a Rich style string for an agent or task status."""
	return {
		"completed": "green",
		"budget_exhausted": "yellow",
		"max_turns": "yellow",
		"error": "red",
	}.get(status, "white")
