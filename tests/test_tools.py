"""Tests for the tool registry contract."""

import pytest

from hive_orchestrator.providers.base import ToolDefinition
from hive_orchestrator.tools.registry import ToolHandler, ToolOutcome, ToolRegistry

from tests.helpers import make_tools


class TestToolRegistry:
	"""Execution never raises; errors come back as text."""

	@pytest.mark.asyncio
	async def test_execute_sync_tool(self):
		registry = make_tools()
		assert await registry.execute("echo", {"text": "hello"}) == "echo: hello"

	@pytest.mark.asyncio
	async def test_execute_async_tool(self):
		registry = ToolRegistry()

		async def read_file(args):
			return f"contents of {args['path']}"

		registry.register(ToolHandler(
			definition=ToolDefinition(name="read_file", description="Read a file"),
			execute=read_file,
		))

		assert await registry.execute("read_file", {"path": "a.txt"}) == "contents of a.txt"

	@pytest.mark.asyncio
	async def test_unknown_tool(self):
		assert await make_tools().execute("rm_rf", {}) == 'Error: Unknown tool "rm_rf"'

	@pytest.mark.asyncio
	async def test_failing_tool(self):
		assert await make_tools().execute("boom", {}) == "Error executing boom: kaboom"

	@pytest.mark.asyncio
	async def test_non_string_result_is_stringified(self):
		registry = ToolRegistry()

		@registry.tool("count", "Count things")
		def count(args):
			return 3

		assert await registry.execute("count", {}) == "3"

	@pytest.mark.asyncio
	async def test_invoke_flags_failures(self):
		registry = make_tools()

		ok = await registry.invoke("echo", {"text": "Error in input"})
		failed = await registry.invoke("boom", {})
		unknown = await registry.invoke("nope", {})

		assert ok == ToolOutcome(content="echo: Error in input", is_error=False)
		assert failed == ToolOutcome(content="Error executing boom: kaboom", is_error=True)
		assert unknown.is_error

	def test_definitions_in_registration_order(self):
		registry = make_tools()
		definitions = registry.get_definitions()
		assert [d.name for d in definitions] == ["echo", "boom"]
		assert definitions[0].parameters["properties"]["text"]["type"] == "string"
		assert registry.names() == ["echo", "boom"]
		assert len(registry) == 2

	def test_register_replaces_same_name(self):
		registry = make_tools()
		registry.register(ToolHandler(
			definition=ToolDefinition(name="echo", description="New echo"),
			execute=lambda args: "new",
		))
		assert len(registry) == 2
		assert registry.get("echo").definition.description == "New echo"
