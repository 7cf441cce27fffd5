"""
Hermetic self-test for the Command MCP server package.

This test uses an in-process command host and validates basic contracts:
- Synchronous execution returns the command result
- Asynchronous execution returns a task handle and the task completes
- list_commands only reports allow-listed commands
- Tool registry imports cleanly
"""
from __future__ import annotations


def _build(settings):
    from command_mcp.config import ExecutionSettings
    from command_mcp.core.async_ops import BackgroundTaskScheduler, TaskStore
    from command_mcp.core.dispatcher import ToolDispatcher
    from command_mcp.core.execution import CommandGateway
    from command_mcp.core.host import CommandRegistryHost

    host = CommandRegistryHost(workspace_name="selftest")
    host.register_command("demo.echo", lambda *args: list(args))
    host.register_command("demo.fail", lambda: 1 / 0)
    host.register_command("other.hidden", lambda: None)

    store = TaskStore()
    scheduler = BackgroundTaskScheduler(store, host)
    gateway = CommandGateway(host, store, scheduler, settings=ExecutionSettings(**settings))
    return ToolDispatcher(gateway, host), scheduler


def _sync_execution() -> None:
    dispatcher, scheduler = _build({"allowed_commands": ("demo.*",), "async_execution": False})
    try:
        result = dispatcher.invoke("execute_command", {"command": "demo.echo", "arguments": ["a", 1]})
        assert result["success"] and result["result"] == ["a", 1], result

        result = dispatcher.invoke("execute_command", {"command": "demo.fail"})
        assert not result["success"] and result["error"], result

        result = dispatcher.invoke("execute_command", {"command": "other.hidden"})
        assert not result["success"] and result["category"] == "not_allowed", result
    finally:
        scheduler.shutdown()


def _async_execution() -> None:
    dispatcher, scheduler = _build({"async_execution": True})
    try:
        result = dispatcher.invoke("execute_command", {"command": "demo.echo", "arguments": ["x"]})
        assert result["success"] and result["async"] and result["task_id"], result

        assert scheduler.tick() == [result["task_id"]]
        assert scheduler.drain(timeout=5.0)
        task = scheduler.store.get(result["task_id"])
        assert task.status.value == "completed" and task.result == ["x"], task
    finally:
        scheduler.shutdown()


def _list_filtering() -> None:
    dispatcher, scheduler = _build({"allowed_commands": ("demo.*",)})
    try:
        result = dispatcher.invoke("list_commands", {})
        assert result["commands"] == ["demo.echo", "demo.fail"], result
    finally:
        scheduler.shutdown()


def _tools_import() -> None:
    from command_mcp.tools import get_tool_info
    info = get_tool_info()
    assert "categories" in info and info["total_tools"] >= 1


def main() -> int:
    _sync_execution()
    _async_execution()
    _list_filtering()
    _tools_import()
    print("Selftest OK")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
