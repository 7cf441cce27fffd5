"""
Tests for the command gateway.
"""
import threading
from unittest.mock import Mock, patch

from command_mcp.config import ExecutionSettings
from command_mcp.core.async_ops import TaskStatus
from command_mcp.core.error_handler import ErrorCategory
from command_mcp.core.execution import ExecutionMode


class TestSubmission:
    """Test allow-list gating and strategy selection."""

    def test_not_allowed_creates_no_task_and_skips_host(self, make_gateway, store, host):
        gateway = make_gateway(allowed_commands=("a.*",))

        outcome = gateway.submit("b.run", ["x"])

        assert not outcome.success
        assert outcome.error == "Command 'b.run' is not allowed"
        assert outcome.error_category == ErrorCategory.NOT_ALLOWED
        assert len(store) == 0
        assert host.calls == []

    def test_not_allowed_in_sync_mode(self, make_gateway, host):
        gateway = make_gateway(allowed_commands=("noop.success",), async_execution=False)
        outcome = gateway.submit("noop.fail")
        assert outcome.error_category == ErrorCategory.NOT_ALLOWED
        assert host.calls == []

    def test_sync_success(self, make_gateway, store, host):
        gateway = make_gateway(async_execution=False)

        outcome = gateway.submit("noop.success", ["a"])

        assert outcome.success
        assert outcome.execution_mode == ExecutionMode.SYNC
        assert outcome.result == "ok"
        assert host.calls == [("noop.success", ["a"])]
        assert len(store) == 0
        assert outcome.to_dict() == {
            "success": True,
            "async": False,
            "command": "noop.success",
            "arguments": ["a"],
            "result": "ok",
        }

    def test_sync_failure_carries_host_message(self, make_gateway):
        gateway = make_gateway(async_execution=False)

        data = gateway.submit("noop.fail").to_dict()

        assert data["success"] is False
        assert data["async"] is False
        assert data["error"] == "boom"
        assert data["category"] == "host_execution_failure"

    def test_sync_failure_with_empty_message_uses_exception_name(self, store, scheduler):
        from command_mcp.core.execution import CommandGateway

        host = Mock()
        host.execute.side_effect = KeyError()
        gateway = CommandGateway(host, store, scheduler, settings=ExecutionSettings(async_execution=False))

        outcome = gateway.submit("anything")
        assert not outcome.success
        assert outcome.error == "KeyError"

    def test_async_returns_task_handle_without_running(self, make_gateway, store, host):
        gateway = make_gateway(async_execution=True, execution_delay=1500)

        outcome = gateway.submit("noop.success", ["a"])
        data = outcome.to_dict()

        assert outcome.success and outcome.is_async
        assert data["task_id"].startswith("bg_task_")
        assert data["execution_delay"] == 1500
        assert data["message"] == "Command 'noop.success' submitted for background execution, will run in 1500ms"
        assert data["queue_length"] == 1
        assert data["task_stats"]["pending"] == 1
        assert host.calls == []

        task = store.get(data["task_id"])
        assert task.status == TaskStatus.PENDING
        assert task.delay_ms == 1500

    def test_async_message_without_delay(self, make_gateway):
        gateway = make_gateway()
        outcome = gateway.submit("noop.success")
        assert outcome.message == "Command 'noop.success' submitted for background execution"

    def test_async_ids_are_fresh(self, make_gateway):
        gateway = make_gateway()
        ids = {gateway.submit("noop.success").task_id for _ in range(5)}
        assert len(ids) == 5

    def test_queue_length_counts_pending_and_running(self, make_gateway, store):
        gateway = make_gateway()
        first = gateway.submit("noop.success")
        store.claim(first.task_id)
        done = gateway.submit("noop.success")
        store.claim(done.task_id)
        store.complete(done.task_id, "ok")

        outcome = gateway.submit("noop.success")
        assert outcome.queue_length == 2

    def test_submitted_task_runs_on_tick(self, make_gateway, scheduler, store):
        gateway = make_gateway()
        outcome = gateway.submit("noop.success")

        assert scheduler.tick() == [outcome.task_id]
        assert scheduler.drain(timeout=5.0)
        assert gateway.get_task(outcome.task_id).status == TaskStatus.COMPLETED


class TestApplySettings:
    """Test configuration refresh."""

    def test_disabling_async_purges_pending_with_one_warning(self, make_gateway, store, notifier):
        gateway = make_gateway(async_execution=True, execution_delay=60_000)
        for _ in range(3):
            gateway.submit("noop.success")

        summary = gateway.apply_settings(ExecutionSettings(async_execution=False))

        assert len(summary["purged_tasks"]) == 3
        assert len(store) == 0
        assert notifier.messages["warning"] == ["Async execution disabled, cleared 3 pending task(s)"]
        assert not gateway.async_execution

    def test_disabling_async_leaves_running_tasks(self, make_gateway, store):
        gateway = make_gateway(execution_delay=60_000)
        running = gateway.submit("noop.success")
        gateway.submit("noop.success")
        store.claim(running.task_id)

        gateway.apply_settings(ExecutionSettings(async_execution=False))

        assert [t.task_id for t in store.all()] == [running.task_id]
        assert store.get(running.task_id).status == TaskStatus.RUNNING

    def test_disabling_async_without_pending_tasks_is_silent(self, make_gateway, notifier):
        gateway = make_gateway()
        gateway.apply_settings(ExecutionSettings(async_execution=False))
        assert notifier.messages["warning"] == []

    def test_narrowing_allow_list_purges_rejected_pending(self, make_gateway, store, notifier):
        gateway = make_gateway(execution_delay=60_000)
        keep = gateway.submit("a.run")
        gateway.submit("b.run")
        gateway.submit("b.stop")

        summary = gateway.apply_settings(ExecutionSettings(allowed_commands=("a.*",), execution_delay=60_000))

        assert len(summary["purged_tasks"]) == 2
        assert [t.task_id for t in store.all()] == [keep.task_id]
        assert notifier.messages["warning"] == [
            "Allowed commands changed, cleared 2 pending task(s) that are no longer allowed"
        ]

    def test_unchanged_allow_list_keeps_pending(self, make_gateway, store, notifier):
        gateway = make_gateway(allowed_commands=("a.*",))
        gateway.submit("a.run")

        gateway.apply_settings(ExecutionSettings(allowed_commands=("a.*",), execution_delay=10))

        assert len(store) == 1
        assert notifier.messages["warning"] == []
        assert gateway.execution_delay == 10

    def test_new_settings_apply_to_next_submission(self, make_gateway, host):
        gateway = make_gateway(async_execution=True)
        gateway.apply_settings(ExecutionSettings(async_execution=False, allowed_commands=("noop.*",)))

        outcome = gateway.submit("noop.success")
        assert outcome.execution_mode == ExecutionMode.SYNC
        assert host.calls == [("noop.success", [])]
        assert not gateway.submit("other").success

    def test_notification_flag_forwarded_to_scheduler(self, make_gateway, scheduler):
        gateway = make_gateway(show_completion_notifications=True)
        assert scheduler.show_completion_notifications

        gateway.apply_settings(ExecutionSettings(show_completion_notifications=False))
        assert not scheduler.show_completion_notifications

    def test_submission_during_refresh_waits_for_purge(self, make_gateway, store, host):
        gateway = make_gateway(execution_delay=60_000)
        gateway.submit("noop.success")
        outcomes = []
        submitter = threading.Thread(target=lambda: outcomes.append(gateway.submit("noop.success")))
        original_purge = store.purge_pending

        def purge_with_concurrent_submit(*args, **kwargs):
            submitter.start()
            submitter.join(timeout=0.2)
            assert submitter.is_alive()
            return original_purge(*args, **kwargs)

        with patch.object(store, "purge_pending", side_effect=purge_with_concurrent_submit):
            summary = gateway.apply_settings(ExecutionSettings(async_execution=False))

        submitter.join(timeout=5.0)
        assert len(summary["purged_tasks"]) == 1
        assert outcomes[0].execution_mode == ExecutionMode.SYNC
        assert len(store) == 0
        assert host.calls == [("noop.success", [])]

    def test_settings_and_allow_list_swap_together(self, make_gateway):
        gateway = make_gateway(allowed_commands=("a.*",))
        settings = ExecutionSettings(allowed_commands=("b.*",), async_execution=False)

        gateway.apply_settings(settings)

        assert gateway.settings is settings
        assert gateway.allow_list.is_allowed("b.run")
        assert not gateway.allow_list.is_allowed("a.run")


class TestCommandDiscovery:
    """Test command listing and command info."""

    def test_available_commands_filtered_and_sorted(self, make_gateway):
        gateway = make_gateway(allowed_commands=("noop.s*", "noop.block"))
        assert gateway.get_available_commands() == ["noop.block", "noop.success"]

    def test_empty_allow_list_lists_everything(self, make_gateway):
        gateway = make_gateway()
        assert gateway.get_available_commands() == ["noop.block", "noop.fail", "noop.success"]

    def test_command_info(self, make_gateway):
        gateway = make_gateway(allowed_commands=("noop.success",))
        assert gateway.get_command_info("noop.success") == {
            "command": "noop.success", "exists": True, "allowed": True,
        }
        assert gateway.get_command_info("noop.fail") == {
            "command": "noop.fail", "exists": True, "allowed": False,
        }
        assert gateway.get_command_info("nope")["exists"] is False

    def test_command_info_reports_host_errors(self, store, scheduler):
        from command_mcp.core.execution import CommandGateway

        host = Mock()
        host.get_commands.side_effect = RuntimeError("host unavailable")
        gateway = CommandGateway(host, store, scheduler)

        info = gateway.get_command_info("x")
        assert info["exists"] is False
        assert info["error"] == "host unavailable"


class TestTaskQueries:
    """Test the task query surface."""

    def test_cancel_and_clear(self, make_gateway):
        gateway = make_gateway(execution_delay=60_000)
        first = gateway.submit("noop.success")
        gateway.submit("noop.success")

        assert gateway.cancel(first.task_id)
        assert [t.task_id for t in gateway.get_tasks_by_status(TaskStatus.CANCELLED)] == [first.task_id]
        assert gateway.clear_completed() == 1
        assert len(gateway.get_all_tasks()) == 1
        assert gateway.clear_all() == 1
        assert gateway.get_stats()["total"] == 0
