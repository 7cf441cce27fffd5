"""
Tests for the background task health report.
"""
from command_mcp.core.async_ops import TaskMonitor


def _finish(store, command, ok=True):
    task = store.add(command)
    store.claim(task.task_id)
    if ok:
        store.complete(task.task_id, "ok")
    else:
        store.fail(task.task_id, "boom")
    return task


class TestTaskMonitor:

    def test_empty_store_is_healthy(self, store):
        report = TaskMonitor(store).get_report()
        assert report["statistics"]["total"] == 0
        assert report["success_rate"] == 1.0
        assert report["stuck_tasks"] == []
        assert report["health_assessment"]["overall"] == "healthy"
        assert report["recommendations"] == ["No specific recommendations at this time"]

    def test_stuck_running_task_reported(self, store, clock):
        task = store.add("noop.block")
        store.claim(task.task_id)
        monitor = TaskMonitor(store, stuck_threshold_seconds=60)

        assert monitor.find_stuck_tasks() == []

        clock.advance_ms(61_000)
        stuck = monitor.find_stuck_tasks()
        assert [s["task_id"] for s in stuck] == [task.task_id]
        assert stuck[0]["running_for_seconds"] == 61.0

        report = monitor.get_report()
        assert report["health_assessment"]["overall"] == "unhealthy"
        assert any("stuck" in issue for issue in report["health_assessment"]["issues"])

    def test_low_success_rate_unhealthy(self, store):
        _finish(store, "a", ok=True)
        _finish(store, "b", ok=False)
        _finish(store, "c", ok=False)

        report = TaskMonitor(store).get_report()
        assert round(report["success_rate"], 2) == 0.33
        assert report["health_assessment"]["overall"] == "unhealthy"
        assert any("failed tasks" in r for r in report["recommendations"])

    def test_moderate_success_rate_is_warning(self, store):
        for _ in range(3):
            _finish(store, "a", ok=True)
        _finish(store, "b", ok=False)

        report = TaskMonitor(store).get_report()
        assert report["success_rate"] == 0.75
        assert report["health_assessment"]["overall"] == "warning"

    def test_many_pending_tasks_warn(self, store):
        for _ in range(11):
            store.add("noop.success", delay_ms=60_000)

        health = TaskMonitor(store).get_report()["health_assessment"]
        assert health["overall"] == "warning"
        assert health["warnings"]
