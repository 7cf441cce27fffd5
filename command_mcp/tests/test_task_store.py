"""
Tests for the background task store.
"""
import pytest

from command_mcp.core.async_ops import TaskStatus, TaskStore


class TestTaskStore:
    """Test task creation, transitions and bookkeeping."""

    def test_add_creates_pending_task(self, store, clock):
        task = store.add("noop.success", ["a"], delay_ms=250)

        assert task.status == TaskStatus.PENDING
        assert task.arguments == ("a",)
        assert task.delay_ms == 250
        assert task.created_at == clock.now
        assert task.task_id == f"bg_task_1_{int(clock.now * 1000)}"
        assert store.contains(task.task_id)

    def test_task_ids_are_unique(self, store):
        ids = {store.add("noop.success").task_id for _ in range(50)}
        assert len(ids) == 50

    def test_negative_delay_rejected(self, store):
        with pytest.raises(ValueError):
            store.add("noop.success", delay_ms=-1)

    def test_reads_return_copies(self, store):
        task = store.add("noop.success")
        copy = store.get(task.task_id)
        copy.status = TaskStatus.FAILED
        assert store.get(task.task_id).status == TaskStatus.PENDING

    def test_is_due(self, store, clock):
        task = store.add("noop.success", delay_ms=100)
        assert not task.is_due(clock.now)
        clock.advance_ms(99)
        assert not task.is_due(clock.now)
        clock.advance_ms(1)
        assert task.is_due(clock.now)

    def test_claim_complete_and_fail(self, store):
        ok = store.add("noop.success")
        bad = store.add("noop.fail")

        assert store.claim(ok.task_id).status == TaskStatus.RUNNING
        assert store.claim(ok.task_id) is None
        completed = store.complete(ok.task_id, {"value": 1})
        assert completed.status == TaskStatus.COMPLETED
        assert completed.result == {"value": 1}
        assert completed.completed_at is not None

        store.claim(bad.task_id)
        failed = store.fail(bad.task_id, "boom")
        assert failed.status == TaskStatus.FAILED
        assert failed.error == "boom"

    def test_complete_ignored_unless_running(self, store):
        task = store.add("noop.success")
        assert store.complete(task.task_id, "x") is None
        assert store.get(task.task_id).status == TaskStatus.PENDING

        store.claim(task.task_id)
        store.cancel(task.task_id)
        assert store.complete(task.task_id, "x") is None
        assert store.fail(task.task_id, "late") is None
        assert store.get(task.task_id).status == TaskStatus.CANCELLED

    def test_complete_unknown_task_is_noop(self, store):
        assert store.complete("bg_task_missing", "x") is None
        assert len(store) == 0

    def test_cancel(self, store):
        pending = store.add("noop.success")
        running = store.add("noop.success")
        done = store.add("noop.success")
        store.claim(running.task_id)
        store.claim(done.task_id)
        store.complete(done.task_id, None)

        assert store.cancel(pending.task_id)
        assert store.cancel(running.task_id)
        assert not store.cancel(done.task_id)
        assert not store.cancel("unknown")
        assert store.get(pending.task_id).status == TaskStatus.CANCELLED
        assert store.get(done.task_id).status == TaskStatus.COMPLETED

    def test_pending_in_order_breaks_ties_by_creation(self, store, clock):
        first = store.add("noop.success")
        second = store.add("noop.success")
        clock.advance_ms(-10)
        earliest = store.add("noop.success")

        order = [t.task_id for t in store.pending_in_order()]
        assert order == [earliest.task_id, first.task_id, second.task_id]

    def test_purge_pending_with_predicate(self, store):
        keep = store.add("a.run")
        drop = store.add("b.run")
        running = store.add("b.run")
        store.claim(running.task_id)

        purged = store.purge_pending(lambda t: t.command.startswith("b."))

        assert [t.task_id for t in purged] == [drop.task_id]
        assert purged[0].status == TaskStatus.CANCELLED
        assert store.contains(keep.task_id)
        assert not store.contains(drop.task_id)
        assert store.get(running.task_id).status == TaskStatus.RUNNING

    def test_clear_completed_keeps_active_tasks(self, store):
        pending = store.add("noop.success")
        running = store.add("noop.success")
        done = store.add("noop.success")
        failed = store.add("noop.fail")
        cancelled = store.add("noop.success")
        store.claim(running.task_id)
        store.claim(done.task_id)
        store.complete(done.task_id, "ok")
        store.claim(failed.task_id)
        store.fail(failed.task_id, "boom")
        store.cancel(cancelled.task_id)

        assert store.clear_completed() == 3
        remaining = {t.task_id for t in store.all()}
        assert remaining == {pending.task_id, running.task_id}

    def test_clear_all(self, store):
        store.add("noop.success")
        task = store.add("noop.success")
        store.claim(task.task_id)

        assert store.clear_all() == 2
        assert len(store) == 0

    def test_stats_sum_to_total(self, store):
        a = store.add("noop.success")
        b = store.add("noop.success")
        c = store.add("noop.fail")
        store.add("noop.success")
        store.claim(a.task_id)
        store.claim(b.task_id)
        store.complete(b.task_id, "ok")
        store.claim(c.task_id)
        store.fail(c.task_id, "boom")

        stats = store.get_stats()
        assert stats == {
            "total": 4, "pending": 1, "running": 1,
            "completed": 1, "failed": 1, "cancelled": 0,
        }
        assert sum(v for k, v in stats.items() if k != "total") == stats["total"]

    def test_to_dict_shape(self, store):
        task = store.add("noop.success", ["x"])
        store.claim(task.task_id)
        data = store.complete(task.task_id, "ok").to_dict()

        assert data["status"] == "completed"
        assert data["result"] == "ok"
        assert "error" not in data
        assert data["arguments"] == ["x"]
        assert data["execution_time"] == 0

    def test_default_clock(self):
        task = TaskStore().add("noop.success")
        assert task.created_at > 0

    def test_next_due_at(self, store, clock):
        assert store.next_due_at() is None

        late = store.add("noop.success", delay_ms=5_000)
        early = store.add("noop.success", delay_ms=1_000)
        assert store.next_due_at() == early.created_at + 1.0

        store.cancel(early.task_id)
        assert store.next_due_at() == late.created_at + 5.0

    def test_subscribers_called_on_add(self, store):
        calls = []
        store.subscribe(lambda: calls.append(len(store)))

        store.add("noop.success")
        store.add("noop.success")
        assert calls == [1, 2]

    def test_is_terminal(self, store):
        task = store.add("noop.success")
        assert not task.is_terminal
        assert not store.claim(task.task_id).is_terminal
        assert store.complete(task.task_id, "ok").is_terminal
