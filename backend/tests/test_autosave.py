"""Tests for debounced draft autosave."""
import asyncio
import logging

from storefront.application.checkout.autosave import DebouncedTask, DraftAutosaver
from conftest import FakeDraftStore

DELAY = 0.02


async def settle(autosaver):
    await autosaver.wait()
    await asyncio.sleep(0)


async def test_debounced_task_runs_once_per_quiet_period():
    calls = []

    async def callback():
        calls.append(len(calls))

    task = DebouncedTask(DELAY, callback)
    for _ in range(5):
        task.schedule()
        await asyncio.sleep(DELAY / 4)
    assert task.pending
    await task.wait()

    assert calls == [0]
    assert not task.pending


async def test_debounced_task_cancel_drops_pending_call():
    calls = []

    async def callback():
        calls.append(1)

    task = DebouncedTask(DELAY, callback)
    task.schedule()
    task.cancel()
    await task.wait()
    assert calls == []


async def test_burst_of_edits_creates_one_draft():
    store = FakeDraftStore()
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)

    for quantity in range(1, 6):
        autosaver.notify({"quantity": quantity})
    await settle(autosaver)

    assert [w[0] for w in store.writes] == ["create"]
    assert store.writes[0][2] == {"quantity": 5}


async def test_later_edits_update_the_same_draft():
    store = FakeDraftStore()
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)

    autosaver.notify({"quantity": 1})
    await settle(autosaver)
    autosaver.notify({"quantity": 2})
    await settle(autosaver)

    assert [w[0] for w in store.writes] == ["create", "update"]
    assert len(store.rows) == 1
    assert store.rows[autosaver.draft_id]["snapshot"] == {"quantity": 2}


async def test_existing_open_draft_is_reused():
    store = FakeDraftStore()
    existing = store.seed("sess-1", {"quantity": 1})
    store.seed("sess-1", {"old": True}, converted=True)
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)

    autosaver.notify({"quantity": 3})
    await settle(autosaver)

    assert store.writes == [("update", existing, {"quantity": 3})]


async def test_flush_writes_immediately():
    store = FakeDraftStore()
    autosaver = DraftAutosaver(store, "sess-1", delay=10)

    autosaver.notify({"quantity": 1})
    await autosaver.flush()

    assert [w[0] for w in store.writes] == ["create"]


async def test_failed_write_is_logged_and_retried(caplog):
    store = FakeDraftStore()
    store.fail_next = 1
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)

    with caplog.at_level(logging.WARNING):
        autosaver.notify({"quantity": 1})
        await settle(autosaver)

    assert store.writes == []
    assert "sess-1" in caplog.text

    autosaver.notify({"quantity": 2})
    await settle(autosaver)
    assert [w[0] for w in store.writes] == ["create"]


async def test_nothing_is_written_after_conversion():
    store = FakeDraftStore()
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)
    autosaver.notify({"quantity": 1})
    await autosaver.flush()

    autosaver.notify({"quantity": 2})
    await autosaver.mark_converted()
    autosaver.notify({"quantity": 3})
    await asyncio.sleep(DELAY * 2)
    await autosaver.flush()

    assert [w[0] for w in store.writes] == ["create", "convert"]
    assert store.rows[autosaver.draft_id]["converted"] is True


async def test_conversion_finds_an_unsaved_sessions_draft():
    store = FakeDraftStore()
    existing = store.seed("sess-9")
    autosaver = DraftAutosaver(store, "sess-9", delay=DELAY)

    await autosaver.mark_converted()

    assert store.writes == [("convert", existing, None)]


async def test_closed_autosaver_ignores_notifications():
    store = FakeDraftStore()
    autosaver = DraftAutosaver(store, "sess-1", delay=DELAY)
    autosaver.notify({"quantity": 1})
    autosaver.close()
    await asyncio.sleep(DELAY * 2)
    autosaver.notify({"quantity": 2})
    await asyncio.sleep(DELAY * 2)
    assert store.writes == []
