"""Unit tests for the state store and its lock."""

import fcntl
import json
import os
from unittest.mock import patch

import pytest

from minhypr.core.errors import CorruptState, LockTimeout
from minhypr.core.locking import StateLock
from minhypr.core.store import StateStore
from minhypr.models.state import MinimizedSet
from minhypr.models.window import ClientWindow


def make_window(handle="0xa1", app_class="firefox"):
    return ClientWindow(handle=handle, title="Title", app_class=app_class, workspace="1")


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "windows.json"


class TestLoadSave:
    """Test load(), save() and corruption recovery."""

    def test_missing_file_is_empty_set(self, state_file):
        state = StateStore(state_file).load()
        assert state.count == 0
        assert state.next_id == 1

    def test_save_and_load(self, state_file):
        store = StateStore(state_file)
        state = MinimizedSet()
        state.add(make_window(), icon="x", source_workspace="1", minimized_at=10.0)

        store.save(state)

        assert store.load() == state
        data = json.loads(state_file.read_text())
        assert data["format"] == "minhypr-state"
        assert data["version"] == 1
        assert data["next_id"] == 2
        assert data["windows"][0]["window_handle"] == "0xa1"

    def test_unknown_fields_are_ignored(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({
            "format": "minhypr-state",
            "version": 1,
            "next_id": 2,
            "written_by": "minhypr 9.0",
            "windows": [{"id": 1, "window_handle": "0xa1", "title": "t", "pinned": True}],
        }))

        state = StateStore(state_file).load()

        assert state.get(1).window_handle == "0xa1"

    def test_garbage_raises_corrupt_state(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("{not json")

        with pytest.raises(CorruptState):
            StateStore(state_file).load()

    def test_invalid_utf8_raises_corrupt_state(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_bytes(b"\xff\xfe garbage")

        with pytest.raises(CorruptState, match="UTF-8"):
            StateStore(state_file).load()

    def test_duplicate_handles_raise_corrupt_state(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text(json.dumps({
            "next_id": 3,
            "windows": [
                {"id": 1, "window_handle": "0xa1"},
                {"id": 2, "window_handle": "0xa1"},
            ],
        }))

        with pytest.raises(CorruptState):
            StateStore(state_file).load()

    def test_empty_file_raises_corrupt_state(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("")

        with pytest.raises(CorruptState, match="empty"):
            StateStore(state_file).load()

    def test_corrupt_file_is_backed_up(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("[1, 2")

        state = StateStore(state_file).load_or_recover()

        assert state.count == 0
        backups = list(state_file.parent.glob("windows.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text() == "[1, 2"

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_recovered_under_lock(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_bytes(b"\xff\xfe garbage")
        store = StateStore(state_file)

        async with store.locked() as state:
            assert state.count == 0

        assert store.load() == MinimizedSet()
        backups = list(state_file.parent.glob("windows.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_bytes() == b"\xff\xfe garbage"

    @pytest.mark.asyncio
    async def test_failed_backup_leaves_corrupt_file_in_place(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("not json")
        store = StateStore(state_file)

        with patch("minhypr.core.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(CorruptState, match="backup failed"):
                async with store.locked():
                    pass

        assert state_file.read_text() == "not json"
        assert list(state_file.parent.glob("windows.json.corrupt-*")) == []

    def test_failed_copy_does_not_touch_file(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("not json")

        with patch("minhypr.core.store.shutil.copy2", side_effect=OSError("disk full")):
            state = StateStore(state_file).load_or_recover()

        assert state.count == 0
        assert state_file.read_text() == "not json"

    def test_failed_save_keeps_previous_file(self, state_file):
        store = StateStore(state_file)
        original = MinimizedSet()
        original.add(make_window("0xa1"))
        store.save(original)

        changed = original.model_copy(deep=True)
        changed.add(make_window("0xb2"))
        with patch("minhypr.core.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                store.save(changed)

        assert store.load() == original
        assert list(state_file.parent.glob(".windows-*")) == []


class TestWithLock:
    """Test the lock-scoped transaction helpers."""

    @pytest.mark.asyncio
    async def test_with_lock_persists_changes(self, state_file):
        store = StateStore(state_file)

        async def add_entry(state):
            entry = state.add(make_window())
            return state, entry.id

        result = await store.with_lock(add_entry)

        assert result == 1
        assert store.load().get(1) is not None

    @pytest.mark.asyncio
    async def test_with_lock_skips_write_when_unchanged(self, state_file):
        store = StateStore(state_file)

        async def read_only(state):
            return state, state.count

        assert await store.with_lock(read_only) == 0
        assert not state_file.exists()

    @pytest.mark.asyncio
    async def test_with_lock_writes_nothing_on_error(self, state_file):
        store = StateStore(state_file)

        async def failing(state):
            state.add(make_window())
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await store.with_lock(failing)

        assert not state_file.exists()
        lock = StateLock(store.lock_file, timeout=0.1)
        await lock.acquire()
        lock.release()

    @pytest.mark.asyncio
    async def test_locked_replaces_corrupt_file(self, state_file):
        state_file.parent.mkdir(parents=True)
        state_file.write_text("garbage")
        store = StateStore(state_file)

        async with store.locked() as state:
            assert state.count == 0

        assert store.load().count == 0
        assert len(list(state_file.parent.glob("windows.json.corrupt-*"))) == 1


class TestStateLock:
    """Test StateLock acquisition, timeout and stale reclaim."""

    @pytest.mark.asyncio
    async def test_acquire_records_pid(self, tmp_path):
        lock = StateLock(tmp_path / "windows.lock")

        async with lock:
            assert lock.is_held
            assert lock.read_holder() == os.getpid()

        assert not lock.is_held

    @pytest.mark.asyncio
    async def test_live_holder_times_out(self, tmp_path):
        path = tmp_path / "windows.lock"
        holder = StateLock(path)
        await holder.acquire()
        try:
            waiter = StateLock(path, timeout=0.2, poll_interval=0.02)
            with pytest.raises(LockTimeout) as exc_info:
                await waiter.acquire()
            assert exc_info.value.holder_pid == os.getpid()
        finally:
            holder.release()

    @pytest.mark.asyncio
    async def test_waiter_gets_lock_after_release(self, tmp_path):
        path = tmp_path / "windows.lock"
        holder = StateLock(path)
        await holder.acquire()
        holder.release()

        waiter = StateLock(path, timeout=0.2)
        await waiter.acquire()
        assert waiter.is_held
        waiter.release()

    @pytest.mark.asyncio
    async def test_dead_holder_is_reclaimed(self, tmp_path):
        path = tmp_path / "windows.lock"
        # Simulate a lock whose recorded holder has exited while the
        # descriptor survives (e.g. inherited by a child process)
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
        fcntl.flock(fd, fcntl.LOCK_EX)
        os.write(fd, b"999999\n")
        try:
            waiter = StateLock(path, timeout=0.1, poll_interval=0.02)
            with patch("minhypr.core.locking.psutil.pid_exists", return_value=False):
                await waiter.acquire()
            assert waiter.is_held
            assert waiter.read_holder() == os.getpid()
            waiter.release()
        finally:
            os.close(fd)

