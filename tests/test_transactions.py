"""Tests for locked transactions on files and directories"""

import fcntl
import os
import threading
import time

import pytest

from filehandles.core.types import Lock
from filehandles.handles.lockable_directory import LockableDirectoryHandle
from filehandles.handles.regular_file import RegularFileHandle


class WorkFailed(Exception):
    pass


class TestRegularFileTransaction:
    """RegularFile.transaction locks, runs work and always cleans up"""

    def test_returns_work_result(self, regular_file):
        assert regular_file.transaction(lambda handle: handle.get_content()) == b"hello\nworld\n"

    def test_lock_held_during_work(self, regular_file, flock_probe):
        seen = {}

        def work(handle):
            seen["lock"] = handle.get_lock()
            seen["free"] = flock_probe(regular_file.path)

        regular_file.transaction(work)

        assert seen == {"lock": Lock.EXCLUSIVE, "free": False}

    def test_shared_transaction(self, regular_file, flock_probe):
        def work(handle):
            return flock_probe(regular_file.path, fcntl.LOCK_SH), flock_probe(regular_file.path)

        assert regular_file.transaction(work, "r", Lock.SHARED) == (True, False)

    def test_failing_work_unlocks_and_closes(self, regular_file, flock_probe):
        handles = []

        def work(handle):
            handles.append(handle)
            raise WorkFailed()

        with pytest.raises(WorkFailed):
            regular_file.transaction(work)

        handle = handles[0]
        assert handle.closed
        assert not handle.is_locked()
        assert flock_probe(regular_file.path)

    def test_write_transaction(self, regular_file):
        written = regular_file.transaction(lambda handle: handle.write("replaced"), "w")

        assert written == 8
        assert regular_file.get_content() == b"replaced"

    def test_set_content_waits_for_shared_reader(self, regular_file):
        reading = threading.Event()
        seen = {}

        def read(handle):
            reading.set()
            # Give the writer time to open the file and block on the lock
            time.sleep(0.3)
            seen["size"] = os.fstat(handle.fileno()).st_size
            seen["content"] = handle.get_content()

        reader = threading.Thread(target=regular_file.transaction, args=(read, "r", Lock.SHARED))
        reader.start()
        assert reading.wait(5)

        writer = threading.Thread(target=regular_file.set_content, args=(b"new content",))
        writer.start()
        reader.join(5)
        writer.join(5)

        assert seen == {"size": 12, "content": b"hello\nworld\n"}
        assert regular_file.get_content() == b"new content"

    def test_create_mode_keeps_content_until_written(self, regular_file):
        with regular_file.open("c") as handle:
            assert regular_file.get_size() == 12
            handle.lock()
            handle.set_content("short")

        assert regular_file.get_content() == b"short"

    def test_create_mode_creates_missing_file(self, tmp_path):
        path = tmp_path / "created"

        with RegularFileHandle(path, "c+") as handle:
            handle.write("abc")
            handle.set_position(0)
            assert handle.read(3) == b"abc"

        assert path.read_bytes() == b"abc"

    def test_locked_context_manager(self, regular_file, flock_probe):
        with regular_file.locked("r", Lock.EXCLUSIVE) as handle:
            assert isinstance(handle, RegularFileHandle)
            assert not flock_probe(regular_file.path)

        assert handle.closed
        assert flock_probe(regular_file.path)


class TestLockableDirectoryTransaction:
    """Directory locking through the sentinel file"""

    def test_sentinel_removed_after_each_transaction(self, lockable_directory):
        sentinel = lockable_directory.path.append(".lock")

        for _ in range(2):
            present = lockable_directory.transaction(lambda handle: sentinel.exists())
            assert present
            assert not sentinel.exists()

    def test_sentinel_removed_when_work_fails(self, lockable_directory):
        def work(handle):
            raise WorkFailed()

        with pytest.raises(WorkFailed):
            lockable_directory.transaction(work)

        assert not lockable_directory.path.append(".lock").exists()

    def test_sentinel_locked_during_transaction(self, lockable_directory, flock_probe):
        sentinel = lockable_directory.path.append(".lock")

        def work(handle):
            return flock_probe(sentinel)

        assert lockable_directory.transaction(work) is False

    def test_custom_sentinel_name(self, lockable_directory):
        seen = []

        lockable_directory.transaction(
            lambda handle: seen.append(handle.lock_file.path.basename),
            lock_filename="custom.lck",
        )

        assert seen == ["custom.lck"]
        assert not lockable_directory.path.append("custom.lck").exists()

    def test_kept_sentinel_is_relockable(self, lockable_directory, flock_probe):
        sentinel = lockable_directory.path.append(".lock")

        lockable_directory.transaction(lambda handle: None, remove_lock_file_on_unlock=False)
        assert sentinel.exists()
        assert flock_probe(sentinel)

        held = lockable_directory.transaction(
            lambda handle: flock_probe(sentinel), remove_lock_file_on_unlock=False
        )

        assert held is False
        assert sentinel.exists()
        assert flock_probe(sentinel)

    def test_waiter_relocks_replaced_sentinel(self, lockable_directory, flock_probe):
        sentinel = lockable_directory.path.append(".lock")
        first = lockable_directory.open()
        first.lock()
        acquired = threading.Event()
        release = threading.Event()
        seen = {}

        def wait_for_lock():
            with lockable_directory.open() as second:
                second.lock()
                seen["inode"] = second.lock_file_handle.get_stat().inode
                acquired.set()
                release.wait(5)
                second.unlock(close=False)

        waiter = threading.Thread(target=wait_for_lock)
        waiter.start()
        # Let the waiter open the current sentinel and block on it
        time.sleep(0.3)
        first.unlock()
        assert acquired.wait(5)

        try:
            assert sentinel.exists()
            assert seen["inode"] == os.stat(sentinel).st_ino
            assert not flock_probe(sentinel)
        finally:
            release.set()
            waiter.join(5)

        assert not sentinel.exists()

    def test_shared_holder_keeps_sentinel_alive(self, lockable_directory, flock_probe):
        sentinel = lockable_directory.path.append(".lock")
        first = lockable_directory.open()
        second = lockable_directory.open()
        first.lock(Lock.SHARED)
        second.lock(Lock.SHARED)

        first.unlock()

        assert sentinel.exists()
        assert not flock_probe(sentinel)

        second.unlock()

        assert not sentinel.exists()

    def test_shared_directory_lock(self, lockable_directory, flock_probe):
        sentinel = lockable_directory.path.append(".lock")

        def work(handle):
            return flock_probe(sentinel, fcntl.LOCK_SH), flock_probe(sentinel)

        assert lockable_directory.transaction(work, lock=Lock.SHARED) == (True, False)


class TestLockableDirectoryHandle:
    """Lazy sentinel handle lifecycle"""

    def test_sentinel_handle_opened_lazily(self, lockable_directory):
        with lockable_directory.open() as handle:
            assert isinstance(handle, LockableDirectoryHandle)
            assert not lockable_directory.path.append(".lock").exists()

            first = handle.lock_file_handle
            assert handle.lock_file_handle is first
            assert lockable_directory.path.append(".lock").exists()

    def test_sentinel_handle_recreated_after_removal(self, lockable_directory):
        handle = lockable_directory.open()
        handle.lock()
        first = handle.lock_file_handle

        handle.unlock(close=False)
        assert first.closed

        handle.lock()
        second = handle.lock_file_handle
        assert second is not first
        assert not second.closed
        assert lockable_directory.path.append(".lock").exists()

        handle.unlock()
        assert handle.closed
        assert not lockable_directory.path.append(".lock").exists()

    def test_sentinel_handle_kept_without_removal(self, lockable_directory):
        handle = lockable_directory.open(remove_lock_file_on_unlock=False)
        handle.lock()
        first = handle.lock_file_handle

        handle.unlock(close=False)
        handle.lock(Lock.SHARED)

        assert handle.lock_file_handle is first
        assert first.get_lock() is Lock.SHARED

        handle.close()
        assert first.closed

    def test_directory_lock_mirrors_sentinel_lock(self, lockable_directory):
        with lockable_directory.open() as handle:
            handle.lock(Lock.SHARED)
            assert handle.get_lock() is Lock.SHARED
            assert handle.lock_file_handle.get_lock() is Lock.SHARED

            handle.lock(Lock.EXCLUSIVE)
            assert handle.lock_file_handle.get_lock() is Lock.EXCLUSIVE

    def test_foreach_child_skips_sentinel(self, lockable_directory):
        names = []

        lockable_directory.foreach_child(lambda child: names.append(child.path.basename))

        assert sorted(names) == ["one", "two"]
        assert not lockable_directory.path.append(".lock").exists()

    def test_foreach_child_skips_kept_sentinel(self, lockable_directory):
        lockable_directory.transaction(lambda handle: None, remove_lock_file_on_unlock=False)
        names = []

        lockable_directory.foreach_child(lambda child: names.append(child.path.basename))

        assert sorted(names) == ["one", "two"]

    def test_file_named_like_sentinel_is_hidden(self, lockable_directory):
        with open(lockable_directory.path.append(".lock").path, "w") as user_file:
            user_file.write("mine")
        with_other_sentinel = []
        with_default_sentinel = []

        lockable_directory.foreach_child(
            lambda child: with_other_sentinel.append(child.path.basename), lock_filename="other.lck"
        )
        lockable_directory.foreach_child(lambda child: with_default_sentinel.append(child.path.basename))

        assert sorted(with_other_sentinel) == [".lock", "one", "two"]
        assert sorted(with_default_sentinel) == ["one", "two"]
