"""Advisory lock state machine shared by lockable handles."""
from abc import abstractmethod
from typing import Any, Callable, Optional, Union

from filehandles.core.types import Lock


class LockState:
    """Tracks the lock held through a pair of acquire/release callables.

    Moving to a different lock always releases first and then acquires;
    there is no in-place upgrade or downgrade.
    """

    def __init__(self, acquire: Callable[[Lock], None], release: Callable[[], None]):
        self._acquire = acquire
        self._release = release
        self.current: Optional[Lock] = None

    def set(self, lock: Optional[Lock]) -> bool:
        """Move to ``lock``. Returns False when it was already held."""
        if lock == self.current:
            return False

        if lock is None or self.current is not None:
            self._release()
            self.current = None

        if lock is not None:
            self._acquire(lock)

        self.current = lock
        return True

    @property
    def is_locked(self) -> bool:
        return self.current is not None


class LockableHandle:
    """Lock/unlock capability for a Handle subclass.

    Concrete classes implement ``do_lock`` and ``do_unlock``; list this
    class before the Handle base.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        self._lock_state = LockState(self.do_lock, self.do_unlock)
        super().__init__(*args, **kwargs)

    def get_lock(self) -> Optional[Lock]:
        return self._lock_state.current

    @property
    def current_lock(self) -> Optional[Lock]:
        return self.get_lock()

    def set_lock(self, lock: Optional[Union[Lock, str]]):
        if lock is not None:
            lock = Lock(lock)

        if lock == self._lock_state.current:
            return self

        self._ensure_open()

        previous = self._lock_state.current
        self._info("setting_lock", "set_lock", path=self.path.path,
                   lock=lock.value if lock else None,
                   previous=previous.value if previous else None)

        self._lock_state.set(lock)

        self._debug("lock_set", "set_lock", path=self.path.path,
                    lock=lock.value if lock else None)
        return self

    def is_locked(self) -> bool:
        return self._lock_state.is_locked

    def lock(self, lock: Union[Lock, str] = Lock.EXCLUSIVE):
        return self.set_lock(lock)

    def unlock(self, close: bool = True):
        """Release the lock, then optionally close the handle.

        The close happens even when releasing the lock fails.
        """
        try:
            self.set_lock(None)
        finally:
            if close:
                self.close()
        return self

    def close(self) -> bool:
        try:
            if self._lock_state.is_locked and not self.closed:
                self.set_lock(None)
        finally:
            closed = super().close()
        return closed

    @abstractmethod
    def do_lock(self, lock: Lock) -> None:
        """Acquire ``lock`` on the underlying resource."""

    @abstractmethod
    def do_unlock(self) -> None:
        """Release whatever lock the underlying resource holds."""
