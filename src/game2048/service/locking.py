import threading
import logging
from typing import Generic, Optional, TypeVar

from ..errors import FeatureNotEnabled, GameError, LockPoisoned

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PoisonableLock:
    """
    Mutual exclusion guard that refuses further use after a holder failed.

    Expected game errors (``GameError``) leave the state consistent and do not
    poison the lock; any other exception escaping the ``with`` block does.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.poisoned = False
        self.poison_reason: Optional[str] = None

    def __enter__(self):
        self._lock.acquire()
        if self.poisoned:
            self._lock.release()
            raise LockPoisoned(f"a previous command failed while holding the lock: {self.poison_reason}")
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            if exc_type is not None and not issubclass(exc_type, GameError):
                self.poisoned = True
                self.poison_reason = f"{exc_type.__name__}: {exc}"
                logger.error("Lock poisoned by %s", self.poison_reason)
        finally:
            self._lock.release()
        return False

    def clear(self) -> None:
        """Explicitly accept the current state and allow commands again."""
        with self._lock:
            self.poisoned = False
            self.poison_reason = None


class Feature(Generic[T]):
    """
    Optional component that is either disabled or enabled with a value.

    Disabling drops the only reference the feature holds.
    """

    def __init__(self, name: str):
        self.name = name
        self._value: Optional[T] = None
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self, value: T) -> None:
        self._value = value
        self._enabled = True

    def disable(self) -> Optional[T]:
        """Disable the feature and hand back the value it held, if any."""
        value, self._value, self._enabled = self._value, None, False
        return value

    def get(self) -> T:
        if not self._enabled:
            raise FeatureNotEnabled(f"{self.name} is not enabled")
        return self._value
