import threading
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class LazyProxy(Generic[T]):
    """Deferred handle injected in place of a lazy dependency.

    The first attribute access or call resolves the target through the
    resolver closure and forwards to it; later accesses reuse the same target.
    """

    def __init__(self, resolver: Callable[[], T], dependency_type: Any) -> None:
        self._resolver = resolver
        self._dependency_type = dependency_type
        self._instance: Optional[T] = None
        self._resolved = False
        self._lock = threading.Lock()

    def _resolve(self) -> T:
        """Resolve the actual dependency."""
        if not self._resolved:
            with self._lock:
                if not self._resolved:
                    self._instance = self._resolver()
                    self._resolved = True
        return self._instance

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def __getattr__(self, name: str) -> Any:
        """Delegate attribute access to the resolved instance."""
        return getattr(self._resolve(), name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Delegate calls to the resolved instance."""
        return self._resolve()(*args, **kwargs)

    def __repr__(self) -> str:
        return f"LazyProxy[{getattr(self._dependency_type, '__name__', self._dependency_type)}]"
