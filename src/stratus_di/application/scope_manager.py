import threading
from typing import Any, Callable, Dict, Optional, Type

from stratus_di.domain import CellState, IScopeManager, RecursionDetectedError, Scope, ScopeError


class _Cell:
    """One (scope, type) cache slot moving from creating to present.

    Concurrent callers block on ``_published`` until the owner either
    publishes an instance or abandons the cell after a failed build.
    """

    __slots__ = ("owner", "state", "instance", "_published")

    def __init__(self, owner: int) -> None:
        self.owner = owner
        self.state = CellState.CREATING
        self.instance: Any = None
        self._published = threading.Event()

    def publish(self, instance: Any) -> None:
        self.instance = instance
        self.state = CellState.PRESENT
        self._published.set()

    def abandon(self) -> None:
        self.state = CellState.ABSENT
        self._published.set()

    def wait(self) -> None:
        self._published.wait()


class ScopeManager(IScopeManager):
    """Manages instance caching for singleton, prototype and thread scopes.

    Each cacheable (scope, type) pair is a cell going ``absent -> creating ->
    present``. The first caller to install a ``creating`` cell builds the
    instance; callers on other threads wait for it to be published, while a
    re-entry from the owning thread is reported as recursion. A thread about
    to wait first follows the chain of owners and the cells they wait on; if
    the chain leads back to itself the wait could never end, and recursion is
    reported instead.

    Attributes:
        _singleton_cells: Cells shared by every thread.
        _thread_local: Per-thread storage holding thread-scope cells.
        _waiting: Thread ident to the cell that thread is blocked on.
    """

    def __init__(self) -> None:
        """Initialize the scope manager with empty caches."""
        self._singleton_cells: Dict[Type, _Cell] = {}
        self._thread_local = threading.local()
        self._waiting: Dict[int, _Cell] = {}
        self._wait_lock = threading.Lock()

    def _thread_cells(self) -> Dict[Type, _Cell]:
        """Get the current thread's thread-scope cells.

        Returns:
            The cell map for the current thread.
        """
        if not hasattr(self._thread_local, "cells"):
            self._thread_local.cells = {}
        return self._thread_local.cells

    def _cells_for(self, scope: Scope) -> Optional[Dict[Type, _Cell]]:
        if scope == Scope.SINGLETON:
            return self._singleton_cells
        if scope == Scope.THREAD:
            return self._thread_cells()
        if scope == Scope.PROTOTYPE:
            return None
        raise ScopeError(f"Unknown scope: {scope}")

    def get_or_create(self, scope: Scope, component_type: Type, builder: Callable[[], Any]) -> Any:
        """Get the cached instance or build one according to ``scope``.

        Args:
            scope: Lifetime policy of the component.
            component_type: Cache key within the scope.
            builder: Function to create a new instance if needed.

        Returns:
            Instance according to scope rules:
            - Singleton: the process-wide cached instance, built once.
            - Thread: the instance cached for the calling thread, built once per thread.
            - Prototype: a new instance on every call.

        Raises:
            RecursionDetectedError: If the calling thread is already creating this
                cell, or waiting for it would close a cycle of waiting threads.
            ScopeError: If ``scope`` is not a known scope tag.

        Example:
            >>> manager = ScopeManager()
            >>> first = manager.get_or_create(Scope.SINGLETON, Database, Database)
            >>> first is manager.get_or_create(Scope.SINGLETON, Database, Database)
            True
        """
        cells = self._cells_for(scope)
        if cells is None:
            return builder()

        caller = threading.get_ident()
        while True:
            cell = cells.get(component_type)
            if cell is not None:
                if cell.state == CellState.PRESENT:
                    return cell.instance
                if cell.owner == caller:
                    raise RecursionDetectedError(component_type)
                self._wait_for(cell, caller, component_type)
                continue

            cell = _Cell(caller)
            if cells.setdefault(component_type, cell) is not cell:
                continue

            try:
                instance = builder()
            except BaseException:
                # Release the cell so a later call may retry
                if cells.get(component_type) is cell:
                    del cells[component_type]
                cell.abandon()
                raise
            cell.publish(instance)
            return instance

    def _wait_for(self, cell: _Cell, caller: int, component_type: Type) -> None:
        """Block until ``cell`` is published or abandoned.

        Raises:
            RecursionDetectedError: If the owner of ``cell`` is, directly or
                through other waiting threads, waiting on a cell ``caller`` owns.
        """
        with self._wait_lock:
            owner = cell.owner
            visited = set()
            while owner not in visited:
                if owner == caller:
                    raise RecursionDetectedError(component_type)
                visited.add(owner)
                blocking = self._waiting.get(owner)
                if blocking is None or blocking.state != CellState.CREATING:
                    break
                owner = blocking.owner
            self._waiting[caller] = cell
        try:
            cell.wait()
        finally:
            with self._wait_lock:
                self._waiting.pop(caller, None)

    def state_of(self, scope: Scope, component_type: Type) -> CellState:
        """Report the state of a cell in the calling thread's view."""
        cells = self._cells_for(scope)
        cell = cells.get(component_type) if cells is not None else None
        return cell.state if cell is not None else CellState.ABSENT

    def singleton_count(self) -> int:
        return sum(1 for cell in list(self._singleton_cells.values()) if cell.state == CellState.PRESENT)

    def clear(self) -> None:
        """Drop every cached instance, singleton and thread-scoped.

        Used on container shutdown.
        """
        self._singleton_cells.clear()
        self._thread_local = threading.local()
