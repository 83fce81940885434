"""Integration tests for scope behaviour under concurrency."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated

from stratus_di import DIContainer, DIException, Inject, Scope, component, inject
from stratus_di.infrastructure.testing import RecordingLogger

BUILD_COUNTS = {"slow": 0}
BUILD_LOCK = threading.Lock()


@component(scope=Scope.THREAD)
class RequestContext:
    pass


@component(scope=Scope.PROTOTYPE)
class Handler:
    @inject
    def __init__(self, context: RequestContext):
        self.context = context


@component
class SlowSingleton:
    def __init__(self):
        with BUILD_LOCK:
            BUILD_COUNTS["slow"] += 1
        time.sleep(0.05)


INBOX_STARTED = threading.Event()
OUTBOX_STARTED = threading.Event()


@component
class Inbox:
    outbox: Annotated["Outbox", Inject()]

    def __init__(self):
        INBOX_STARTED.set()
        OUTBOX_STARTED.wait(timeout=5)


@component
class Outbox:
    inbox: Annotated[Inbox, Inject()]

    def __init__(self):
        OUTBOX_STARTED.set()
        INBOX_STARTED.wait(timeout=5)


def make_container():
    container = DIContainer(logger=RecordingLogger())
    container.register(RequestContext, Handler, SlowSingleton)
    return container


class TestThreadScope:
    """Test thread-scoped components."""

    def test_same_thread_gets_same_instance(self):
        """Test that repeated resolution on one thread is stable."""
        container = make_container()

        first = container.get(RequestContext)

        assert container.get(RequestContext) is first
        assert container.get(Handler).context is first

    def test_threads_get_distinct_instances(self):
        """Test that each thread sees its own instance."""
        container = make_container()
        seen = {}
        barrier = threading.Barrier(3)

        def worker(index):
            barrier.wait(timeout=5)
            first = container.get(RequestContext)
            second = container.get(Handler).context
            seen[index] = (first, second)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert all(first is second for first, second in seen.values())
        assert len({id(first) for first, _ in seen.values()}) == 3

    def test_shutdown_drops_thread_instances(self):
        """Test that a thread gets a new instance after shutdown."""
        container = make_container()
        before = container.get(RequestContext)

        container.shutdown()

        assert container.get(RequestContext) is not before


class TestConcurrentSingleton:
    """Test singleton creation under contention."""

    def test_singleton_built_once_under_contention(self):
        """Test that racing threads share one singleton build."""
        BUILD_COUNTS["slow"] = 0
        container = make_container()

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: container.get(SlowSingleton), range(16)))

        assert BUILD_COUNTS["slow"] == 1
        assert all(result is results[0] for result in results)
        assert container.stats().singletons == 1


class TestCrossThreadCycles:
    """Test cycles whose halves are built on different threads."""

    def test_cycle_split_across_threads_fails_instead_of_hanging(self):
        """Test that two threads each owning one half of a cycle both get an error."""
        INBOX_STARTED.clear()
        OUTBOX_STARTED.clear()
        container = DIContainer(logger=RecordingLogger())
        container.register(Inbox, Outbox)
        outcome = {}

        def resolve(key, component_type):
            try:
                outcome[key] = container.get(component_type)
            except DIException as e:
                outcome[key] = e

        threads = [
            threading.Thread(target=resolve, args=("inbox", Inbox), daemon=True),
            threading.Thread(target=resolve, args=("outbox", Outbox), daemon=True),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert [thread.is_alive() for thread in threads] == [False, False]
        assert isinstance(outcome["inbox"], DIException)
        assert isinstance(outcome["outbox"], DIException)
