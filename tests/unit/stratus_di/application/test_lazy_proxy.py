"""Unit tests for LazyProxy."""

import threading

from stratus_di.application.lazy_proxy import LazyProxy


class Mailer:
    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)
        return len(self.sent)

    def __call__(self, message):
        return self.send(message)


class TestLazyProxy:
    """Test cases for LazyProxy."""

    def test_resolution_is_deferred_until_first_use(self):
        """Test that the resolver does not run on construction."""
        calls = []

        def resolver():
            calls.append(1)
            return Mailer()

        proxy = LazyProxy(resolver, Mailer)

        assert calls == []
        assert proxy.is_resolved is False

        assert proxy.send("hello") == 1

        assert calls == [1]
        assert proxy.is_resolved is True

    def test_target_resolved_once(self):
        """Test that later accesses reuse the same target."""
        calls = []

        def resolver():
            calls.append(1)
            return Mailer()

        proxy = LazyProxy(resolver, Mailer)
        proxy.send("a")
        proxy.send("b")

        assert calls == [1]
        assert proxy.sent == ["a", "b"]

    def test_call_is_forwarded(self):
        """Test that calling the proxy calls the target."""
        proxy = LazyProxy(Mailer, Mailer)
        assert proxy("hi") == 1

    def test_repr_names_the_dependency(self):
        """Test the proxy representation without resolving."""
        proxy = LazyProxy(Mailer, Mailer)

        assert repr(proxy) == "LazyProxy[Mailer]"
        assert proxy.is_resolved is False

    def test_concurrent_first_use_resolves_once(self):
        """Test that racing threads share one resolution."""
        calls = []
        barrier = threading.Barrier(4)

        def resolver():
            calls.append(1)
            return Mailer()

        proxy = LazyProxy(resolver, Mailer)

        def worker():
            barrier.wait(timeout=5)
            proxy.send("x")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert calls == [1]
        assert len(proxy.sent) == 4
