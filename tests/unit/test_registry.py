"""
Unit tests for the handler registry.
"""

import threading
import pytest

from proxyhandler.handlers import FunctionHandler
from proxyhandler.http import ok
from proxyhandler.registry import HandlerRegistry, UnregisteredMethodError


def make_handler(name: str) -> FunctionHandler:
    """Helper to create a handler answering with its own name."""
    return FunctionHandler(lambda req, ct, acc, ctx: ok(name), name=name)


class TestHandlerRegistry:
    """Tests for HandlerRegistry."""

    def test_register_and_resolve(self):
        registry = HandlerRegistry()
        handler = make_handler("get")
        registry.register("GET", handler.as_factory())

        assert registry.is_registered("get")
        assert registry.resolve(None, "get") is handler

    def test_case_insensitive(self):
        """Test that any case of a method finds the same factory."""
        registry = HandlerRegistry()
        registry.register("Post", make_handler("post").as_factory())

        assert registry.is_registered("POST")
        assert registry.is_registered("post")
        assert "pOsT" in registry
        assert registry.methods == ["post"]

    def test_initial_mapping_lowercased(self):
        registry = HandlerRegistry({"GET": make_handler("a").as_factory()})
        assert registry.methods == ["get"]

    def test_last_registration_wins(self):
        registry = HandlerRegistry()
        registry.register("get", make_handler("first").as_factory())
        registry.register("GET", make_handler("second").as_factory())

        assert len(registry) == 1
        assert registry.resolve(None, "get").name == "second"

    def test_factory_receives_configuration(self):
        """Test that the configuration is handed to the factory."""
        seen = []

        def factory(configuration):
            seen.append(configuration)
            return make_handler("get")

        registry = HandlerRegistry({"get": factory})
        registry.resolve({"table": "orders"}, "GET")
        registry.resolve({"table": "users"}, "GET")

        assert seen == [{"table": "orders"}, {"table": "users"}]

    def test_resolve_unregistered(self):
        registry = HandlerRegistry()
        with pytest.raises(UnregisteredMethodError) as exc_info:
            registry.resolve(None, "DELETE")
        assert exc_info.value.method == "delete"
        assert isinstance(exc_info.value, LookupError)

    def test_not_registered(self):
        registry = HandlerRegistry()
        assert not registry.is_registered("get")
        assert 42 not in registry

    def test_register_chaining(self):
        registry = (HandlerRegistry()
            .register("get", make_handler("a").as_factory())
            .register("put", make_handler("b").as_factory()))
        assert list(registry) == ["get", "put"]

    def test_concurrent_registration(self):
        """Test that concurrent registrations are all kept."""
        registry = HandlerRegistry()
        methods = [f"method{i}" for i in range(50)]
        barrier = threading.Barrier(len(methods))

        def register(method):
            barrier.wait()
            registry.register(method, make_handler(method).as_factory())

        threads = [threading.Thread(target=register, args=(m,)) for m in methods]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert registry.methods == sorted(methods)

    def test_lookup_during_registration(self):
        """Test that readers see a consistent registry while writers register."""
        registry = HandlerRegistry({"get": make_handler("get").as_factory()})
        errors = []
        done = threading.Event()

        def read():
            while not done.is_set():
                if not registry.is_registered("get"):
                    errors.append("get vanished")
                registry.resolve(None, "get")

        reader = threading.Thread(target=read)
        reader.start()
        for i in range(200):
            registry.register(f"m{i}", make_handler("x").as_factory())
        done.set()
        reader.join()

        assert errors == []
        assert len(registry) == 201
