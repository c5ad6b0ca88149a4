"""
Unit tests for method handlers and the access log.
"""

import json
import logging
import time
import pytest

from proxyhandler.handlers import MethodHandler, FunctionHandler, method_handler
from proxyhandler.http import ProxyRequest, ProxyResponse, ok
from proxyhandler.pipeline.logging import AccessLogger


def echo(request, content_types, accept_types, context):
    return ok(request.body)


class TestMethodHandler:
    """Tests for the handler contract."""

    def test_abstract(self):
        with pytest.raises(TypeError):
            MethodHandler()

    def test_defaults(self):
        class Minimal(MethodHandler):
            def handle(self, request, content_types, accept_types, context):
                return ok()

        handler = Minimal({"table": "t"})
        assert handler.configuration == {"table": "t"}
        assert handler.required_headers() == frozenset()
        assert handler.name == "Minimal"


class TestFunctionHandler:
    """Tests for FunctionHandler and @method_handler."""

    def test_delegates(self):
        handler = FunctionHandler(echo)
        response = handler.handle(ProxyRequest("POST", body="hi"), [], [], None)
        assert response.body == "hi"
        assert handler.name == "echo"

    def test_required_headers_lowercased(self):
        handler = FunctionHandler(echo, required_headers=["X-Api-Key"])
        assert handler.required_headers() == frozenset({"x-api-key"})

    def test_as_factory_ignores_configuration(self):
        handler = FunctionHandler(echo)
        assert handler.as_factory()({"anything": 1}) is handler

    def test_callable(self):
        handler = FunctionHandler(echo)
        assert handler(ProxyRequest("POST", body="x"), [], [], None).body == "x"

    def test_decorator_bare(self):
        @method_handler
        def read(request, content_types, accept_types, context):
            return ok("read")

        assert isinstance(read, FunctionHandler)
        assert read.required_headers() == frozenset()

    def test_decorator_with_arguments(self):
        @method_handler(required_headers={"Authorization"})
        def write(request, content_types, accept_types, context):
            return ok("write")

        assert write.required_headers() == frozenset({"authorization"})
        assert write.name == "write"


class TestAccessLogger:
    """Tests for AccessLogger."""

    def test_text_entry(self, caplog):
        request = ProxyRequest(
            "POST", path="/orders", request_context={"requestId": "abc"}
        )
        response = ProxyResponse(201, {}, "created")

        with caplog.at_level(logging.INFO, logger="proxyhandler.access"):
            entry = AccessLogger().record(request, response, time.perf_counter())

        assert entry.request_id == "abc"
        assert entry.status_code == 201
        assert entry.content_length == 7
        assert entry.to_text().startswith("abc POST /orders 201 7 ")
        assert entry.to_text() in caplog.text

    def test_json_entry(self, caplog):
        request = ProxyRequest("OPTIONS")

        with caplog.at_level(logging.INFO, logger="proxyhandler.access"):
            entry = AccessLogger("json").record(request, ProxyResponse(), time.perf_counter())

        logged = json.loads(caplog.records[-1].getMessage())
        assert logged == entry.to_dict()
        assert logged["preflight"] is True
        assert len(logged["request_id"]) == 8

    def test_missing_method(self):
        entry = AccessLogger().record(
            ProxyRequest(None), ProxyResponse(500), time.perf_counter()
        )
        assert entry.method == "-"
