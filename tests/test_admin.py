"""Tests for the admin HTTP server"""

import socket
import urllib.request

import pytest
from fastapi import Request
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry, Counter

from contextlog import new_buffer_logger
from contextlog.admin import AdminServer, HealthChecks, parse_bind_addr
from contextlog.core.errors import WrappedError


@pytest.fixture
def server():
    return AdminServer("127.0.0.1:0", registry=CollectorRegistry())


@pytest.fixture
def client(server):
    return TestClient(server.app)


class TestParseBindAddr:
    """Test bind address parsing."""

    def test_port_only(self):
        assert parse_bind_addr(":9090") == ("", 9090)

    def test_host_and_port(self):
        assert parse_bind_addr("localhost:0") == ("localhost", 0)

    @pytest.mark.parametrize("addr", ["9090", "host:port"])
    def test_invalid(self, addr):
        with pytest.raises(ValueError):
            parse_bind_addr(addr)


class TestAdminServer:
    """Test built-in and registered routes."""

    def test_metrics(self):
        registry = CollectorRegistry()
        Counter("requests", "Requests served", registry=registry).inc()
        client = TestClient(AdminServer("127.0.0.1:0", registry=registry).app)

        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "requests_total 1.0" in resp.text
        assert resp.headers["content-type"].startswith("text/plain")

    def test_pprof_cmdline(self, client):
        assert client.get("/debug/pprof/cmdline").status_code == 200

    def test_threads(self, client):
        resp = client.get("/debug/pprof/threads")
        assert resp.status_code == 200
        assert "MainThread" in resp.text

    def test_add_handler(self, server, client):
        def special(request: Request):
            if request.url.path != "/special-path":
                return "wrong path"
            return "special"

        server.add_handler("/special-path", special)
        resp = client.get("/special-path")
        assert resp.status_code == 200
        assert resp.text == "special"

    def test_add_handler_methods(self, server, client):
        server.add_handler("/reload", lambda: "reloaded", methods=["POST"])
        assert client.post("/reload").text == "reloaded"
        assert client.get("/reload").status_code == 405

    def test_duplicate_handler(self, server):
        server.add_handler("/once", lambda: "ok")
        with pytest.raises(ValueError):
            server.add_handler("/once", lambda: "ok")

    def test_relative_path(self, server):
        with pytest.raises(ValueError):
            server.add_handler("relative", lambda: "ok")

    def test_add_version_handler(self, server, client):
        server.add_version_handler("v0.1.0")
        resp = client.get("/version")
        assert resp.status_code == 200
        assert resp.text == "v0.1.0"

    def test_not_found(self, client):
        assert client.get("/missing").status_code == 404

    def test_handler_error_is_logged(self):
        buffer, logger = new_buffer_logger()
        svc = AdminServer("127.0.0.1:0", logger=logger, registry=CollectorRegistry())

        def broken():
            raise RuntimeError("kaboom")

        svc.add_handler("/broken", broken)
        resp = TestClient(svc.app).get("/broken")

        assert resp.status_code == 500
        output = buffer.getvalue()
        assert "component=admin" in output
        assert "kaboom" in output
        assert "caller_0=server.py:" in output

    def test_requests_logged_at_debug(self):
        buffer, logger = new_buffer_logger()
        svc = AdminServer("127.0.0.1:0", logger=logger, registry=CollectorRegistry())
        TestClient(svc.app).get("/live")

        output = buffer.getvalue()
        assert "level=debug" in output
        assert "path=/live" in output
        assert "status=200" in output


class TestListen:
    """Test the uvicorn-backed listener."""

    def test_serves_on_real_socket(self):
        registry = CollectorRegistry()
        Counter("hits", "Hits", registry=registry).inc()
        svc = AdminServer("127.0.0.1:0", registry=registry)
        svc.listen()
        try:
            port = svc.bind_addr().rpartition(":")[2]
            assert port != "0"
            url = f"http://127.0.0.1:{port}/metrics"
            with urllib.request.urlopen(url, timeout=5) as resp:
                assert resp.status == 200
                assert b"hits_total 1.0" in resp.read()
        finally:
            svc.shutdown()
        assert svc.bind_addr() == "127.0.0.1:0"

    def test_shutdown_without_listen(self, server):
        server.shutdown()

    def test_listen_failure_is_logged(self):
        buffer, logger = new_buffer_logger()
        taken = socket.socket()
        taken.bind(("127.0.0.1", 0))
        taken.listen(1)
        port = taken.getsockname()[1]
        try:
            svc = AdminServer(f"127.0.0.1:{port}", logger=logger, registry=CollectorRegistry())
            with pytest.raises(WrappedError) as info:
                svc.listen()
        finally:
            taken.close()

        assert isinstance(info.value.unwrap(), OSError)
        output = buffer.getvalue()
        assert "level=error" in output
        assert "admin: unable to listen" in output
        assert "caller_0=server.py:" in output


class TestHealthChecks:
    """Test liveness and readiness checks."""

    def test_live_without_checks(self, client):
        resp = client.get("/live")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_ready_failing_check(self, server, client):
        server.add_readiness_check("db", lambda: ConnectionError("db down"))
        server.add_readiness_check("cache", lambda: None)

        resp = client.get("/ready")
        report = resp.json()
        assert resp.status_code == 503
        assert report["status"] == "unhealthy"
        assert report["issues"] == {"db": "db down"}

    def test_raising_check(self):
        checks = HealthChecks()

        def check():
            raise TimeoutError("slow")

        checks.add("slow", check)
        result = checks.run()
        assert not result.is_healthy
        assert result.issues["slow"] == "slow"

    def test_duplicate_check(self):
        checks = HealthChecks()
        checks.add("a", lambda: None)
        with pytest.raises(ValueError):
            checks.add("a", lambda: None)
