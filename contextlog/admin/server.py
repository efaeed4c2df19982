"""
Administrative HTTP server

Serves Prometheus metrics, liveness/readiness checks and debug
endpoints next to an application's main listener. The routes live on a
FastAPI app served by uvicorn in a background thread. Callers can
register extra routes and a version endpoint.

Example:
    from contextlog import new_default_logger
    from contextlog.admin import AdminServer

    admin = AdminServer(":9090", logger=new_default_logger())
    admin.add_version_handler("v0.1.0")
    admin.listen()
    ...
    admin.shutdown()
"""

from __future__ import annotations
from typing import Any, Callable, Optional, Sequence, Set, Tuple
import socket
import sys
import threading
import time
import traceback

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from contextlog import new_nop_logger
from contextlog.admin.health import HealthCheck, HealthChecks
from contextlog.core.logger import Logger

STARTUP_TIMEOUT = 5.0


def parse_bind_addr(addr: str) -> Tuple[str, int]:
    """
    Split ``host:port`` (host optional) into its parts.

    Raises:
        ValueError: If the port is missing or not a number
    """
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"invalid bind address {addr!r}: missing port")
    try:
        return host.strip("[]"), int(port)
    except ValueError:
        raise ValueError(f"invalid bind address {addr!r}: bad port") from None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request at debug level; turn handler failures into a 500."""

    def __init__(self, app, logger: Logger):
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        client = request.client.host if request.client else "unknown"
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error().log_errorf("admin: handler for %s failed: %w", path, e)
            return PlainTextResponse("internal server error\n", status_code=500)

        self.logger.debug().with_map({
            "client": client,
            "method": request.method,
            "path": path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 1),
        }).log("admin: request served")
        return response


class AdminServer:
    """HTTP server for operational endpoints."""

    def __init__(
        self,
        bind_addr: str = ":9090",
        logger: Optional[Logger] = None,
        registry=None,
    ):
        """
        Initialize admin server.

        Args:
            bind_addr: ``host:port`` to listen on; port 0 picks a free port
            logger: Logger for startup errors and request logs
            registry: Prometheus registry to expose (default: global REGISTRY)

        Raises:
            ValueError: If bind_addr cannot be parsed
        """
        self._addr = bind_addr
        self._host, self._port = parse_bind_addr(bind_addr)
        self._logger = (logger or new_nop_logger()).with_key_value("component", "admin")
        self._registry = registry or REGISTRY
        self._paths: Set[str] = set()
        self._lock = threading.Lock()
        self._sock: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self.liveness = HealthChecks()
        self.readiness = HealthChecks()

        self.app = FastAPI(title="admin", docs_url=None, redoc_url=None, openapi_url=None)
        self.app.add_middleware(RequestLoggingMiddleware, logger=self._logger)

        self._register("/metrics", self._metrics)
        self._register("/live", self._live)
        self._register("/ready", self._ready)
        self._register("/debug/pprof/cmdline", self._cmdline)
        self._register("/debug/pprof/threads", self._threads)

    def _register(
        self,
        path: str,
        endpoint: Callable[..., Any],
        methods: Sequence[str] = ("GET",),
    ) -> None:
        if not path.startswith("/"):
            raise ValueError(f"path must start with '/': {path!r}")
        with self._lock:
            if path in self._paths:
                raise ValueError(f"handler already registered for {path}")
            self._paths.add(path)
            self.app.add_api_route(
                path,
                endpoint,
                methods=list(methods),
                response_class=PlainTextResponse,
                include_in_schema=False,
            )

    def add_handler(
        self,
        path: str,
        endpoint: Callable[..., Any],
        methods: Sequence[str] = ("GET",),
    ) -> None:
        """
        Register a route.

        Args:
            path: Request path, e.g. ``/special-path``
            endpoint: FastAPI endpoint; a returned ``str`` is sent as text/plain
            methods: HTTP methods the route answers

        Raises:
            ValueError: If the path is already registered
        """
        self._register(path, endpoint, methods)

    def add_version_handler(self, version: str) -> None:
        """Serve version on ``GET /version``."""
        self._register("/version", lambda: version)

    def add_liveness_check(self, name: str, check: HealthCheck) -> None:
        self.liveness.add(name, check)

    def add_readiness_check(self, name: str, check: HealthCheck) -> None:
        self.readiness.add(name, check)

    def bind_addr(self) -> str:
        """Address being listened on; the real port once listening."""
        if self._sock is not None:
            return f"{self._host}:{self._sock.getsockname()[1]}"
        return self._addr

    def listen(self) -> None:
        """
        Bind and serve in a background thread.

        The socket is bound before the thread starts so bind failures
        surface here.

        Raises:
            WrappedError: If the address cannot be bound or the server
                          does not start; also logged
        """
        if self._server is not None:
            return
        try:
            sock = self._bind()
        except OSError as e:
            raise self._logger.error().log_errorf(
                "admin: unable to listen on %s: %w", self._addr, e
            ) from e

        config = uvicorn.Config(self.app, log_level="warning", access_log=False, lifespan="off")
        server = uvicorn.Server(config)
        self._sock = sock
        self._server = server
        self._thread = threading.Thread(
            target=server.run,
            kwargs={"sockets": [sock]},
            name="admin-server",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + STARTUP_TIMEOUT
        while not server.started and self._thread.is_alive() and time.monotonic() < deadline:
            time.sleep(0.01)
        if not server.started:
            self.shutdown()
            raise self._logger.error().log_errorf(
                "admin: server on %s did not start", self._addr
            )
        self._logger.info().logf("admin: listening on %s", self.bind_addr())

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self._host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, self._port))
            sock.listen(128)
        except OSError:
            sock.close()
            raise
        return sock

    def shutdown(self) -> None:
        """Stop serving and close the socket."""
        server, self._server = self._server, None
        if server is None:
            return
        server.should_exit = True
        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    # Built-in routes

    def _metrics(self) -> Response:
        return Response(generate_latest(self._registry), media_type=CONTENT_TYPE_LATEST)

    def _live(self) -> JSONResponse:
        return self._health(self.liveness)

    def _ready(self) -> JSONResponse:
        return self._health(self.readiness)

    def _health(self, checks: HealthChecks) -> JSONResponse:
        result = checks.run()
        status = 200 if result.is_healthy else 503
        return JSONResponse(result.to_dict(), status_code=status)

    def _cmdline(self) -> str:
        return "\x00".join(sys.argv)

    def _threads(self) -> str:
        names = {t.ident: t.name for t in threading.enumerate()}
        chunks = []
        for ident, frame in sys._current_frames().items():
            chunks.append(f"thread {names.get(ident, '?')} ({ident}):\n")
            chunks.append("".join(traceback.format_stack(frame)))
            chunks.append("\n")
        return "".join(chunks)
