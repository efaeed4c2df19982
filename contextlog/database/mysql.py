"""
MySQL connection helper

Opens a pooled SQLAlchemy engine over PyMySQL, samples pool statistics
into a Prometheus gauge and recognizes duplicate-key violations.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import os
import threading

import pymysql
from prometheus_client import Gauge
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError

from contextlog.core.errors import unwrap
from contextlog.core.logger import Logger

# https://dev.mysql.com/doc/refman/8.0/en/server-error-reference.html#error_er_dup_entry
MYSQL_ERR_DUPLICATE_KEY = 1062

DEFAULT_MAX_CONNECTIONS = 16
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_SAMPLE_INTERVAL = 60.0

MYSQL_CONNECTIONS = Gauge(
    "mysql_connections",
    "How many MySQL connections and what status they're in.",
    ["state"],
)


def max_active_connections(environ: Optional[Mapping[str, str]] = None) -> int:
    """MYSQL_MAX_CONNECTIONS when it is a positive integer, else 16."""
    env = os.environ if environ is None else environ
    try:
        n = int(env.get("MYSQL_MAX_CONNECTIONS", ""))
    except ValueError:
        return DEFAULT_MAX_CONNECTIONS
    return n if n > 0 else DEFAULT_MAX_CONNECTIONS


def connect_timeout(environ: Optional[Mapping[str, str]] = None) -> int:
    """MYSQL_TIMEOUT in seconds (a trailing ``s`` is accepted), else 30."""
    env = os.environ if environ is None else environ
    raw = env.get("MYSQL_TIMEOUT", "").strip().lower().rstrip("s")
    try:
        n = int(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return n if n > 0 else DEFAULT_TIMEOUT_SECONDS


@dataclass
class MySQLConfig:
    """MySQL connection settings."""

    address: str = "localhost:3306"
    user: str = ""
    password: str = ""
    database: str = ""

    def host_port(self):
        """
        Split address into host and port.

        Accepts ``host:port``, ``host`` and the ``tcp(host:port)`` form.
        """
        addr = self.address.strip()
        if addr.startswith("tcp(") and addr.endswith(")"):
            addr = addr[4:-1]
        host, sep, port = addr.rpartition(":")
        if not sep:
            return addr, 3306
        return host, int(port)

    def dsn(self) -> URL:
        """SQLAlchemy URL for the pymysql driver."""
        host, port = self.host_port()
        return URL.create(
            "mysql+pymysql",
            username=self.user or None,
            password=self.password or None,
            host=host,
            port=port,
            database=self.database or None,
            query={"charset": "utf8mb4"},
        )


class PoolSampler:
    """Periodically copy pool statistics into a gauge."""

    def __init__(
        self,
        engine: Engine,
        gauge=MYSQL_CONNECTIONS,
        interval: float = DEFAULT_SAMPLE_INTERVAL,
    ):
        self._engine = engine
        self._gauge = gauge
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def sample(self) -> dict:
        """Read pool statistics once and update the gauge."""
        pool = self._engine.pool
        idle = pool.checkedin()
        in_use = pool.checkedout()
        stats = {"idle": idle, "inuse": in_use, "open": idle + in_use}
        for state, value in stats.items():
            self._gauge.labels(state=state).set(value)
        return stats

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="mysql-pool-sampler", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.sample()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None


class MySQL:
    """
    Pooled MySQL connection.

    Example:
        db = MySQL(logger, MySQLConfig("tcp(localhost:3306)", "app", "secret", "app"))
        engine = db.connect()
        ...
        db.close()
    """

    def __init__(
        self,
        logger: Logger,
        config: MySQLConfig,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.logger = logger.with_key_value("database", "mysql", "address", config.address)
        self.sample_interval = sample_interval
        self.max_connections = max_active_connections(environ)
        self.timeout = connect_timeout(environ)
        self._engine: Optional[Engine] = None
        self._sampler: Optional[PoolSampler] = None

    def create_engine(self) -> Engine:
        """Build the pooled engine without connecting."""
        return create_engine(
            self.config.dsn(),
            pool_size=self.max_connections,
            max_overflow=0,
            pool_pre_ping=True,
            connect_args={"connect_timeout": self.timeout},
        )

    def connect(self) -> Engine:
        """
        Open the pool, check the server answers and start sampling.

        Raises:
            WrappedError: If the server cannot be reached; also logged
        """
        engine = self.create_engine()
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            engine.dispose()
            raise self.logger.error().log_errorf("mysql: connecting: %w", e) from e

        self._engine = engine
        self._sampler = PoolSampler(engine, interval=self.sample_interval)
        self._sampler.start()
        self.logger.info().logf("mysql: connected, max %d connections", self.max_connections)
        return engine

    def close(self) -> None:
        if self._sampler:
            self._sampler.stop()
            self._sampler = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


def mysql_unique_violation(err: Optional[BaseException]) -> bool:
    """
    Report whether err is a MySQL duplicate-entry error.

    Matches on the error text or on error code 1062 anywhere in the
    error chain, including the DBAPI error inside SQLAlchemy exceptions.
    """
    if err is None:
        return False
    if f"Error {MYSQL_ERR_DUPLICATE_KEY}: Duplicate entry" in str(err):
        return True

    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, DBAPIError) and err.orig is not None:
            if _is_duplicate_code(err.orig):
                return True
        if _is_duplicate_code(err):
            return True
        err = unwrap(err)
    return False


def _is_duplicate_code(err: BaseException) -> bool:
    return (
        isinstance(err, pymysql.err.MySQLError)
        and bool(err.args)
        and err.args[0] == MYSQL_ERR_DUPLICATE_KEY
    )
