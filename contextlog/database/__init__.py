"""Database module - MySQL connection helper"""

from contextlog.database.mysql import (
    MySQL,
    MySQLConfig,
    PoolSampler,
    MYSQL_CONNECTIONS,
    MYSQL_ERR_DUPLICATE_KEY,
    connect_timeout,
    max_active_connections,
    mysql_unique_violation,
)

__all__ = [
    "MySQL",
    "MySQLConfig",
    "PoolSampler",
    "MYSQL_CONNECTIONS",
    "MYSQL_ERR_DUPLICATE_KEY",
    "connect_timeout",
    "max_active_connections",
    "mysql_unique_violation",
]
