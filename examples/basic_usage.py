#!/usr/bin/env python3
"""Basic usage example"""

import sys

from contextlog import LoggerBuilder, new_default_logger


def load_config(logger, path):
    try:
        with open(path) as f:
            return f.read()
    except OSError as e:
        raise logger.error().log_errorf("loading config %s: %w", path, e)


def main():
    # Configured from LOG_FORMAT (plain or json)
    logger = new_default_logger()
    logger.log("Application started")

    # Builder with fields carried by every line
    logger = (LoggerBuilder()
        .with_name("example")
        .with_fields({"app": "example", "version": "v0.1.0"})
        .with_console(colored=True)
        .build())

    request = logger.with_key_value("request_id", "abc123", "user")
    request.info().logf("handling %s", "/accounts")
    request.with_map({"status": 200}).log("request finished")

    try:
        load_config(logger, "/does/not/exist.yml")
    except Exception as e:
        logger.fatal().log_error("startup failed", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
