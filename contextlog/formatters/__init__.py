"""
Log formatters module

Provides the rendering modes: logfmt (human-readable), JSON
(machine-structured) and nop.
"""

from contextlog.formatters.base_formatter import BaseFormatter, NopFormatter
from contextlog.formatters.logfmt_formatter import LogfmtFormatter
from contextlog.formatters.json_formatter import JSONFormatter

__all__ = [
    "BaseFormatter",
    "NopFormatter",
    "LogfmtFormatter",
    "JSONFormatter",
]
