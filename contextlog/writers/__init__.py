"""Writers module - Log output sinks"""

from contextlog.writers.base_writer import BaseWriter
from contextlog.writers.console_writer import ConsoleWriter
from contextlog.writers.buffer_writer import BufferWriter
from contextlog.writers.nop_writer import NopWriter

__all__ = ["BaseWriter", "ConsoleWriter", "BufferWriter", "NopWriter"]
