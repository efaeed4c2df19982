"""Writer that discards everything"""

from typing import Dict


class NopWriter:
    """
    Discard all output.

    ``enabled`` is False, so loggers skip rendering and caller capture
    before ever reaching this writer.
    """

    enabled = False

    def write(self, line: str) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    @property
    def stats(self) -> Dict[str, int]:
        return {"written": 0, "errors": 0}
