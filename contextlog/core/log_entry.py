"""
Log entry data structure

Built at emission time from a logger's context.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from contextlog.core.caller import Frame
from contextlog.core.log_level import DEFAULT_LEVEL, LEVEL_KEY


@dataclass
class LogEntry:
    """
    Log entry data structure.

    Contains everything needed to render one line.
    """

    message: str
    fields: Dict[str, str] = field(default_factory=dict)
    callers: List[Frame] = field(default_factory=list)
    error: Optional[str] = None
    timestamp: Optional[datetime] = field(default_factory=lambda: now_utc())
    extra: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Normalize the message after initialization."""
        if not isinstance(self.message, str):
            self.message = str(self.message)

    @property
    def level(self) -> str:
        """Resolved level name, ``info`` when never set."""
        return self.fields.get(LEVEL_KEY, str(DEFAULT_LEVEL))

    def to_pairs(self) -> List[Tuple[str, str]]:
        """
        Flatten the entry into the ordered field list formatters render.

        Returns:
            (key, value) pairs: ts, level, context fields, caller_N,
            extra fields, error, msg
        """
        pairs: List[Tuple[str, str]] = []
        if self.timestamp is not None:
            pairs.append(("ts", _format_timestamp(self.timestamp)))
        pairs.append((LEVEL_KEY, self.level))
        for key, value in self.fields.items():
            if key != LEVEL_KEY:
                pairs.append((key, value))
        for i, frame in enumerate(self.callers):
            pairs.append((f"caller_{i}", str(frame)))
        pairs.extend(self.extra.items())
        if self.error is not None:
            pairs.append(("error", self.error))
        pairs.append(("msg", self.message))
        return pairs

    def to_dict(self) -> Dict[str, str]:
        """
        Convert log entry to dictionary.

        Returns:
            Dictionary representation, later keys winning
        """
        return dict(self.to_pairs())


def now_utc() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def _format_timestamp(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
