"""
Immutable logger context

A context is an append-only tuple of key/value pairs. Overrides are
resolved when the context is read, so extending a context never touches
the pairs held by an earlier value.
"""

from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional, Tuple, Dict

from contextlog.core.errors import error_text

MISSING_VALUE = "(MISSING)"

Pair = Tuple[str, str]


class LogContext:
    """Ordered key/value pairs with override-on-conflict reads."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[Pair] = ()):
        self._pairs: Tuple[Pair, ...] = tuple(pairs)

    @classmethod
    def from_key_values(cls, *key_values: Any) -> "LogContext":
        """
        Pair up alternating key, value arguments.

        A trailing key without a value is kept and given the
        ``(MISSING)`` marker.
        """
        pairs = []
        for i in range(0, len(key_values), 2):
            key = str(key_values[i])
            if i + 1 < len(key_values):
                pairs.append((key, _to_text(key_values[i + 1])))
            else:
                pairs.append((key, MISSING_VALUE))
        return cls(pairs)

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> "LogContext":
        """Build a context from a mapping."""
        return cls((str(k), _to_text(v)) for k, v in mapping.items())

    @classmethod
    def from_object(cls, ctx: Any) -> "LogContext":
        """
        Build a context from anything accepted by ``Logger.with_context``.

        Args:
            ctx: A LogContext, an object with a ``context()`` method
                 (such as LogLevel) or a mapping

        Raises:
            TypeError: If ctx is none of the above
        """
        if isinstance(ctx, LogContext):
            return ctx
        if hasattr(ctx, "context") and callable(ctx.context):
            return cls.from_mapping(ctx.context())
        if isinstance(ctx, Mapping):
            return cls.from_mapping(ctx)
        raise TypeError(f"unsupported context type: {type(ctx).__name__}")

    def extend(self, other: "LogContext") -> "LogContext":
        """Return a new context with other's pairs added after ours."""
        if not other._pairs:
            return self
        if not self._pairs:
            return other
        return LogContext(self._pairs + other._pairs)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Latest value assigned to key."""
        for k, v in reversed(self._pairs):
            if k == key:
                return v
        return default

    def fields(self) -> Dict[str, str]:
        """
        Resolve overrides.

        Keys keep the position of their first assignment and take the
        value of their last one.
        """
        resolved: Dict[str, str] = {}
        for key, value in self._pairs:
            resolved[key] = value
        return resolved

    @property
    def pairs(self) -> Tuple[Pair, ...]:
        """Raw pairs in insertion order, overrides unresolved."""
        return self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogContext):
            return NotImplemented
        return self.fields() == other.fields()

    def __hash__(self) -> int:
        return hash(tuple(self.fields().items()))

    def __repr__(self) -> str:
        return f"LogContext({self.fields()!r})"


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, BaseException):
        return error_text(value)
    return str(value)
