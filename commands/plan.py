"""
Command Records
---------------
A Command is an immutable mapping with one discriminant key ("do")
naming the verb, plus verb-specific arguments.
A Plan is an ordered, non-empty tuple of Commands.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Tuple

VERB_KEY = "do"


class Command(Mapping):
    """
    Immutable command record.

    Behaves like a read-only dict so skills can use cmd["text"] and
    cmd.get("url"). Argument values are kept exactly as decoded.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] = (), **kwargs: Any):
        merged: Dict[str, Any] = {}
        for key, value in dict(data, **kwargs).items():
            merged[str(key)] = value
        self._data = merged

    @classmethod
    def of(cls, verb: str, **args: Any) -> "Command":
        """Build a command from a verb and keyword arguments."""
        return cls({VERB_KEY: verb, **args})

    @property
    def verb(self) -> str:
        """Lower-cased verb. Scalars are stringified; missing or nested values give ""."""
        value = self._data.get(VERB_KEY)
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        if not isinstance(value, str):
            return ""
        return value.strip().lower()

    @property
    def args(self) -> Dict[str, Any]:
        """Arguments without the verb key (a copy)."""
        return {k: v for k, v in self._data.items() if k != VERB_KEY}

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Command({self._data!r})"


Plan = Tuple[Command, ...]
