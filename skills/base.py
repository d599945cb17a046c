"""
Skill Interface
---------------
A skill owns one or more verbs and handles matching commands.

Each skill defines:
- A unique name
- The verbs it claims
- An async handler that returns optional text or raises
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Optional

from commands.plan import Command


class SkillRegistrationError(Exception):
    """A skill could not be registered (missing name or verbs)."""
    pass


class Skill(ABC):
    """Abstract base class for capability handlers."""

    name: str = ""
    verbs: FrozenSet[str] = frozenset()

    @abstractmethod
    async def handle(self, command: Command) -> Optional[str]:
        """
        Handle one command.

        Args:
            command: The command whose verb resolved to this skill

        Returns:
            Text to show in the report, or None for a plain "OK"
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name}, verbs={sorted(self.verbs)})"


def verb_set(verbs: Iterable[str]) -> FrozenSet[str]:
    """Normalize a collection of verbs for a skill declaration."""
    return frozenset(v.strip().lower() for v in verbs if v and v.strip())
