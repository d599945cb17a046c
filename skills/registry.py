"""
Skill Registry
--------------
Holds registered skills by name and an index from verb to skill.

Verb lookup is case-insensitive. When two skills claim the same verb,
the collision policy decides the owner:
- last_wins (default): the later registration shadows the earlier one
- first_wins: the earlier owner keeps the verb
Shadowed skills remain reachable by name.
"""

from typing import Dict, List, Optional
import logging

from .base import Skill, SkillRegistrationError

LAST_WINS = "last_wins"
FIRST_WINS = "first_wins"


def normalize_verb(verb: str) -> str:
    return verb.strip().lower() if isinstance(verb, str) else ""


class SkillRegistry:
    """
    Registry for all available skills.

    The registry never reaches into a skill's own state; it only maps
    names and verbs to skill instances.
    """

    def __init__(self, collision_policy: str = LAST_WINS):
        if collision_policy not in (LAST_WINS, FIRST_WINS):
            raise ValueError(f"Unknown collision policy: {collision_policy}")
        self.collision_policy = collision_policy
        self._skills: Dict[str, Skill] = {}
        self._verb_index: Dict[str, Skill] = {}
        self._logger = logging.getLogger("megh.skills.registry")

    def register(self, skill: Skill) -> None:
        """Register a skill under its name and each of its verbs."""
        if not skill.name:
            raise SkillRegistrationError(f"Skill has no name: {skill!r}")

        verbs = [normalize_verb(v) for v in skill.verbs]
        verbs = [v for v in verbs if v]
        if not verbs:
            raise SkillRegistrationError(f"Skill declares no verbs: {skill.name}")

        previous = self._skills.get(skill.name)
        if previous is not None and previous is not skill:
            self._logger.warning(f"Overwriting existing skill: {skill.name}")
            self._drop_verbs_of(previous)

        self._skills[skill.name] = skill

        for verb in verbs:
            owner = self._verb_index.get(verb)
            if owner is not None and owner is not skill:
                if self.collision_policy == FIRST_WINS:
                    self._logger.warning(
                        f"Verb '{verb}' already owned by {owner.name}, ignoring claim from {skill.name}"
                    )
                    continue
                self._logger.warning(
                    f"Verb '{verb}' moved from {owner.name} to {skill.name}"
                )
            self._verb_index[verb] = skill

        self._logger.info(f"Registered skill: {skill.name} ({', '.join(sorted(verbs))})")

    def _drop_verbs_of(self, skill: Skill) -> None:
        for verb in [v for v, owner in self._verb_index.items() if owner is skill]:
            del self._verb_index[verb]

    def unregister(self, name: str) -> bool:
        """Unregister a skill and every verb it owns."""
        skill = self._skills.pop(name, None)
        if skill is None:
            return False
        self._drop_verbs_of(skill)
        return True

    def resolve(self, verb: str) -> Optional[Skill]:
        """Get the skill that owns a verb (case-insensitive)."""
        return self._verb_index.get(normalize_verb(verb))

    def get(self, name: str) -> Optional[Skill]:
        """Get a skill by name."""
        return self._skills.get(name)

    def list_skills(self) -> List[Skill]:
        """List all registered skills in registration order."""
        return list(self._skills.values())

    def verbs(self) -> Dict[str, str]:
        """Map of verb to owning skill name."""
        return {verb: skill.name for verb, skill in self._verb_index.items()}

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, name: str) -> bool:
        return name in self._skills
