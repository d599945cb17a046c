"""
Default Skill Set
-----------------
Builds a registry with every built-in skill, in registration order.
"""

from typing import Optional

from memory.store import InMemoryStore

from .device import IotSkill, SatelliteSkill, SecuritySkill
from .engineering import EngineeringSkill
from .music import MusicSkill, Player
from .notes import NOTES_KEY, NoteSkill
from .registry import LAST_WINS, SkillRegistry
from .speech import ConsoleSpeaker, Speaker, TtsSkill
from .web import DeepSearchSkill, HttpSkill


def create_default_skills(
    store: InMemoryStore,
    collision_policy: str = LAST_WINS,
    http_timeout: float = 15.0,
    user_agent: str = "MeghAIna/0.3",
    debug: bool = False,
    speaker: Optional[Speaker] = None,
    player: Optional[Player] = None,
    notes_key: str = NOTES_KEY,
) -> SkillRegistry:
    """Create a registry with the built-in skills."""
    registry = SkillRegistry(collision_policy=collision_policy)

    registry.register(NoteSkill(store, key=notes_key))
    registry.register(HttpSkill(timeout_seconds=http_timeout, user_agent=user_agent))
    registry.register(TtsSkill(speaker or ConsoleSpeaker()))
    registry.register(EngineeringSkill())
    registry.register(SecuritySkill(debug=debug))
    registry.register(DeepSearchSkill(timeout_seconds=http_timeout, user_agent=user_agent))
    registry.register(IotSkill())
    registry.register(SatelliteSkill())
    registry.register(MusicSkill(player))

    return registry
