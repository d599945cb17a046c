# Skills module - Skill interface, registry and built-in skills
# A skill owns verbs; the registry maps verbs to skills
# The registry never touches a skill's own resources

from .base import Skill, SkillRegistrationError, verb_set
from .registry import SkillRegistry, LAST_WINS, FIRST_WINS
from .defaults import create_default_skills

__all__ = [
    "Skill",
    "SkillRegistrationError",
    "verb_set",
    "SkillRegistry",
    "LAST_WINS",
    "FIRST_WINS",
    "create_default_skills",
]
