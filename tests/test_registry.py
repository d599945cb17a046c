"""
Skill Registry Tests
--------------------
Verb indexing, case-insensitive lookup and collision policy.
"""

import pytest

from conftest import RecordingSkill

from skills.base import SkillRegistrationError
from skills.registry import FIRST_WINS, SkillRegistry


class TestRegistration:
    """Registering skills by name and verb."""

    def test_register_indexes_name_and_verbs(self, registry):
        skill = RecordingSkill("notes", {"save_note", "get_notes"})
        registry.register(skill)

        assert "notes" in registry
        assert len(registry) == 1
        assert registry.get("notes") is skill
        assert registry.resolve("save_note") is skill
        assert registry.resolve("get_notes") is skill

    def test_unknown_verb_resolves_to_none(self, registry):
        registry.register(RecordingSkill("notes", {"save_note"}))

        assert registry.resolve("music_play") is None
        assert registry.resolve("") is None

    def test_rejects_skill_without_verbs(self, registry):
        with pytest.raises(SkillRegistrationError):
            registry.register(RecordingSkill("empty", set()))

    def test_rejects_skill_without_name(self, registry):
        with pytest.raises(SkillRegistrationError):
            registry.register(RecordingSkill("", {"ping"}))

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            SkillRegistry(collision_policy="random")


class TestCaseInsensitiveLookup:
    """Verb lookup ignores case."""

    def test_mixed_case_registration(self, registry):
        skill = RecordingSkill("notes", {"Save_Note"})
        registry.register(skill)

        assert registry.resolve("save_note") is skill
        assert registry.resolve("SAVE_NOTE") is skill
        assert registry.resolve("  Save_Note ") is skill

    def test_verb_index_is_lowercase(self, registry):
        registry.register(RecordingSkill("notes", {"Save_Note"}))

        assert list(registry.verbs()) == ["save_note"]


class TestCollisions:
    """Two skills claiming one verb."""

    def test_last_registration_wins(self, registry):
        first = RecordingSkill("first", {"ping"})
        second = RecordingSkill("second", {"ping"})

        registry.register(first)
        registry.register(second)

        assert registry.resolve("ping") is second
        # The shadowed skill stays reachable by name only
        assert registry.get("first") is first
        assert registry.verbs() == {"ping": "second"}

    def test_shadowing_is_per_verb(self, registry):
        first = RecordingSkill("first", {"ping", "pong"})
        second = RecordingSkill("second", {"ping"})

        registry.register(first)
        registry.register(second)

        assert registry.resolve("ping") is second
        assert registry.resolve("pong") is first

    def test_first_wins_policy(self):
        registry = SkillRegistry(collision_policy=FIRST_WINS)
        first = RecordingSkill("first", {"ping"})
        second = RecordingSkill("second", {"ping", "extra"})

        registry.register(first)
        registry.register(second)

        assert registry.resolve("ping") is first
        assert registry.resolve("extra") is second
        assert "second" in registry

    def test_replacing_by_name_drops_stale_verbs(self, registry):
        old = RecordingSkill("notes", {"save_note", "legacy_note"})
        new = RecordingSkill("notes", {"save_note"})

        registry.register(old)
        registry.register(new)

        assert registry.get("notes") is new
        assert registry.resolve("save_note") is new
        assert registry.resolve("legacy_note") is None

    def test_index_points_only_at_owning_skills(self, registry):
        registry.register(RecordingSkill("a", {"x", "y"}))
        registry.register(RecordingSkill("b", {"y", "z"}))
        registry.register(RecordingSkill("a", {"x"}))

        for verb, owner in registry.verbs().items():
            assert verb in registry.get(owner).verbs


class TestUnregister:

    def test_unregister_removes_verbs(self, registry):
        registry.register(RecordingSkill("notes", {"save_note"}))

        assert registry.unregister("notes") is True
        assert registry.resolve("save_note") is None
        assert "notes" not in registry

    def test_unregister_missing(self, registry):
        assert registry.unregister("nope") is False
