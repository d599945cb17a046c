"""
Built-in Skill Tests
--------------------
Each skill is testable without the engine.
"""

from typing import List, Tuple

import httpx
import pytest

from conftest import run

from commands.plan import Command
from memory.store import InMemoryStore
from skills import create_default_skills
from skills.device import IotSkill, SatelliteSkill, SecuritySkill, is_emulator
from skills.engineering import EngineeringSkill
from skills.music import MusicSkill, PlayerState, SessionPlayer
from skills.notes import NoteSkill
from skills.speech import TtsSkill, VoiceSettings
from skills.web import DeepSearchSkill, HttpSkill, truncate


def call(skill, verb, **args):
    return run(skill.handle(Command.of(verb, **args)))


class FakeSpeaker:
    def __init__(self):
        self.spoken: List[Tuple[str, str]] = []

    async def speak(self, text: str, settings: VoiceSettings) -> None:
        self.spoken.append((text, settings.lang))


class TestNoteSkill:

    def test_save_and_list(self, store):
        notes = NoteSkill(store)

        assert call(notes, "save_note", text="buy milk") == "Saved note (1)."
        assert call(notes, "save_note", text="call mom") == "Saved note (2)."
        assert call(notes, "get_notes") == "1. buy milk\n2. call mom"

    def test_empty_list(self, store):
        assert call(NoteSkill(store), "get_notes") == "(no notes)"

    def test_clear(self, store):
        notes = NoteSkill(store)
        call(notes, "save_note", text="x")

        assert call(notes, "clear_notes") == "Cleared notes."
        assert call(notes, "get_notes") == "(no notes)"

    def test_missing_text_saves_empty_note(self, store):
        notes = NoteSkill(store)

        assert call(notes, "save_note") == "Saved note (1)."
        assert store.get("megh_notes") == [""]


class TestWebSkills:

    @staticmethod
    def transport(body: str, status: int = 200):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(status, text=body)

        return httpx.MockTransport(handler), seen

    def test_http_get(self):
        transport, seen = self.transport("hello")
        skill = HttpSkill(transport=transport)

        assert call(skill, "http_get", url="https://example.test/a") == "GET 200: hello"
        assert str(seen[0].url) == "https://example.test/a"
        assert seen[0].headers["User-Agent"].startswith("MeghAIna")

    def test_http_get_truncates(self):
        transport, _ = self.transport("x" * 250, status=404)

        result = call(HttpSkill(transport=transport), "http_get", url="https://example.test")

        assert result == "GET 404: " + "x" * 200 + "…"

    def test_http_get_missing_url(self):
        assert call(HttpSkill(), "http_get") == "http_get: missing url"

    def test_deep_search_truncates_at_300(self):
        transport, _ = self.transport("y" * 301)

        result = call(DeepSearchSkill(transport=transport), "search_http", url="https://example.test")

        assert result == "search_http 200: " + "y" * 300 + "…"

    def test_deep_search_missing_url(self):
        assert call(DeepSearchSkill(), "search_http") == "search_http: missing url"

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        skill = HttpSkill(transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError):
            call(skill, "http_get", url="https://example.test")

    def test_truncate_exact_limit(self):
        assert truncate("abc", 3) == "abc"


class TestTtsSkill:

    def test_say(self):
        speaker = FakeSpeaker()
        skill = TtsSkill(speaker)

        assert call(skill, "tts_say", text="నమస్తే") == "speaking"
        assert speaker.spoken == [("నమస్తే", "te-IN")]

    def test_say_empty(self):
        assert call(TtsSkill(FakeSpeaker()), "tts_say") == "tts_say: empty text"

    def test_set(self):
        speaker = FakeSpeaker()
        skill = TtsSkill(speaker)

        assert call(skill, "tts_set", lang="en-US", pitch=1, rate=1.2) == "tts configured"
        assert skill.settings == VoiceSettings(lang="en-US", pitch=1.0, rate=1.2)

        call(skill, "tts_say", text="hi")
        assert speaker.spoken == [("hi", "en-US")]

    def test_set_rejects_non_numbers(self):
        with pytest.raises(ValueError):
            call(TtsSkill(FakeSpeaker()), "tts_set", pitch="high")


class TestEngineeringSkill:

    @pytest.fixture
    def skill(self):
        return EngineeringSkill()

    def test_ohms_v(self, skill):
        assert call(skill, "ohms_v", I=2, R=3) == "V = 6.0000 V"

    def test_ohms_i(self, skill):
        assert call(skill, "ohms_i", V=12, R=4) == "I = 3.000000 A"

    def test_ohms_r(self, skill):
        assert call(skill, "ohms_r", V=10, I=4) == "R = 2.5000 Ω"

    def test_missing_inputs(self, skill):
        assert call(skill, "ohms_v", I=2) == "need I & R"
        assert call(skill, "ohms_i", V=1, R=0) == "need V & R>0"
        assert call(skill, "ohms_r", V=1) == "need V & I>0"
        assert call(skill, "power_p") == "need (V&I) or (I&R) or (V&R)"

    def test_power_variants(self, skill):
        assert call(skill, "power_p", V=5, I=2) == "P = 10.0000 W"
        assert call(skill, "power_p", I=2, R=3) == "P = 12.0000 W"
        assert call(skill, "power_p", V=6, R=3) == "P = 12.0000 W"

    def test_series(self, skill):
        assert call(skill, "series_resistance", values=[100, 220, 330]) == "R_series = 650.0000 Ω"

    def test_series_empty(self, skill):
        assert call(skill, "series_resistance") == "R_series = 0.0000 Ω"

    def test_parallel(self, skill):
        assert call(skill, "parallel_resistance", values=[100, 100]) == "R_parallel = 50.0000 Ω"

    def test_parallel_empty(self, skill):
        assert call(skill, "parallel_resistance", values=[]) == "no values"

    def test_non_numeric_values_raise(self, skill):
        with pytest.raises(ValueError):
            call(skill, "series_resistance", values=[1, "two"])

    def test_string_numbers_are_missing(self, skill):
        assert call(skill, "ohms_v", I="2", R=3) == "need I & R"


class TestDeviceSkills:

    def test_security_status(self):
        skill = SecuritySkill(debug=True, environ={})

        assert call(skill, "security_status") == "Security: debug=on, emulator=no"

    def test_emulator_detection(self):
        assert is_emulator({"ANDROID_AVD_HOME": "/home/u/.android/Emulator"})
        assert not is_emulator({"ANDROID_HOME": "/opt/sdk"})

    def test_iot(self):
        assert call(IotSkill(), "iot_command", device="fan", action="on") == "IoT → fan : on (stub)"

    def test_sos_default_message(self):
        assert call(SatelliteSkill(), "sos_send") == "SkyCall queued: SOS"

    def test_sos_message(self):
        assert call(SatelliteSkill(), "sos_send", message="SOS lost") == "SkyCall queued: SOS lost"


class TestMusicSkill:

    def test_load_and_play(self):
        player = SessionPlayer()
        skill = MusicSkill(player)

        assert call(skill, "music_load", url="file:///song.mp3") == "Loaded: file:///song.mp3"
        assert call(skill, "music_play") == "Playing: file:///song.mp3"
        assert player.state == PlayerState.PLAYING

    def test_pause_and_stop(self):
        player = SessionPlayer()
        skill = MusicSkill(player)
        call(skill, "music_play", url="file:///a.mp3")

        assert call(skill, "music_pause") == "Paused"
        assert player.state == PlayerState.PAUSED
        assert call(skill, "music_stop") == "Stopped"
        assert player.state == PlayerState.LOADED

    def test_play_query_without_track(self):
        skill = MusicSkill()

        assert call(skill, "music_play", query="play lofi beats") == "No track loaded for: play lofi beats"

    def test_load_missing_url(self):
        assert call(MusicSkill(), "music_load") == "music_load: missing url"


class TestDefaultSkills:

    def test_all_verbs_registered(self):
        registry = create_default_skills(InMemoryStore(), speaker=FakeSpeaker())

        expected = {
            "save_note", "get_notes", "clear_notes", "http_get", "search_http",
            "tts_say", "tts_set", "ohms_v", "ohms_i", "ohms_r", "power_p",
            "series_resistance", "parallel_resistance", "security_status",
            "iot_command", "sos_send", "music_load", "music_play",
            "music_pause", "music_stop",
        }
        assert set(registry.verbs()) == expected
        assert len(registry) == 9
