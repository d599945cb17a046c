"""
Speech Skill
------------
Text-to-speech through a Speaker collaborator.

The skill owns its voice settings; the speaker only turns text into
sound (or, for ConsoleSpeaker, into a line on the terminal).
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from rich.console import Console

from commands.plan import Command

from .base import Skill, verb_set


@dataclass
class VoiceSettings:
    """Voice configuration."""
    lang: str = "te-IN"
    pitch: float = 1.05
    rate: float = 0.95


class Speaker(Protocol):
    """Platform speech output."""

    async def speak(self, text: str, settings: VoiceSettings) -> None:
        ...


class ConsoleSpeaker:
    """Speaker that writes the utterance to the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    async def speak(self, text: str, settings: VoiceSettings) -> None:
        self._console.print(f"[bold magenta]🔊 ({settings.lang})[/bold magenta] {text}")


def _as_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"tts_set: {field_name} must be a number")
    return float(value)


class TtsSkill(Skill):
    """Speak text and adjust the voice."""

    name = "tts"
    verbs = verb_set(["tts_say", "tts_set"])

    def __init__(self, speaker: Speaker, settings: Optional[VoiceSettings] = None):
        self._speaker = speaker
        self.settings = settings or VoiceSettings()

    async def handle(self, command: Command) -> Optional[str]:
        verb = command.verb

        if verb == "tts_say":
            text = str(command.get("text", "") or "")
            if not text:
                return "tts_say: empty text"
            await self._speaker.speak(text, self.settings)
            return "speaking"

        if verb == "tts_set":
            if command.get("lang") is not None:
                self.settings.lang = str(command["lang"])
            if command.get("pitch") is not None:
                self.settings.pitch = _as_float(command["pitch"], "pitch")
            if command.get("rate") is not None:
                self.settings.rate = _as_float(command["rate"], "rate")
            return "tts configured"

        return "tts: unknown verb"
