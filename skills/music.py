"""
Music Skill
-----------
Load, play, pause and stop audio through a Player collaborator.

The playback session belongs to the skill. Natural-language "play ..."
commands arrive as music_play with a `query` argument.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from commands.plan import Command

from .base import Skill, verb_set


class PlayerState(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"


class Player(Protocol):
    """Platform audio playback."""

    async def load(self, source: str) -> None: ...
    async def play(self) -> None: ...
    async def pause(self) -> None: ...
    async def stop(self) -> None: ...


@dataclass
class SessionPlayer:
    """
    In-process playback session.

    Tracks what would be playing; used when no audio backend is wired in.
    """
    source: Optional[str] = None
    state: PlayerState = PlayerState.IDLE

    async def load(self, source: str) -> None:
        self.source = source
        self.state = PlayerState.LOADED

    async def play(self) -> None:
        if self.source is None:
            raise RuntimeError("nothing loaded")
        self.state = PlayerState.PLAYING

    async def pause(self) -> None:
        if self.state == PlayerState.PLAYING:
            self.state = PlayerState.PAUSED

    async def stop(self) -> None:
        if self.source is not None:
            self.state = PlayerState.LOADED


class MusicSkill(Skill):
    """Music playback commands."""

    name = "music"
    verbs = verb_set(["music_load", "music_play", "music_pause", "music_stop"])

    def __init__(self, player: Optional[Player] = None):
        self.player = player or SessionPlayer()
        self._source: Optional[str] = None

    async def handle(self, command: Command) -> Optional[str]:
        verb = command.verb

        if verb == "music_load":
            url = str(command.get("url", "") or "")
            if not url:
                return "music_load: missing url"
            await self.player.load(url)
            self._source = url
            return f"Loaded: {url}"

        if verb == "music_play":
            url = str(command.get("url", "") or "")
            if url:
                await self.player.load(url)
                self._source = url
            if self._source is None:
                query = str(command.get("query", "") or "")
                return f"No track loaded for: {query}" if query else "music_play: nothing loaded"
            await self.player.play()
            return f"Playing: {self._source}"

        if verb == "music_pause":
            await self.player.pause()
            return "Paused"

        if verb == "music_stop":
            await self.player.stop()
            return "Stopped"

        return "music: unknown verb"
