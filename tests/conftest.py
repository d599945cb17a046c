"""
Megh Test Configuration
-----------------------
Shared fixtures and configuration for all tests.

Skills used here are in-process fakes; nothing touches the network.
"""

import asyncio
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from commands.plan import Command
from core.engine import ScriptEngine
from memory.store import InMemoryStore
from skills.base import Skill
from skills.registry import SkillRegistry


class RecordingSkill(Skill):
    """Skill that records the commands it receives and replies with a fixed text."""

    def __init__(self, name: str, verbs: Iterable[str], reply: Optional[str] = "done"):
        self.name = name
        self.verbs = frozenset(verbs)
        self.reply = reply
        self.calls: List[Command] = []

    async def handle(self, command: Command) -> Optional[str]:
        self.calls.append(command)
        return self.reply


class FailingSkill(Skill):
    """Skill that always raises."""

    def __init__(self, name: str, verbs: Iterable[str], error: Exception):
        self.name = name
        self.verbs = frozenset(verbs)
        self.error = error

    async def handle(self, command: Command) -> Optional[str]:
        raise self.error


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    """
    Block real HTTP during tests.

    Skills that need HTTP get an httpx.MockTransport instead.
    """
    import httpx

    async def _blocked(*args, **kwargs):
        raise RuntimeError(
            "Real network access is forbidden during tests. "
            "Pass an httpx.MockTransport to the skill."
        )

    monkeypatch.setattr(httpx.AsyncHTTPTransport, "handle_async_request", _blocked)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def registry():
    return SkillRegistry()


@pytest.fixture
def engine(registry):
    return ScriptEngine(registry)
