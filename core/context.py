"""
Application Context
-------------------
Everything a caller needs to run inputs, built once at startup and
passed explicitly to the CLI and the service bus.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import yaml

from commands.parser import PlanParser
from infra.config import AppConfig
from memory.store import InMemoryStore, KeyValueStore
from memory.usage import UsageRecommender
from skills.defaults import create_default_skills
from skills.music import Player
from skills.registry import SkillRegistry
from skills.speech import Speaker

from .engine import EngineConfig, ExecutionReport, ScriptEngine


@dataclass
class AppContext:
    """Wiring of registry, parser, engine and usage tracking."""
    config: AppConfig
    store: InMemoryStore
    registry: SkillRegistry
    parser: PlanParser
    engine: ScriptEngine
    usage: UsageRecommender

    async def submit(self, raw: str) -> ExecutionReport:
        """
        Run an input and record it for shortcut suggestions.

        Usage tracking is best effort: a store failure is logged and the
        report is still returned.
        """
        report = await self.engine.run(raw)
        try:
            self.usage.log_command(raw)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger("megh.core.context").error(f"Failed to record usage: {e}")
        return report


def build_context(
    config: Optional[AppConfig] = None,
    store: Optional[InMemoryStore] = None,
    speaker: Optional[Speaker] = None,
    player: Optional[Player] = None,
) -> AppContext:
    """Build the application context from configuration."""
    config = config or AppConfig()
    logger = logging.getLogger("megh.core.context")

    if store is None:
        store = KeyValueStore(config.usage.store_path)

    registry = create_default_skills(
        store,
        collision_policy=config.registry.collision_policy,
        http_timeout=config.http.timeout_seconds,
        user_agent=config.http.user_agent,
        debug=config.debug,
        speaker=speaker,
        player=player,
        notes_key=config.notes.key,
    )

    parser = PlanParser(
        fallback_verb=config.parser.fallback_verb,
        invalid_plan_verb=config.parser.invalid_plan_verb,
    )
    if config.parser.rules_path:
        parser.load_rules(config.parser.rules_path)

    engine = ScriptEngine(
        registry,
        parser=parser,
        config=EngineConfig(
            no_input_marker=config.engine.no_input_marker,
            ok_marker=config.engine.ok_marker,
        ),
    )

    logger.info(f"Context ready: {len(registry)} skills, {len(registry.verbs())} verbs")

    return AppContext(
        config=config,
        store=store,
        registry=registry,
        parser=parser,
        engine=engine,
        usage=UsageRecommender(store, threshold=config.usage.threshold),
    )
