"""
Command Plan Parser
-------------------
Turns one raw input into an ordered, non-empty Plan.

Structured input (JSON) is decoded first:
    {"plan": [{"do": "save_note", "text": "x"}, ...]}
    [{"do": "save_note", "text": "x"}, ...]
    {"do": "save_note", "text": "x"}

Anything else goes through keyword rules (first match wins) and finally
the fallback verb. The parser never raises to its caller.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence
import json
import logging

import yaml

from .plan import Command, Plan, VERB_KEY


@dataclass
class KeywordRule:
    """
    Natural-language rule.

    Matches when the normalized text starts with any of `starts_with`
    or contains any of `contains`. The trimmed original text is passed
    to the command under `arg`.
    """
    verb: str
    arg: str
    contains: List[str] = field(default_factory=list)
    starts_with: List[str] = field(default_factory=list)

    def matches(self, normalized: str) -> bool:
        if any(normalized.startswith(prefix) for prefix in self.starts_with):
            return True
        return any(keyword in normalized for keyword in self.contains)

    def __repr__(self) -> str:
        return f"KeywordRule(verb={self.verb}, arg={self.arg})"


DEFAULT_RULES: List[KeywordRule] = [
    KeywordRule(verb="sos_send", arg="message", contains=["sos", "emergency"]),
    KeywordRule(verb="music_play", arg="query", starts_with=["play "], contains=["music"]),
    # గుర్తు: Telugu for "remember / reminder"
    KeywordRule(verb="save_note", arg="text", contains=["note", "గుర్తు"]),
]


class PlanParser:
    """
    Parser for raw script or natural-language input.

    Responsibilities:
    - Decode structured plans
    - Normalize malformed plan entries
    - Apply keyword rules to free text

    Forbidden:
    - Raising on bad input
    - Returning an empty plan
    """

    def __init__(
        self,
        rules: Optional[Sequence[KeywordRule]] = None,
        fallback_verb: str = "save_note",
        fallback_arg: str = "text",
        invalid_plan_verb: str = "invalid_plan",
    ):
        self._rules: List[KeywordRule] = list(DEFAULT_RULES if rules is None else rules)
        self.fallback_verb = fallback_verb
        self.fallback_arg = fallback_arg
        self.invalid_plan_verb = invalid_plan_verb
        self._logger = logging.getLogger("megh.commands.parser")

    @property
    def rules(self) -> List[KeywordRule]:
        return list(self._rules)

    def load_rules(self, rules_path: str) -> int:
        """
        Replace the keyword rules with those from a YAML file.
        Returns the number of rules loaded.

        File shape:
            fallback_verb: save_note
            rules:
              - verb: sos_send
                arg: message
                contains: [sos, emergency]
        """
        path = Path(rules_path)

        if not path.exists():
            raise FileNotFoundError(f"Parser rules not found: {rules_path}")

        with open(path, 'r', encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        rules = []
        for rule_data in data.get('rules', []):
            rules.append(KeywordRule(
                verb=rule_data['verb'],
                arg=rule_data.get('arg', self.fallback_arg),
                contains=[str(k).lower() for k in rule_data.get('contains', [])],
                starts_with=[str(k).lower() for k in rule_data.get('starts_with', [])],
            ))

        self._rules = rules
        if data.get('fallback_verb'):
            self.fallback_verb = data['fallback_verb']
        if data.get('fallback_arg'):
            self.fallback_arg = data['fallback_arg']

        self._logger.info(f"Loaded {len(rules)} parser rules from {path}")
        return len(rules)

    def parse(self, raw: str) -> Plan:
        """Parse raw input into a non-empty plan."""
        raw = raw if isinstance(raw, str) else str(raw)

        plan = self._parse_structured(raw)
        if plan is not None:
            return plan

        return (self._parse_natural(raw),)

    def _parse_structured(self, raw: str) -> Optional[Plan]:
        """Decode JSON plans. Returns None when the input is not a plan shape."""
        try:
            obj = json.loads(raw)
        except (ValueError, TypeError) as e:
            self._logger.debug(f"Not a structured plan, using keyword rules: {e}")
            return None
        except RecursionError:
            self._logger.warning("Input nested too deeply to decode, using keyword rules")
            return None

        if isinstance(obj, dict) and isinstance(obj.get("plan"), list):
            return self._coerce_entries(obj["plan"], raw)
        if isinstance(obj, list):
            return self._coerce_entries(obj, raw)
        if isinstance(obj, dict):
            return (Command(obj),)

        self._logger.debug(f"Decoded {type(obj).__name__} is not a plan, using keyword rules")
        return None

    def _coerce_entries(self, entries: Iterable[Any], raw: str) -> Plan:
        commands = []
        for index, entry in enumerate(entries):
            if isinstance(entry, dict):
                commands.append(Command(entry))
            else:
                self._logger.warning(
                    f"Dropping plan entry {index}: expected object, got {type(entry).__name__}"
                )

        if not commands:
            self._logger.warning("Plan has no usable commands")
            return (Command({VERB_KEY: self.invalid_plan_verb, "text": raw.strip()}),)

        return tuple(commands)

    def _parse_natural(self, raw: str) -> Command:
        text = raw.strip()
        normalized = text.lower()

        for rule in self._rules:
            if rule.matches(normalized):
                self._logger.debug(f"Keyword rule matched: {rule.verb}")
                return Command({VERB_KEY: rule.verb, rule.arg: text})

        return Command({VERB_KEY: self.fallback_verb, self.fallback_arg: text})
