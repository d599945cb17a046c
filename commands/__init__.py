# Commands module - Command records and plan parsing
# This module does NOT execute commands, only parses them
# Parsing never raises and never returns an empty plan

from .plan import Command, Plan, VERB_KEY
from .parser import PlanParser, KeywordRule, DEFAULT_RULES

__all__ = ["Command", "Plan", "VERB_KEY", "PlanParser", "KeywordRule", "DEFAULT_RULES"]
