"""
Engineering Skill
-----------------
Ohm's law and resistor network helpers.

Arguments: V (volts), I (amps), R (ohms), values (list of ohms).
Missing inputs produce a hint, not an error.
"""

from typing import Any, List, Optional

from commands.plan import Command

from .base import Skill, verb_set


def _number(value: Any) -> Optional[float]:
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _values(value: Any) -> List[float]:
    if not isinstance(value, list):
        return []
    numbers = [_number(v) for v in value]
    if any(n is None for n in numbers):
        raise ValueError("values must be a list of numbers")
    return numbers


class EngineeringSkill(Skill):
    """Small electrical calculator."""

    name = "engineering"
    verbs = verb_set([
        "ohms_v", "ohms_i", "ohms_r", "power_p",
        "series_resistance", "parallel_resistance",
    ])

    async def handle(self, command: Command) -> Optional[str]:
        v = _number(command.get("V"))
        i = _number(command.get("I"))
        r = _number(command.get("R"))
        verb = command.verb

        if verb == "ohms_v":
            if i is None or r is None:
                return "need I & R"
            return f"V = {i * r:.4f} V"

        if verb == "ohms_i":
            if v is None or r is None or r == 0:
                return "need V & R>0"
            return f"I = {v / r:.6f} A"

        if verb == "ohms_r":
            if v is None or i is None or i == 0:
                return "need V & I>0"
            return f"R = {v / i:.4f} Ω"

        if verb == "power_p":
            if v is not None and i is not None:
                return f"P = {v * i:.4f} W"
            if i is not None and r is not None:
                return f"P = {i * i * r:.4f} W"
            if v is not None and r is not None and r != 0:
                return f"P = {v * v / r:.4f} W"
            return "need (V&I) or (I&R) or (V&R)"

        if verb == "series_resistance":
            return f"R_series = {sum(_values(command.get('values'))):.4f} Ω"

        if verb == "parallel_resistance":
            values = _values(command.get("values"))
            if not values:
                return "no values"
            if any(value == 0 for value in values):
                return "R_parallel = 0.0000 Ω"
            inverse = sum(1.0 / value for value in values)
            return f"R_parallel = {1.0 / inverse:.4f} Ω"

        return "engineering: unknown verb"
