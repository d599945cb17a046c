"""
Device Skills
-------------
Status and relay skills: security status, IoT relay stub, satellite SOS.
"""

from typing import Mapping, Optional
import os

from commands.plan import Command

from .base import Skill, verb_set

EMULATOR_ENV_VARS = ("ANDROID_AVD_HOME", "ANDROID_HOME")


def is_emulator(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Best-effort emulator detection from environment variables."""
    environ = os.environ if environ is None else environ
    return any("emulator" in (environ.get(var) or "").lower() for var in EMULATOR_ENV_VARS)


class SecuritySkill(Skill):
    """Reports debug and emulator status."""

    name = "security"
    verbs = verb_set(["security_status"])

    def __init__(self, debug: bool = False, environ: Optional[Mapping[str, str]] = None):
        self.debug = debug
        self._environ = environ

    async def handle(self, command: Command) -> Optional[str]:
        emulator = is_emulator(self._environ)
        return (
            f"Security: debug={'on' if self.debug else 'off'}, "
            f"emulator={'yes' if emulator else 'no'}"
        )


class IotSkill(Skill):
    """IoT relay. Echoes the device command; no transport yet."""

    name = "iot"
    verbs = verb_set(["iot_command"])

    async def handle(self, command: Command) -> Optional[str]:
        device = str(command.get("device", "") or "")
        action = str(command.get("action", "") or "")
        return f"IoT → {device} : {action} (stub)"


class SatelliteSkill(Skill):
    """Queues SOS messages for the satellite relay."""

    name = "satellite"
    verbs = verb_set(["sos_send"])

    async def handle(self, command: Command) -> Optional[str]:
        message = str(command.get("message") or "SOS")
        return f"SkyCall queued: {message}"
