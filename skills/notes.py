"""
Notes Skill
-----------
Saves, lists and clears short text notes in the key-value store.
"""

from typing import List, Optional

from commands.plan import Command
from memory.store import InMemoryStore

from .base import Skill, verb_set

NOTES_KEY = "megh_notes"


class NoteSkill(Skill):
    """Note capture backed by a KeyValueStore."""

    name = "notes"
    verbs = verb_set(["save_note", "get_notes", "clear_notes"])

    def __init__(self, store: InMemoryStore, key: str = NOTES_KEY):
        self._store = store
        self._key = key

    def _notes(self) -> List[str]:
        notes = self._store.get(self._key) or []
        return [str(n) for n in notes] if isinstance(notes, list) else []

    async def handle(self, command: Command) -> Optional[str]:
        verb = command.verb

        if verb == "save_note":
            notes = self._notes()
            notes.append(str(command.get("text", "") or ""))
            self._store.set(self._key, notes)
            return f"Saved note ({len(notes)})."

        if verb == "get_notes":
            notes = self._notes()
            if not notes:
                return "(no notes)"
            return "\n".join(f"{i}. {note}" for i, note in enumerate(notes, start=1))

        if verb == "clear_notes":
            self._store.remove(self._key)
            return "Cleared notes."

        return "Unknown note verb"
