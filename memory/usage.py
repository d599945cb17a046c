"""
Usage Recommender
-----------------
Counts how often each raw input was run and proposes the most used one
as a shortcut.

Rules:
- Counts are keyed by the exact raw text, not by the parsed verb
- A shortcut needs at least `threshold` runs (default 3)
- Ties go to the input that was first seen
"""

from typing import Dict, Optional
import logging

from .store import InMemoryStore

USAGE_KEY = "megh_usage_counts"


class UsageRecommender:
    """Tracks input usage in a persistent store."""

    def __init__(
        self,
        store: InMemoryStore,
        threshold: int = 3,
        key: str = USAGE_KEY,
    ):
        self._store = store
        self.threshold = threshold
        self._key = key
        self._logger = logging.getLogger("megh.memory.usage")

    def counts(self) -> Dict[str, int]:
        """Current counts in first-seen order."""
        raw = self._store.get(self._key) or {}
        if not isinstance(raw, dict):
            self._logger.error(f"Usage counts under '{self._key}' are corrupt, ignoring")
            return {}

        counts: Dict[str, int] = {}
        for text, count in raw.items():
            try:
                counts[str(text)] = int(count)
            except (TypeError, ValueError):
                self._logger.warning(f"Skipping bad usage count for {text!r}: {count!r}")
        return counts

    def log_command(self, raw: str) -> None:
        """Record one run of `raw`. Blank input is ignored."""
        if not raw or not raw.strip():
            return

        counts = self.counts()
        counts[raw] = counts.get(raw, 0) + 1
        self._store.set(self._key, counts)
        self._logger.debug(f"Usage count for {raw!r} is now {counts[raw]}")

    def recommend_shortcut(self) -> Optional[str]:
        """Most used input if it reached the threshold, else None."""
        best_text: Optional[str] = None
        best_count = 0

        # Strict comparison keeps the first-seen entry on ties
        for text, count in self.counts().items():
            if count > best_count:
                best_text, best_count = text, count

        if best_text is None or best_count < self.threshold:
            return None
        return best_text

    def reset(self) -> None:
        """Forget all usage counts."""
        self._store.remove(self._key)
