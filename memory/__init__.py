# Memory module - Persistent key-value storage and usage tracking
# Counts are keyed by raw input text

from .store import InMemoryStore, KeyValueStore
from .usage import UsageRecommender, USAGE_KEY

__all__ = ["InMemoryStore", "KeyValueStore", "UsageRecommender", "USAGE_KEY"]
