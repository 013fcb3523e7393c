from functools import lru_cache

from .interactions import (
    InteractionStore,
    StoredInteraction,
    historical_results,
    interaction_results,
    record_safely,
    validation_statistics,
)


@lru_cache(maxsize=1)
def get_interaction_store() -> InteractionStore:
    return InteractionStore()


__all__ = [
    "InteractionStore",
    "StoredInteraction",
    "get_interaction_store",
    "historical_results",
    "interaction_results",
    "record_safely",
    "validation_statistics",
]
