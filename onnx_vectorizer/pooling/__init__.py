"""
Pooling Module - Picks a single embedding vector out of a model's outputs.
"""
from .resolver import (
    EMPTY_STRATEGY,
    HIDDEN_MARKERS,
    POOLED_MARKERS,
    STRATEGIES,
    ExtractionStrategy,
    resolve_embedding,
    resolve_with_strategy,
)

__all__ = [
    "EMPTY_STRATEGY",
    "HIDDEN_MARKERS",
    "POOLED_MARKERS",
    "STRATEGIES",
    "ExtractionStrategy",
    "resolve_embedding",
    "resolve_with_strategy",
]
