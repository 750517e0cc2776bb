"""
Output Resolver - Extracts the embedding from a set of named output tensors.

Exported transformer models disagree on output naming and pooling. The
resolver walks an ordered table of strategies and the first one that finds
a matching output wins:

1. pooled           - an explicit pooled / CLS vector
2. mean_last_hidden - unweighted mean of a [1, S, H] hidden-state tensor
3. first_float      - the first floating-point output, flattened row-major
4. empty            - nothing matched, an empty vector is returned

The mean in (2) averages every position, padding included; the attention
mask is not consulted.
"""
from typing import Callable, Dict, NamedTuple, Tuple

import numpy as np

EMPTY_STRATEGY = "empty"

POOLED_MARKERS = ("pooler", "pooled", "cls")
HIDDEN_MARKERS = ("last_hidden", "sequence_output", "hidden_states", "output")


class ExtractionStrategy(NamedTuple):
    """A named (predicate, extract) pair tried against each output in turn."""
    name: str
    matches: Callable[[str, np.ndarray], bool]
    extract: Callable[[np.ndarray], np.ndarray]


def _name_has(name: str, markers: Tuple[str, ...]) -> bool:
    name = name.lower()
    return any(marker in name for marker in markers)


def _is_pooled(name: str, tensor: np.ndarray) -> bool:
    if not _name_has(name, POOLED_MARKERS):
        return False
    return tensor.ndim == 1 or (tensor.ndim == 2 and tensor.shape[0] > 0)


def _pooled_row(tensor: np.ndarray) -> np.ndarray:
    row = tensor[0] if tensor.ndim == 2 else tensor
    return np.array(row, dtype=np.float32)


def _is_last_hidden(name: str, tensor: np.ndarray) -> bool:
    return (
        _name_has(name, HIDDEN_MARKERS)
        and tensor.ndim == 3
        and tensor.shape[0] > 0
        and tensor.shape[1] > 0
    )


def _mean_over_sequence(tensor: np.ndarray) -> np.ndarray:
    hidden = np.asarray(tensor[0], dtype=np.float32)
    return hidden.sum(axis=0) / np.float32(hidden.shape[0])


def _is_float(name: str, tensor: np.ndarray) -> bool:
    return np.issubdtype(tensor.dtype, np.floating)


def _flatten(tensor: np.ndarray) -> np.ndarray:
    return np.array(tensor, dtype=np.float32).ravel(order="C")


STRATEGIES = (
    ExtractionStrategy("pooled", _is_pooled, _pooled_row),
    ExtractionStrategy("mean_last_hidden", _is_last_hidden, _mean_over_sequence),
    ExtractionStrategy("first_float", _is_float, _flatten),
)


def resolve_with_strategy(outputs: Dict[str, np.ndarray]) -> Tuple[np.ndarray, str]:
    """
    Resolve the embedding and report which strategy produced it.

    Args:
        outputs: Output name -> tensor, in model declaration order

    Returns:
        (1-D float32 vector, strategy name). The vector is empty and the
        name is EMPTY_STRATEGY when no strategy matched.
    """
    arrays = [(name, np.asarray(tensor)) for name, tensor in outputs.items()]

    for strategy in STRATEGIES:
        for name, tensor in arrays:
            if strategy.matches(name, tensor):
                return strategy.extract(tensor), strategy.name

    return np.array([], dtype=np.float32), EMPTY_STRATEGY


def resolve_embedding(outputs: Dict[str, np.ndarray]) -> np.ndarray:
    """Resolve the embedding vector from a model's named outputs."""
    vector, _ = resolve_with_strategy(outputs)
    return vector
