"""
Tensor Builder - Builds the three parallel [1, seq_len] input arrays.
"""
from typing import Iterable, NamedTuple

import numpy as np


class InputTensorSet(NamedTuple):
    """Per-call model inputs. All three arrays share shape (1, seq_len)."""
    ids: np.ndarray
    attention_mask: np.ndarray
    token_type_ids: np.ndarray

    @property
    def seq_len(self) -> int:
        return int(self.ids.shape[1])


def build_input_tensors(token_ids: Iterable[int], pad_token_id: int = 0) -> InputTensorSet:
    """
    Build ids / attention mask / token type arrays for a single sequence.

    Positions holding the pad id get a 0 in the attention mask, everything
    else a 1. Token types are always 0 (single segment). No truncation is
    applied; the caller bounds the length to what the model accepts.

    Args:
        token_ids: Vocabulary indices for one sequence
        pad_token_id: Id treated as padding

    Returns:
        InputTensorSet of int64 arrays shaped (1, seq_len)
    """
    ids = np.asarray(list(token_ids), dtype=np.int64).reshape(1, -1)
    attention_mask = (ids != pad_token_id).astype(np.int64)
    token_type_ids = np.zeros_like(ids)

    return InputTensorSet(ids, attention_mask, token_type_ids)
