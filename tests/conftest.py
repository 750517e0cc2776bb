"""
Shared fixtures: an in-memory stand-in for onnxruntime.InferenceSession.
"""
import sys
import threading
import time
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeNode:
    """Mimics onnxruntime.NodeArg."""

    def __init__(self, name, type="tensor(float)", shape=None):
        self.name = name
        self.type = type
        self.shape = shape or []


class FakeSession:
    """
    Minimal InferenceSession surface: get_inputs, get_outputs, run.

    compute(feed) returns the output arrays in declaration order.
    """

    def __init__(self, inputs, outputs, compute, delay=0.0):
        self._inputs = [FakeNode(*spec) for spec in inputs]
        self._outputs = [FakeNode(*spec) for spec in outputs]
        self.compute = compute
        self.delay = delay
        self.feeds = []
        self._lock = threading.Lock()

    @property
    def calls(self):
        return len(self.feeds)

    def get_inputs(self):
        return self._inputs

    def get_outputs(self):
        return self._outputs

    def run(self, output_names, feed):
        with self._lock:
            self.feeds.append(feed)
        if self.delay:
            time.sleep(self.delay)
        return self.compute(feed)


BERT_INPUTS = [
    ("input_ids", "tensor(int64)", ["batch", "sequence"]),
    ("attention_mask", "tensor(int64)", ["batch", "sequence"]),
    ("token_type_ids", "tensor(int64)", ["batch", "sequence"]),
]

HIDDEN_WEIGHTS = np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float32)


def hidden_state_model(feed):
    """last_hidden_state[0, s, :] = input_ids[s] * HIDDEN_WEIGHTS."""
    ids = feed["input_ids"].astype(np.float32)
    return [ids[..., None] * HIDDEN_WEIGHTS]


@pytest.fixture
def bert_session():
    """A BERT-like export exposing only last_hidden_state with H=4."""
    return FakeSession(
        BERT_INPUTS,
        [("last_hidden_state", "tensor(float)", ["batch", "sequence", 4])],
        hidden_state_model,
    )


@pytest.fixture
def make_vectorizer():
    """Build an OnnxVectorizer around a fake session."""
    from onnx_vectorizer import ModelSession, OnnxVectorizer, VectorizerOptions

    def _make(session, **options):
        return OnnxVectorizer(VectorizerOptions(**options), session=ModelSession(session))

    return _make
