"""
OnnxVectorizer - Token ids to dense embedding through a local ONNX model.

Works with BERT-style exports regardless of how they name or shape their
outputs:
- Builds input_ids / attention_mask / token_type_ids for one sequence
- Binds them to whatever inputs the model declares
- Runs the model once and picks the best available representation
  (pooled output, mean of last hidden state, or first float tensor)
"""
import asyncio
import dataclasses
import logging
from typing import Any, Iterable, List, Optional

import numpy as np

from ..config import VectorizerOptions
from ..errors import InferenceError, InvalidArgumentError
from ..inference import ModelSession
from ..pooling import EMPTY_STRATEGY, HIDDEN_MARKERS, POOLED_MARKERS, resolve_with_strategy
from ..tensors import bind_inputs, build_input_tensors
from ..utils import create_logger

logger = logging.getLogger(__name__)


def l2_normalize(vector: np.ndarray) -> np.ndarray:
    """L2 normalize a vector. Zero-norm and empty vectors come back unchanged."""
    if vector.size == 0:
        return vector
    norm = float(np.linalg.norm(vector.astype(np.float64)))
    if norm < 1e-12:
        return vector
    return (vector / norm).astype(np.float32)


class OnnxVectorizer:
    """
    Generates embeddings for token id sequences with an ONNX model.

    One instance owns one loaded model for its whole lifetime. embed() may be
    awaited concurrently from many tasks; each call builds its own tensors
    and the session itself is only read. close() must not overlap a call.
    """

    def __init__(
        self,
        options: Optional[VectorizerOptions] = None,
        session: Optional[ModelSession] = None
    ):
        """
        Initialize the vectorizer.

        Args:
            options: Vectorizer options (defaults come from the environment)
            session: Pre-built ModelSession; when None the model is loaded
                from options.model_path

        Raises:
            ModelLoadError: The model could not be loaded and
                options.allow_missing_model is False
        """
        self.options = options or VectorizerOptions()
        self.log = create_logger("vectorizer", self.options.log_level)

        if session is None:
            session = ModelSession.load(
                self.options.candidate_paths(),
                providers=self.options.providers,
                allow_missing=self.options.allow_missing_model
            )
        self.session = session

        if self.session.is_ready:
            self.log.info(f"Vectorizer ready. Embedding dimension: {self.embedding_dim}")

    @property
    def is_model_loaded(self) -> bool:
        """Whether a model is loaded and not yet released."""
        return self.session.is_ready

    @property
    def model_path(self) -> Optional[str]:
        return self.session.model_path or self.options.model_path

    @property
    def embedding_dim(self) -> Optional[int]:
        """Hidden dimension declared by the model outputs, if it is static."""
        for markers, rank in ((POOLED_MARKERS, 2), (HIDDEN_MARKERS, 3)):
            for spec in self.session.outputs:
                name = spec.name.lower()
                if len(spec.shape) == rank and any(m in name for m in markers):
                    last_dim = spec.shape[-1]
                    if isinstance(last_dim, (int, np.integer)) and last_dim > 0:
                        return int(last_dim)
        return None

    def _prepare(self, token_ids: Optional[Iterable[int]]) -> List[int]:
        if token_ids is None:
            raise InvalidArgumentError("token_ids must not be None")
        return list(token_ids)

    def _empty(self) -> np.ndarray:
        self.log.increment("empty_inputs")
        return np.array([], dtype=np.float32)

    def _run(self, token_ids: List[int]) -> np.ndarray:
        """Build, bind, run and resolve. Blocking; called once per embed."""
        tensors = build_input_tensors(token_ids, self.options.pad_token_id)
        feed = bind_inputs(tensors, self.session.inputs)
        self.log.debug(f"Running model on {tensors.seq_len} tokens, inputs: {list(feed)}")

        try:
            with self.log.timer("inference", self.options.slow_inference_ms):
                outputs = self.session.run(feed)
        except InferenceError as e:
            self.log.increment("errors")
            self.log.error("Inference failed", e)
            raise

        vector, strategy = resolve_with_strategy(outputs)
        self.log.increment("calls")
        self.log.increment(f"strategy.{strategy}")

        if strategy == EMPTY_STRATEGY:
            self.log.warning(f"No usable output among {list(outputs)}, returning empty vector")
        else:
            self.log.metric("last_embedding_dim", int(vector.shape[0]))
            self.log.debug(f"Resolved embedding via '{strategy}'")

        if self.options.normalize:
            vector = l2_normalize(vector)

        return vector

    def embed_sync(self, token_ids: Iterable[int]) -> np.ndarray:
        """
        Generate the embedding for one token sequence, blocking the caller.

        Args:
            token_ids: Vocabulary indices for one sequence

        Returns:
            1-D float32 array; empty for empty input
        """
        ids = self._prepare(token_ids)
        if not ids:
            return self._empty()

        return self._run(ids)

    async def embed(self, token_ids: Iterable[int], cancel_event: Any = None) -> np.ndarray:
        """
        Generate the embedding for one token sequence.

        The model runs in a worker thread so other tasks keep going. The
        cancel_event (anything with is_set(), e.g. threading.Event or
        asyncio.Event) is checked once, before the run starts; a run in
        flight is not interrupted.

        Args:
            token_ids: Vocabulary indices for one sequence
            cancel_event: Optional cooperative cancellation signal

        Returns:
            1-D float32 array of the model's hidden dimension; empty for
            empty input

        Raises:
            InvalidArgumentError: token_ids is None
            ModelLoadError: The model never loaded
            SessionDisposedError: close() was already called
            InferenceError: The model run failed
            asyncio.CancelledError: cancel_event was set before the run
        """
        ids = self._prepare(token_ids)
        if not ids:
            return self._empty()

        if cancel_event is not None and cancel_event.is_set():
            self.log.increment("cancelled")
            raise asyncio.CancelledError("Embedding cancelled before inference started")

        self.session.ensure_ready()
        return await asyncio.to_thread(self._run, ids)

    def get_model_info(self) -> dict:
        """Get information about the loaded model."""
        return {
            'model_path': self.model_path,
            'state': self.session.state.value,
            'is_model_loaded': self.is_model_loaded,
            'inputs': [{'name': i.name, 'type': i.type} for i in self.session.inputs],
            'outputs': [
                {'name': o.name, 'shape': list(o.shape), 'type': o.type}
                for o in self.session.outputs
            ],
            'embedding_dimension': self.embedding_dim,
            'providers': list(self.options.providers),
            'pad_token_id': self.options.pad_token_id,
            'normalize': self.options.normalize
        }

    def close(self):
        """Release the model session. Safe to call more than once."""
        self.session.release()
        logger.debug(self.log.get_summary())

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_vectorizer(options: Optional[VectorizerOptions] = None, **overrides) -> OnnxVectorizer:
    """
    Factory function to create an OnnxVectorizer.

    Keyword overrides replace individual option fields, e.g.
    create_vectorizer(model_path="models/e5.onnx", normalize=True).
    """
    options = options or VectorizerOptions()
    if overrides:
        options = dataclasses.replace(options, **overrides)
    return OnnxVectorizer(options)
