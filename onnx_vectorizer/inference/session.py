"""
Model Session - Lifecycle owner and invoker for an onnxruntime session.

The session is loaded once, shared read-only by every call, and released
exactly once. onnxruntime allows concurrent run() calls on one session, so
runs take no lock; release must not overlap a run and is synchronized by
the owner.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

try:
    import onnxruntime as ort
except ImportError:
    ort = None

from ..errors import InferenceError, ModelLoadError, SessionDisposedError
from ..tensors import InputSpec

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle states of a ModelSession."""
    UNLOADED = "unloaded"    # model file missing, tolerated at construction
    READY = "ready"
    DISPOSED = "disposed"


class OutputSpec(NamedTuple):
    """A declared model output. Shape entries may be symbolic (str) or None."""
    name: str
    shape: Tuple[Any, ...] = ()
    type: Optional[str] = None


class ModelSession:
    """Explicit ownership object around an onnxruntime InferenceSession."""

    def __init__(self, session: Any = None, model_path: Optional[str] = None):
        """
        Wrap an already-created session.

        Args:
            session: Object with the InferenceSession surface
                (get_inputs / get_outputs / run), or None for an unloaded model
            model_path: Where the model was loaded from, for reporting
        """
        self.model_path = model_path
        self._session = session

        if session is None:
            self.state = SessionState.UNLOADED
            self.inputs: List[InputSpec] = []
            self.outputs: List[OutputSpec] = []
            return

        self.state = SessionState.READY
        self.inputs = [
            InputSpec(i.name, getattr(i, "type", None)) for i in session.get_inputs()
        ]
        self.outputs = [
            OutputSpec(o.name, tuple(getattr(o, "shape", None) or ()), getattr(o, "type", None))
            for o in session.get_outputs()
        ]

    @classmethod
    def load(
        cls,
        candidates: Sequence[Path],
        providers: Optional[List[str]] = None,
        allow_missing: bool = False,
    ) -> "ModelSession":
        """
        Load the first existing model file among the candidate paths.

        Args:
            candidates: Paths to try, in order
            providers: onnxruntime execution providers
            allow_missing: Return an UNLOADED session instead of raising when
                no candidate exists

        Returns:
            ModelSession in READY (or UNLOADED) state

        Raises:
            ModelLoadError: No candidate exists, or onnxruntime rejected the file
        """
        if ort is None:
            raise ModelLoadError(
                "onnxruntime is required. Install with: pip install onnxruntime"
            )

        for path in candidates:
            if not Path(path).is_file():
                continue

            logger.info(f"Loading ONNX model: {path}")
            try:
                session = ort.InferenceSession(str(path), providers=providers or None)
            except Exception as e:
                raise ModelLoadError(f"Could not load ONNX model {path}: {e}") from e

            model = cls(session, model_path=str(path))
            logger.info(
                f"Model loaded. Inputs: {[i.name for i in model.inputs]}, "
                f"outputs: {[o.name for o in model.outputs]}"
            )
            return model

        tried = ", ".join(str(p) for p in candidates)
        if allow_missing:
            logger.warning(f"ONNX model not found, embeddings unavailable. Tried: {tried}")
            return cls(None, model_path=str(candidates[0]) if candidates else None)

        raise ModelLoadError(f"ONNX model file not found. Tried: {tried}")

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    def ensure_ready(self):
        """Raise the error matching the current state unless READY."""
        if self.state is SessionState.DISPOSED:
            raise SessionDisposedError("Model session has been released")
        if self.state is SessionState.UNLOADED:
            raise ModelLoadError(
                f"ONNX model is not loaded: {self.model_path}. "
                "Check VECTORIZER_MODEL_PATH or fetch the model file."
            )

    def run(self, feed: Dict[str, np.ndarray]) -> Dict[str, np.ndarray]:
        """
        Run the model once.

        Args:
            feed: Model input name -> array

        Returns:
            Tensor outputs keyed by lower-cased output name, in declaration
            order. Sequence and map outputs (lists / dicts) are left out.

        Raises:
            InferenceError: The runtime rejected the inputs or failed mid-run
        """
        self.ensure_ready()
        session = self._session

        try:
            values = session.run(None, feed)
        except Exception as e:
            raise InferenceError(f"Model inference failed: {e}") from e

        outputs = {}
        for spec, value in zip(self.outputs, values):
            if not isinstance(value, np.ndarray):
                logger.debug(f"Skipping non-tensor output '{spec.name}' ({type(value).__name__})")
                continue
            outputs[spec.name.lower()] = value
        return outputs

    def release(self):
        """Drop the runtime session. Later calls are no-ops."""
        if self.state is SessionState.DISPOSED:
            logger.debug("Model session already released")
            return

        self._session = None
        self.state = SessionState.DISPOSED
        logger.info(f"Model session released: {self.model_path}")
