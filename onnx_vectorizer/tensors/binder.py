"""
Input Binder - Maps built tensors onto the input names a model declares.

Exported transformer models mostly agree on 'input_ids', 'attention_mask' and
'token_type_ids', but casing and element types vary between exports. Names
are matched case-insensitively and each array is cast to the declared type.
"""
import logging
from typing import Dict, NamedTuple, Optional, Sequence

import numpy as np

from ..errors import InferenceError
from .builder import InputTensorSet

logger = logging.getLogger(__name__)

# Canonical input name -> InputTensorSet field
CANONICAL_INPUTS = {
    "input_ids": "ids",
    "attention_mask": "attention_mask",
    "token_type_ids": "token_type_ids",
}

# onnxruntime element type strings -> numpy dtypes
_ONNX_DTYPES = {
    "tensor(int64)": np.int64,
    "tensor(int32)": np.int32,
    "tensor(float)": np.float32,
    "tensor(double)": np.float64,
}


class InputSpec(NamedTuple):
    """A declared model input: its original name and onnxruntime type string."""
    name: str
    type: Optional[str] = None


def _cast(array: np.ndarray, onnx_type: Optional[str], name: str = "") -> np.ndarray:
    dtype = _ONNX_DTYPES.get(onnx_type)
    if dtype is None or array.dtype == dtype:
        return array

    if np.issubdtype(dtype, np.integer) and array.size:
        limits = np.iinfo(dtype)
        if array.min() < limits.min or array.max() > limits.max:
            raise InferenceError(
                f"Input '{name}' has values outside the {onnx_type} range "
                f"[{limits.min}, {limits.max}]"
            )
    return array.astype(dtype)


def bind_inputs(tensors: InputTensorSet, signature: Sequence[InputSpec]) -> Dict[str, np.ndarray]:
    """
    Build the feed dict for a model run.

    Every canonical role whose name the model declares is bound under the
    model's own spelling of that name. When the model declares none of them,
    the ids are bound to its first input as a best-effort fallback. Shapes
    are not checked; a mismatch fails in the run itself.

    Args:
        tensors: Per-call input arrays
        signature: Declared model inputs, in declaration order

    Returns:
        Mapping of model input name to array

    Raises:
        InferenceError: A value does not fit the declared integer type
    """
    declared = {spec.name.lower(): spec for spec in signature}
    feed: Dict[str, np.ndarray] = {}

    for canonical, field_name in CANONICAL_INPUTS.items():
        spec = declared.get(canonical)
        if spec is not None:
            feed[spec.name] = _cast(getattr(tensors, field_name), spec.type, spec.name)

    if not feed and signature:
        first = signature[0]
        logger.debug(f"No canonical inputs declared, binding ids to '{first.name}'")
        feed[first.name] = _cast(tensors.ids, first.type, first.name)

    return feed
