"""
Tensors Module - Turns token ids into the named input tensors a model expects.
"""
from .builder import InputTensorSet, build_input_tensors
from .binder import CANONICAL_INPUTS, InputSpec, bind_inputs

__all__ = [
    "InputTensorSet",
    "build_input_tensors",
    "CANONICAL_INPUTS",
    "InputSpec",
    "bind_inputs",
]
