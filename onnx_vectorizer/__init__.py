"""
ONNX Vectorizer - Source Package

Turns token id sequences into dense embeddings with a local ONNX model.
"""
from .config import VectorizerOptions
from .errors import (
    VectorizerError,
    InvalidArgumentError,
    ModelLoadError,
    InferenceError,
    SessionDisposedError,
)
from .tensors import InputTensorSet, build_input_tensors, bind_inputs
from .inference import ModelSession, SessionState
from .pooling import resolve_embedding, resolve_with_strategy
from .embeddings import OnnxVectorizer, create_vectorizer

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "VectorizerOptions",

    # Errors
    "VectorizerError",
    "InvalidArgumentError",
    "ModelLoadError",
    "InferenceError",
    "SessionDisposedError",

    # Pipeline stages
    "InputTensorSet",
    "build_input_tensors",
    "bind_inputs",
    "ModelSession",
    "SessionState",
    "resolve_embedding",
    "resolve_with_strategy",

    # Public contract
    "OnnxVectorizer",
    "create_vectorizer",
]
