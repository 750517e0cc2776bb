"""
Exception types raised by the vectorizer.

All errors derive from VectorizerError so callers can catch the whole family.
"""


class VectorizerError(Exception):
    """Base class for vectorizer failures."""


class InvalidArgumentError(VectorizerError, ValueError):
    """The token sequence argument was missing (None)."""


class ModelLoadError(VectorizerError):
    """The configured ONNX model could not be found or loaded."""


class InferenceError(VectorizerError):
    """A single model run failed. Recoverable per call, never retried here."""


class SessionDisposedError(VectorizerError):
    """The model session was used after it had been released."""
