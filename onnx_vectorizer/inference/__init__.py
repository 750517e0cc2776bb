"""
Inference Module - Owns the loaded ONNX model and runs it.
"""
from .session import ModelSession, OutputSpec, SessionState

__all__ = ["ModelSession", "OutputSpec", "SessionState"]
