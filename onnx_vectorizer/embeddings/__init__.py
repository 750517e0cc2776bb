"""
Embeddings Module - Local ONNX embedding generation for semantic search.
"""
from .vectorizer import OnnxVectorizer, create_vectorizer, l2_normalize

__all__ = ["OnnxVectorizer", "create_vectorizer", "l2_normalize"]
