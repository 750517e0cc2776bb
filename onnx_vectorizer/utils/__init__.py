"""Utility modules for the vectorizer."""
from .logger import VectorizerLogger, LogLevel, create_logger, PerformanceTimer

__all__ = [
    'VectorizerLogger',
    'LogLevel',
    'create_logger',
    'PerformanceTimer'
]
