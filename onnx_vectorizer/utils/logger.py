"""
Logging utility for the vectorizer with inference timing and call metrics.
"""
import time
import logging
import threading
from typing import Optional, Dict, Any, Union
from enum import Enum
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class LogLevel(Enum):
    """Log verbosity levels."""
    MINIMAL = "minimal"      # Only errors and warnings
    STANDARD = "standard"    # Model lifecycle and slow runs
    VERBOSE = "verbose"      # Per-call details (debugging)

    @classmethod
    def parse(cls, value: Union[str, "LogLevel"]) -> "LogLevel":
        """Accept a LogLevel or its string value; unknown strings mean STANDARD."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.STANDARD


class PerformanceTimer:
    """Track operation timing and emit warnings for slow operations."""

    def __init__(self, operation: str, warn_threshold_ms: float = 3000):
        self.operation = operation
        self.warn_threshold_ms = warn_threshold_ms
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration_ms = self.elapsed_ms()

        if exc_type is not None:
            logger.debug(f"{self.operation} failed after {duration_ms:.0f}ms")
        elif duration_ms > self.warn_threshold_ms:
            logger.warning(
                f"⚠️ Slow operation: {self.operation} took {duration_ms:.0f}ms "
                f"(threshold: {self.warn_threshold_ms:.0f}ms)"
            )
        else:
            logger.debug(f"✓ {self.operation} completed in {duration_ms:.0f}ms")

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        if self.start_time is not None and self.end_time is not None:
            return (self.end_time - self.start_time) * 1000
        elif self.start_time is not None:
            return (time.perf_counter() - self.start_time) * 1000
        return 0


class VectorizerLogger:
    """Component logger with a verbosity level and thread-safe call counters."""

    def __init__(self, name: str, level: LogLevel = LogLevel.STANDARD, verbose: bool = False):
        self.name = name
        self.level = LogLevel.VERBOSE if verbose else level
        self.metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def _should_log(self, required_level: LogLevel) -> bool:
        hierarchy = {
            LogLevel.MINIMAL: 0,
            LogLevel.STANDARD: 1,
            LogLevel.VERBOSE: 2
        }
        return hierarchy[self.level] >= hierarchy[required_level]

    def info(self, message: str, level: LogLevel = LogLevel.STANDARD):
        """Log info message if level permits."""
        if self._should_log(level):
            logger.info(f"[{self.name}] {message}")

    def debug(self, message: str):
        """Log debug message (verbose only)."""
        if self._should_log(LogLevel.VERBOSE):
            logger.debug(f"[{self.name}] {message}")

    def warning(self, message: str):
        """Log warning (always shown)."""
        logger.warning(f"[{self.name}] ⚠️ {message}")

    def error(self, message: str, exc: Optional[Exception] = None):
        """Log error (always shown)."""
        if exc:
            logger.error(f"[{self.name}] ❌ {message}: {exc}")
        else:
            logger.error(f"[{self.name}] ❌ {message}")

    def increment(self, key: str, amount: int = 1):
        """Bump a counter. Safe to call from concurrent embed() calls."""
        with self._lock:
            self.metrics[key] = self.metrics.get(key, 0) + amount

    def metric(self, key: str, value: Any):
        """Record a metric."""
        with self._lock:
            self.metrics[key] = value
        self.debug(f"📊 {key}: {value}")

    @contextmanager
    def timer(self, operation: str, warn_threshold_ms: float = 3000):
        """Time an operation; PerformanceTimer warns when it is slow."""
        timer = PerformanceTimer(f"[{self.name}] {operation}", warn_threshold_ms)
        with timer:
            yield timer

    def get_summary(self) -> str:
        """Get summary of recorded metrics."""
        with self._lock:
            items = sorted(self.metrics.items())

        lines = [f"\n{'='*60}", f"Vectorizer Metrics: {self.name}", f"{'='*60}"]
        for key, value in items:
            lines.append(f"  {key}: {value}")
        lines.append("=" * 60)
        return "\n".join(lines)


def create_logger(name: str, level: Union[str, LogLevel] = LogLevel.STANDARD,
                  verbose: bool = False) -> VectorizerLogger:
    """Factory function to create a VectorizerLogger."""
    return VectorizerLogger(name, LogLevel.parse(level), verbose)
