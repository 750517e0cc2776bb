"""
Configuration settings for the ONNX vectorizer.

Values come from environment variables with sensible defaults. The only
setting the engine strictly needs is the model path; the rest tune the
surrounding behaviour (pad id, normalization, execution providers, logging).
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

# Base paths
BASE_DIR = Path(__file__).resolve().parent.parent
MODELS_DIR = BASE_DIR / "models"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Model settings
VECTORIZER_MODEL_PATH = os.getenv("VECTORIZER_MODEL_PATH", "models/bert_Opset18.onnx")
VECTORIZER_PROVIDERS = [
    p.strip()
    for p in os.getenv("VECTORIZER_PROVIDERS", "CPUExecutionProvider").split(",")
    if p.strip()
]

# Input / output conventions
VECTORIZER_PAD_TOKEN_ID = int(os.getenv("VECTORIZER_PAD_TOKEN_ID", "0"))
VECTORIZER_NORMALIZE = _env_bool("VECTORIZER_NORMALIZE", False)

# Logging
VECTORIZER_SLOW_INFERENCE_MS = float(os.getenv("VECTORIZER_SLOW_INFERENCE_MS", "3000"))
VECTORIZER_LOG_LEVEL = os.getenv("VECTORIZER_LOG_LEVEL", "standard")


@dataclass
class VectorizerOptions:
    """
    Options for building an OnnxVectorizer.

    Attributes:
        model_path: ONNX model file, absolute or relative to the working
            directory / project root.
        pad_token_id: Token id treated as padding when building the attention mask.
        normalize: L2 normalize returned embeddings.
        providers: onnxruntime execution providers, in priority order.
        allow_missing_model: Log a warning instead of raising when the model
            file is missing; every embed() call then raises ModelLoadError.
        slow_inference_ms: Runs slower than this are logged as warnings.
        log_level: 'minimal', 'standard' or 'verbose'.
    """

    model_path: str = VECTORIZER_MODEL_PATH
    pad_token_id: int = VECTORIZER_PAD_TOKEN_ID
    normalize: bool = VECTORIZER_NORMALIZE
    providers: List[str] = field(default_factory=lambda: list(VECTORIZER_PROVIDERS))
    allow_missing_model: bool = False
    slow_inference_ms: float = VECTORIZER_SLOW_INFERENCE_MS
    log_level: str = VECTORIZER_LOG_LEVEL

    def candidate_paths(self) -> List[Path]:
        """Paths tried, in order, when locating the model file."""
        configured = Path(self.model_path)
        candidates = [
            configured,
            BASE_DIR / configured,
            MODELS_DIR / configured.name,
        ]

        seen = set()
        unique = []
        for path in candidates:
            resolved = path.expanduser().resolve()
            if resolved not in seen:
                seen.add(resolved)
                unique.append(resolved)
        return unique
