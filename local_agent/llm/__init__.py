"""Generation engines."""

from .engine import GenerationEngine, GenerationOptions, TokenCallback
from .ollama import OllamaEngine

__all__ = [
    "GenerationEngine",
    "GenerationOptions",
    "TokenCallback",
    "OllamaEngine",
]
