"""Top-level package exposing ChillAI SDK entrypoints."""

from .pipelines import ChillAI, ChillAIResult

__all__ = ["ChillAI", "ChillAIResult"]
