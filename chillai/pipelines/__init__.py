"""SDK pipelines."""

from .runner import ChillAI, ChillAIResult

__all__ = ["ChillAI", "ChillAIResult"]
