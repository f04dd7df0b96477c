"""AI agents for prompt and script processing."""

from .analyzer import AnalysisInput, ScriptAnalyzer
from .base import BaseAgent
from .optimizer import OptimizeMode, PromptOptimizer

__all__ = ["AnalysisInput", "BaseAgent", "OptimizeMode", "PromptOptimizer", "ScriptAnalyzer"]
