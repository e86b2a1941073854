# dailyluck/jrrp/logic/__init__.py
from .evaluator import ExpressionError, evaluate
from .expression_cache import ExpressionCache, ScoreCacheEntry
from .formatter import DisplayConfig, DisplayMode, ScoreFormatter
from .generator import ExpressionGenerator

__all__ = [
    "ExpressionError", "evaluate",
    "ExpressionCache", "ScoreCacheEntry",
    "DisplayConfig", "DisplayMode", "ScoreFormatter",
    "ExpressionGenerator",
]
