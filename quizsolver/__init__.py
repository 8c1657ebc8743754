from quizsolver.highlight import HighlightedAnswer, clean_answer_text, highlight
from quizsolver.normalizer import AIResponse, SolveResponse
from quizsolver.runner import FallbackResolver, configure, resolve, solve_question

__all__ = [
    "AIResponse",
    "FallbackResolver",
    "HighlightedAnswer",
    "SolveResponse",
    "clean_answer_text",
    "configure",
    "highlight",
    "resolve",
    "solve_question",
]
