from __future__ import annotations

from dataclasses import dataclass

NO_EXPLANATION = "No additional explanation provided."
APOLOGY_ANSWER = "Sorry, I couldn't generate a response right now."
UNAVAILABLE_EXPLANATION = "All AI providers are currently unavailable."

FAILURE_SOURCES = frozenset({"none", "error"})


@dataclass(frozen=True)
class AIResponse:
    answer: str
    explanation: str
    source: str
    time_taken: int

    @property
    def failed(self) -> bool:
        return self.source in FAILURE_SOURCES

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "explanation": self.explanation,
            "source": self.source,
            "timeTaken": self.time_taken,
        }


@dataclass(frozen=True)
class SolveResponse:
    answer: str
    explanation: str
    confidence: float


def normalize(raw_text: str, source: str, elapsed_ms: int, split_lines: bool = True) -> AIResponse:
    """Split provider text into a one-line answer and an explanation.

    The first line is the answer and the remaining lines, joined with spaces,
    are the explanation. Text without a line break has no explanation and gets
    the placeholder instead. With ``split_lines`` off the whole text is the
    answer.
    """
    text = raw_text.strip()
    answer = text
    explanation = ""
    if split_lines:
        first, _, rest = raw_text.partition("\n")
        answer = first.strip() or text
        explanation = " ".join(rest.splitlines()).strip()

    return AIResponse(
        answer=answer,
        explanation=explanation or NO_EXPLANATION,
        source=source,
        time_taken=max(1, int(elapsed_ms)),
    )


def failure_response(source: str = "none") -> AIResponse:
    if source not in FAILURE_SOURCES:
        raise ValueError(f"Not a failure source: {source}")
    return AIResponse(
        answer=APOLOGY_ANSWER,
        explanation=UNAVAILABLE_EXPLANATION,
        source=source,
        time_taken=0,
    )


def confidence(response: AIResponse) -> float:
    if response.failed:
        return 0.0
    if response.time_taken < 2000:
        return 0.9
    if response.time_taken < 5000:
        return 0.8
    return 0.7


def to_solve_response(response: AIResponse) -> SolveResponse:
    return SolveResponse(
        answer=response.answer,
        explanation=response.explanation,
        confidence=0.0 if response.failed else 0.9,
    )
