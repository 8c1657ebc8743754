"""Pick out the part of an answer string that should be emphasized on display.

Rules are tried top to bottom and the first one that matches wins. Noise
prefixes (option letters, a canned preamble, markdown bold) are stripped once
before matching; text produced by a rule is never cleaned again.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional


SHORT_ANSWER_CHARS = 100
LEADING_CHARS = 60
LEADING_WORDS = 5

_NOISE_PREFIXES = (
    re.compile(r"^[A-E]\)\s*", re.I),
    re.compile(r"^\([A-E]\)\s*", re.I),
    re.compile(r"^option\s+[A-E]\s*:?\s*", re.I),
    re.compile(r"^the\s+answer\s+to\s+question\s+is\s+\*\*", re.I),
)
_BOLD = re.compile(r"\*\*")

_DETAIL = re.compile(r"^(.+?)\s+detail:\s*(.+)$", re.I)
_OPTION = re.compile(r"^([A-E])[:\s]+\s*(.+)$", re.I)
_ANSWER_IS = re.compile(r"^(?:the\s+)?(?:correct\s+)?(?:answer\s+)?(?:is|are)\s+(.+)$", re.I)
_TRAILING_PUNCT = re.compile(r"[.,;:]+$")
_QUOTED = re.compile(r'"([^"]+)"')
_FIRST_SENTENCE = re.compile(r"^(.+?[.!?])\s*(.+)$", re.S)
_HAS_DETAIL = re.compile(r"detail:\s*", re.I)


@dataclass(frozen=True)
class HighlightedAnswer:
    emphasized: str
    before: str = ""
    after: str = ""
    detail: Optional[str] = None
    rule: str = ""

    def segments(self) -> list[tuple[str, str]]:
        """(text, style) pairs in display order; style is plain, strong or muted."""
        parts = [(self.before, "plain"), (self.emphasized, "strong"), (self.after, "plain")]
        if self.detail:
            parts.append((self.detail, "muted"))
        return [(text, style) for text, style in parts if text]


@dataclass(frozen=True)
class HighlightRule:
    name: str
    apply: Callable[[str], Optional[HighlightedAnswer]]


def clean_answer_text(text: str) -> str:
    cleaned = text.strip()
    for pattern in _NOISE_PREFIXES:
        cleaned = pattern.sub("", cleaned, count=1)
    cleaned = _BOLD.sub("", cleaned)
    return cleaned.strip()


def _detail_rule(text: str) -> Optional[HighlightedAnswer]:
    match = _DETAIL.match(text)
    if not match:
        return None
    return HighlightedAnswer(
        emphasized=match.group(1).strip(),
        detail=f"detail: {match.group(2).strip()}",
        rule="detail",
    )


def _option_rule(text: str) -> Optional[HighlightedAnswer]:
    match = _OPTION.match(text)
    if not match:
        return None
    return HighlightedAnswer(emphasized=match.group(2).strip(), rule="option")


def _answer_is_rule(text: str) -> Optional[HighlightedAnswer]:
    match = _ANSWER_IS.match(text)
    if not match:
        return None
    tail = _TRAILING_PUNCT.sub("", match.group(1).strip())
    return HighlightedAnswer(emphasized=tail, rule="answer_is")


def _quoted_rule(text: str) -> Optional[HighlightedAnswer]:
    match = _QUOTED.search(text)
    if not match:
        return None
    return HighlightedAnswer(
        emphasized=match.group(0),
        before=text[: match.start()],
        after=text[match.end():],
        rule="quoted",
    )


def _short_rule(text: str) -> Optional[HighlightedAnswer]:
    if len(text) >= SHORT_ANSWER_CHARS:
        return None
    return HighlightedAnswer(emphasized=text, rule="short")


def _first_sentence_rule(text: str) -> Optional[HighlightedAnswer]:
    match = _FIRST_SENTENCE.match(text)
    if not match:
        return None
    rest = match.group(2).strip()
    return HighlightedAnswer(
        emphasized=match.group(1).strip(),
        after=f" {rest}" if rest else "",
        rule="first_sentence",
    )


def _leading_words_rule(text: str) -> Optional[HighlightedAnswer]:
    words = text.split()
    if len(words) <= LEADING_WORDS:
        return HighlightedAnswer(emphasized=text, rule="leading_words")
    cut = min(LEADING_CHARS, len(" ".join(words[:LEADING_WORDS])))
    return HighlightedAnswer(emphasized=text[:cut], after=text[cut:], rule="leading_words")


RULES: tuple[HighlightRule, ...] = (
    HighlightRule("detail", _detail_rule),
    HighlightRule("option", _option_rule),
    HighlightRule("answer_is", _answer_is_rule),
    HighlightRule("quoted", _quoted_rule),
    HighlightRule("short", _short_rule),
    HighlightRule("first_sentence", _first_sentence_rule),
    HighlightRule("leading_words", _leading_words_rule),
)


def highlight(text: str, clean: bool = True) -> HighlightedAnswer:
    cleaned = clean_answer_text(text) if clean else text
    if not cleaned:
        return HighlightedAnswer(emphasized="", before=text, rule="none")
    for rule in RULES:
        result = rule.apply(cleaned)
        if result is not None:
            return result
    # leading_words always matches
    raise AssertionError("no highlight rule matched")


def has_detail(answer: str) -> bool:
    return bool(_HAS_DETAIL.search(answer))
