"""Extractive summarizer used when the AI provider is unavailable."""

import math
import re

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")

KEY_PHRASES = (
    "important",
    "significant",
    "key",
    "main",
    "primary",
    "central",
    "essential",
    "critical",
    "crucial",
    "vital",
    "in summary",
    "to summarize",
    "in conclusion",
    "therefore",
    "overall",
    "ultimately",
    "finally",
)


def split_sentences(text: str) -> list[str]:
    return SENTENCE_PATTERN.findall(text)


def _score(sentence: str, index: int, total: int) -> int:
    score = 0
    if index < 3:
        score += 2
    if index > total - 4:
        score += 1

    # Leading whitespace yields an empty first token, which is counted
    words = len(re.split(r"\s+", sentence))
    if 5 < words < 25:
        score += 2

    lowered = sentence.lower()
    score += 2 * sum(1 for phrase in KEY_PHRASES if phrase in lowered)
    return score


def generate_fallback_summary(text: str, sentence_count: int = 3) -> str:
    """Pick the ``sentence_count`` highest scoring sentences, in original order.

    Sentences near the start or end, of medium length, or containing
    signposting phrases score higher. Short texts come back unchanged.
    """
    if not text:
        return ""

    sentences = split_sentences(text)
    if len(sentences) <= sentence_count:
        return text

    total = len(sentences)
    scored = [(_score(sentence, i, total), i, sentence.strip()) for i, sentence in enumerate(sentences)]
    # sorted() is stable, so ties keep document order
    top = sorted(scored, key=lambda item: -item[0])[:sentence_count]
    top.sort(key=lambda item: item[1])
    return " ".join(sentence for _, _, sentence in top)


def sentence_count_for_length(length: str, text: str) -> int:
    """Map a ``short``/``medium``/``long`` preference to a sentence budget."""
    total = len(split_sentences(text))
    if length == "short":
        return max(1, min(2, math.ceil(total * 0.1)))
    if length == "long":
        return max(5, math.ceil(total * 0.3))
    return max(3, math.ceil(total * 0.2))
