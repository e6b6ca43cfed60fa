"""Template-based answer synthesis from retrieved context.

No language model is involved: each query type has a strategy that pulls
matching phrases out of the retrieved text, falling back to a sentence-aligned
summary when nothing matches.
"""

import logging
import re
from abc import ABC, abstractmethod

from ..domain import QueryType, SearchResult, SynthesizedResponse
from ..domain.utils import split_sentences

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 500
MAX_STEPS = 10


def summarize_context(context: str, max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """Return the context, or its leading whole sentences if it is too long.

    Sentences are added while the result stays within ``max_length``. If
    even the first sentence is longer, that sentence is returned whole.
    """
    if len(context) <= max_length:
        return context

    sentences = split_sentences(context)
    summary = ""
    for sentence in sentences:
        # the kept sentence ends with "."
        if len(summary) + len(sentence) + 1 > max_length:
            break
        summary += sentence + ". "

    if not summary and sentences:
        return sentences[0] + "."
    return summary.strip()


def calculate_confidence(results: list[SearchResult]) -> float:
    """Average similarity scaled down when fewer than five chunks were used."""
    if not results:
        return 0.0
    avg_similarity = sum(r.similarity for r in results) / len(results)
    coverage = min(len(results) / 5, 1.0)
    return max(0.0, min(avg_similarity * coverage, 1.0))


def _first_pattern_matches(patterns: list[re.Pattern], context: str) -> str | None:
    """Join all matches of the first pattern that matches anything."""
    for pattern in patterns:
        matches = [m.group(0).strip() for m in pattern.finditer(context)]
        if matches:
            return " ".join(matches)
    return None


class ResponseStrategy(ABC):
    """Builds answer text for one query type."""

    query_type: QueryType

    def __init__(self, summary_max_length: int = SUMMARY_MAX_LENGTH) -> None:
        self.summary_max_length = summary_max_length

    def summarize(self, context: str) -> str:
        return summarize_context(context, self.summary_max_length)

    @abstractmethod
    def respond(self, query: str, context: str) -> str: ...


class ProceduralStrategy(ResponseStrategy):
    """Lists steps found in the context (numbered items, ordinals, sequencers)."""

    query_type = QueryType.PROCEDURAL

    NUMBERED_STEP = re.compile(r"(?<![\w.])\d{1,2}[.)]\s+(.+?)(?=\s+\d{1,2}[.)]\s|\n|$)")
    WORD_STEPS = [
        re.compile(rf"\b(?:{words})\b[^.!?\n]+[.!?]?", re.IGNORECASE)
        for words in (
            r"first|primeiro|primeira",
            r"second|segundo|segunda",
            r"third|terceiro|terceira",
            r"next|em seguida",
            r"then|depois",
            r"finally|finalmente|por fim",
        )
    ]

    def __init__(self, summary_max_length: int = SUMMARY_MAX_LENGTH, max_steps: int = MAX_STEPS):
        super().__init__(summary_max_length)
        self.max_steps = max_steps

    def extract_steps(self, context: str) -> list[str]:
        """Collect step phrases in order of appearance, without overlaps or repeats."""
        found: list[tuple[int, int, str]] = []
        for match in self.NUMBERED_STEP.finditer(context):
            found.append((match.start(), match.end(), match.group(1).strip()))
        for pattern in self.WORD_STEPS:
            for match in pattern.finditer(context):
                found.append((match.start(), match.end(), match.group(0).strip()))

        found.sort(key=lambda item: (item[0], -item[1]))

        steps: list[str] = []
        seen: set[str] = set()
        covered_until = -1
        for start, end, text in found:
            if start < covered_until:
                continue
            covered_until = end
            if not text or text in seen:
                continue
            seen.add(text)
            steps.append(text)
            if len(steps) >= self.max_steps:
                break
        return steps

    def respond(self, query: str, context: str) -> str:
        steps = self.extract_steps(context)
        if steps:
            task = query.strip().rstrip("?!. ").lower()
            lines = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))
            return f"To {task}, follow these steps:\n\n{lines}"
        return f"Based on the available information: {self.summarize(context)}"


class FactualStrategy(ResponseStrategy):
    query_type = QueryType.FACTUAL

    def respond(self, query: str, context: str) -> str:
        return self.summarize(context)


class GeneralStrategy(ResponseStrategy):
    query_type = QueryType.GENERAL

    def respond(self, query: str, context: str) -> str:
        return self.summarize(context)


class ExplanatoryStrategy(ResponseStrategy):
    """Returns sentences introduced by a causal connector."""

    query_type = QueryType.EXPLANATORY

    PATTERNS = [
        re.compile(rf"\b(?:{words})\b[^.!?]+[.!?]", re.IGNORECASE)
        for words in (
            r"because|porque",
            r"due to|devido a",
            r"the reason|a razão",
            r"this happens|isso acontece",
        )
    ]

    def respond(self, query: str, context: str) -> str:
        return _first_pattern_matches(self.PATTERNS, context) or self.summarize(context)


class TemporalStrategy(ResponseStrategy):
    """Lists clock times, weekdays, months and dates found in the context."""

    query_type = QueryType.TEMPORAL

    PATTERNS = [
        re.compile(r"\b\d{1,2}:\d{2}\b"),
        re.compile(r"\b\d{1,2}h\d{0,2}\b"),
        re.compile(
            r"\b(?:segunda|ter[çc]a|quarta|quinta|sexta|s[áa]bado|domingo)\b",
            re.IGNORECASE,
        ),
        re.compile(
            r"\b(?:janeiro|fevereiro|mar[çc]o|abril|maio|junho|julho|agosto|"
            r"setembro|outubro|novembro|dezembro)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    ]

    def respond(self, query: str, context: str) -> str:
        found: list[str] = []
        for pattern in self.PATTERNS:
            for match in pattern.findall(context):
                if match not in found:
                    found.append(match)
        if found:
            return f"Time information found: {', '.join(found)}"
        return self.summarize(context)


class LocationalStrategy(ResponseStrategy):
    """Returns address and location phrases."""

    query_type = QueryType.LOCATIONAL

    PATTERNS = [
        re.compile(rf"\b(?:{words})\b[^.!?]+[.!?]", re.IGNORECASE)
        for words in (
            r"endereço|address",
            r"localizado|localizada|located",
            r"fica",
            r"situado|situada|situated",
        )
    ]

    def respond(self, query: str, context: str) -> str:
        return _first_pattern_matches(self.PATTERNS, context) or self.summarize(context)


class ResponseSynthesizer:
    """Turns retrieved chunks into an answer according to query type."""

    def __init__(self, summary_max_length: int = SUMMARY_MAX_LENGTH, max_steps: int = MAX_STEPS):
        self.strategies: dict[QueryType, ResponseStrategy] = {
            strategy.query_type: strategy
            for strategy in (
                ProceduralStrategy(summary_max_length, max_steps),
                FactualStrategy(summary_max_length),
                ExplanatoryStrategy(summary_max_length),
                TemporalStrategy(summary_max_length),
                LocationalStrategy(summary_max_length),
                GeneralStrategy(summary_max_length),
            )
        }

    def strategy_for(self, query_type: QueryType) -> ResponseStrategy:
        return self.strategies[query_type]

    def synthesize(
        self, query: str, results: list[SearchResult], query_type: QueryType
    ) -> SynthesizedResponse:
        """Build the answer text and its confidence.

        Args:
            query: The user's question.
            results: Retrieved chunks, best first.
            query_type: Classification of the raw query.

        Returns:
            SynthesizedResponse with text and confidence in [0, 1].
        """
        context = "\n\n".join(result.chunk_text for result in results)
        text = self.strategy_for(query_type).respond(query, context)
        logger.debug(f"Synthesized {query_type.value} answer from {len(results)} chunks")
        return SynthesizedResponse(
            text=text,
            confidence=calculate_confidence(results),
            query_type=query_type,
        )
