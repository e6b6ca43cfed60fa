"""Pure query classification logic."""

from __future__ import annotations

from ..domain import QueryType


class QueryClassifier:
    """Classify incoming questions by intent (English and Portuguese).

    Triggers are plain case-insensitive substrings tested in priority
    order; the first match wins.
    """

    TRIGGERS: tuple[tuple[QueryType, tuple[str, ...]], ...] = (
        (QueryType.PROCEDURAL, ("how", "como")),
        (QueryType.FACTUAL, ("what", "o que")),
        (QueryType.EXPLANATORY, ("why", "por que")),
        (QueryType.TEMPORAL, ("when", "quando")),
        (QueryType.LOCATIONAL, ("where", "onde")),
    )

    def classify(self, query: str) -> QueryType:
        query_lower = query.lower()

        for query_type, triggers in self.TRIGGERS:
            if any(trigger in query_lower for trigger in triggers):
                return query_type

        return QueryType.GENERAL
