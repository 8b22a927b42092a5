"""
Frequency table of confirmed description -> category pairs.

Lookups scan every pattern, since the overlap test (substring containment
between words) has no exact key.
"""

from __future__ import annotations

import math
import threading
from collections.abc import Iterable
from datetime import datetime, timezone

from pydantic import ValidationError

from financeflow_categorizer.core.settings import EngineSettings
from financeflow_categorizer.domain.text import normalize, words
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import HistoryPattern
from financeflow_categorizer.stores.persistence import InMemoryPersistence, Persistence

logger = get_logger(__name__)

# Labels that mean "not categorized yet" and must never be learned.
_UNCATEGORIZED_LABELS = {"sem categoria"}


class HistoryIndex:
    def __init__(
        self,
        persistence: Persistence | None = None,
        settings: EngineSettings | None = None,
    ):
        self.persistence = persistence or InMemoryPersistence()
        self.settings = settings or EngineSettings()
        self.entries: dict[str, HistoryPattern] = {}
        # Held across mutation plus save; the HTTP host writes from worker threads.
        self._lock = threading.RLock()
        self.load()

    def load(self) -> None:
        entries: dict[str, HistoryPattern] = {}
        for record in self.persistence.load():
            try:
                pattern = HistoryPattern.model_validate(record)
            except ValidationError as exc:
                logger.warning("[HISTORY] Skipping invalid stored pattern: %s", exc)
                continue
            entries[pattern.normalized_description] = pattern
        with self._lock:
            self.entries = entries

    def save(self) -> None:
        with self._lock:
            self.persistence.save([pattern.model_dump(mode="json") for pattern in self.entries.values()])

    def _is_learnable(self, category: str) -> bool:
        label = category.strip().lower()
        return bool(label) and label != self.settings.uncategorized_label.lower() and label not in _UNCATEGORIZED_LABELS

    def _record(self, description: str, category: str, used_at: datetime | None) -> HistoryPattern | None:
        key = normalize(description)
        if not key or not self._is_learnable(category):
            return None

        when = used_at or datetime.now(timezone.utc)
        existing = self.entries.get(key)
        if existing:
            updated = existing.model_copy(update={
                "category": category.strip(),
                "occurrence_count": existing.occurrence_count + 1,
                "last_used": max(existing.last_used, when) if _comparable(existing.last_used, when) else when,
            })
        else:
            updated = HistoryPattern(
                normalized_description=key,
                category=category.strip(),
                occurrence_count=1,
                last_used=when,
            )
        self.entries[key] = updated
        return updated

    def observe(
        self,
        description: str,
        category: str,
        used_at: datetime | None = None,
    ) -> HistoryPattern | None:
        with self._lock:
            pattern = self._record(description, category, used_at)
            if pattern is not None:
                self.save()
        if pattern is None:
            logger.debug("[HISTORY] Ignoring '%s' -> '%s'.", description[:50], category)
            return None
        logger.debug(
            "[HISTORY] '%s' -> '%s' (seen %d times)",
            pattern.normalized_description,
            pattern.category,
            pattern.occurrence_count,
        )
        return pattern

    def rebuild(self, records: Iterable[tuple[str, str, datetime | None]]) -> int:
        """Recompute the table from (description, category, date) triples."""
        with self._lock:
            self.entries = {}
            for description, category, used_at in records:
                if description and category:
                    self._record(description, category, used_at)
            self.save()
            count = len(self.entries)
        logger.info("[HISTORY] Rebuilt %d patterns.", count)
        return count

    def _is_candidate(self, pattern: HistoryPattern, query_words: list[str]) -> bool:
        pattern_words = pattern.normalized_description.split(" ")
        common = [
            word
            for word in pattern_words
            if len(word) > self.settings.history_short_word_length
            and any(query in word or word in query for query in query_words)
        ]
        required = min(
            self.settings.history_min_common_words,
            math.ceil(len(pattern_words) * self.settings.history_word_ratio),
        )
        return len(common) >= required

    def best_match(self, description: str) -> HistoryPattern | None:
        query_words = words(description)
        if not query_words:
            return None

        with self._lock:
            candidates = list(self.entries.values())

        best: HistoryPattern | None = None
        for pattern in candidates:
            if not self._is_candidate(pattern, query_words):
                continue
            if best is None or pattern.occurrence_count > best.occurrence_count:
                best = pattern
        return best

    def confidence_for(self, pattern: HistoryPattern) -> float:
        return min(
            self.settings.history_confidence_cap,
            pattern.occurrence_count * self.settings.history_confidence_step,
        )

    def get(self, description: str) -> HistoryPattern | None:
        return self.entries.get(normalize(description))

    def patterns(self) -> list[HistoryPattern]:
        with self._lock:
            return list(self.entries.values())

    def clear(self) -> None:
        with self._lock:
            self.entries = {}
            self.save()
        logger.info("[HISTORY] Cleared all patterns.")

    def __len__(self) -> int:
        return len(self.entries)


def _comparable(left: datetime, right: datetime) -> bool:
    return (left.tzinfo is None) == (right.tzinfo is None)
