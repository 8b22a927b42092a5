from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from pydantic import ValidationError

from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import CategorizationRule, RuleDraft, RulePatch
from financeflow_categorizer.stores.defaults import DEFAULT_RULES
from financeflow_categorizer.stores.persistence import InMemoryPersistence, Persistence

logger = get_logger(__name__)


class RuleNotFoundError(KeyError):
    def __init__(self, rule_id: str):
        super().__init__(rule_id)
        self.rule_id = rule_id

    def __str__(self) -> str:
        return f"Rule '{self.rule_id}' not found"


class RuleStore:
    """
    Ordered collection of categorization rules.

    Rules keep their registration order; priority ordering is applied by the
    engine at match time. Every mutation is written through ``persistence``.
    """

    def __init__(self, persistence: Persistence | None = None):
        self.persistence = persistence or InMemoryPersistence()
        self.rules: list[CategorizationRule] = []
        # Held across mutation plus save; the HTTP host writes from worker threads.
        self._lock = threading.RLock()
        self.load()

    def load(self) -> None:
        rules: list[CategorizationRule] = []
        for record in self.persistence.load():
            try:
                rules.append(CategorizationRule.model_validate(record))
            except ValidationError as exc:
                logger.warning("[RULES] Skipping invalid stored rule %s: %s", record.get("id"), exc)
        with self._lock:
            self.rules = rules

    def save(self) -> None:
        with self._lock:
            self.persistence.save([rule.model_dump(mode="json") for rule in self.rules])

    def add(self, draft: RuleDraft) -> CategorizationRule:
        return self.add_many([draft])[0]

    def add_many(self, drafts: Iterable[RuleDraft]) -> list[CategorizationRule]:
        added = [
            CategorizationRule(
                **draft.model_dump(),
                id=uuid.uuid4().hex,
                created_at=datetime.now(timezone.utc),
            )
            for draft in drafts
        ]
        with self._lock:
            self.rules.extend(added)
            self.save()
        for rule in added:
            logger.info(
                "[RULES] Added %s rule '%s' -> '%s' (keywords: %s, priority: %d)",
                rule.origin,
                rule.name,
                rule.category,
                ", ".join(rule.keywords),
                rule.priority,
            )
        return added

    def get(self, rule_id: str) -> CategorizationRule:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        raise RuleNotFoundError(rule_id)

    def update(self, rule_id: str, patch: RulePatch) -> CategorizationRule:
        changes = patch.model_dump(exclude_none=True)
        with self._lock:
            current = self.get(rule_id)
            # Re-validate so invariants hold on the merged rule too.
            updated = CategorizationRule.model_validate({**current.model_dump(), **changes})
            self.rules = [updated if rule.id == rule_id else rule for rule in self.rules]
            self.save()
        logger.info("[RULES] Updated rule '%s' (%s): %s", updated.name, rule_id, ", ".join(sorted(changes)))
        return updated

    def remove(self, rule_id: str) -> CategorizationRule:
        with self._lock:
            removed = self.get(rule_id)
            self.rules = [rule for rule in self.rules if rule.id != rule_id]
            self.save()
        logger.info("[RULES] Removed rule '%s' (%s)", removed.name, rule_id)
        return removed

    def list(
        self,
        active_only: bool = False,
        transaction_type: str | None = None,
    ) -> list[CategorizationRule]:
        with self._lock:
            rules = list(self.rules)
        return [
            rule
            for rule in rules
            if (not active_only or rule.active)
            and (transaction_type is None or rule.applies_to(transaction_type))
        ]

    def custom_rules(self) -> list[CategorizationRule]:
        with self._lock:
            return [rule for rule in self.rules if rule.origin != "system"]

    def next_priority(self) -> int:
        with self._lock:
            return max((rule.priority for rule in self.rules), default=0) + 1

    def seed_defaults(self) -> list[CategorizationRule]:
        with self._lock:
            if self.rules:
                return []
            seeded = self.add_many(DEFAULT_RULES)
        logger.info("[RULES] Seeded %d default rules.", len(seeded))
        return seeded

    def __len__(self) -> int:
        return len(self.rules)
