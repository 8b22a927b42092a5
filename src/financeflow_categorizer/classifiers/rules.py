from financeflow_categorizer.core.settings import EngineSettings
from financeflow_categorizer.domain.text import normalize, tokenize
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import (
    CategorizationResult,
    CategorizationRule,
    RuleDraft,
    TransactionType,
)
from financeflow_categorizer.stores.rules import RuleStore

from .base import Classifier

logger = get_logger(__name__)


class RuleClassifier(Classifier):
    def __init__(self, store: RuleStore, settings: EngineSettings | None = None):
        self.store = store
        self.settings = settings or EngineSettings()

    def ordered_rules(self, transaction_type: TransactionType) -> list[CategorizationRule]:
        # sorted() is stable: equal priorities keep registration order.
        rules = self.store.list(active_only=True, transaction_type=transaction_type)
        return sorted(rules, key=lambda rule: rule.priority)

    def match(self, normalized_description: str, transaction_type: TransactionType) -> CategorizationRule | None:
        for rule in self.ordered_rules(transaction_type):
            for keyword in rule.keywords:
                normalized_keyword = normalize(keyword)
                if normalized_keyword and normalized_keyword in normalized_description:
                    return rule
        return None

    def classify(
        self, normalized_description: str, transaction_type: TransactionType
    ) -> CategorizationResult | None:
        rule = self.match(normalized_description, transaction_type)
        if rule is None:
            return None
        return CategorizationResult(
            matched=True,
            category=rule.category,
            confidence=self.settings.rule_confidence,
            source="rule",
            matched_rule_id=rule.id,
            rule_name=rule.name,
        )

    def learn(self, description: str, category: str, transaction_type: TransactionType) -> None:
        self.learn_rule(description, category, transaction_type)

    def learn_rule(
        self, description: str, category: str, transaction_type: TransactionType
    ) -> CategorizationRule | None:
        keywords = tokenize(description)[: self.settings.learned_keyword_count]
        if not keywords:
            logger.info("[RULES] No usable keywords in '%s'; no rule learned.", description[:50])
            return None

        for rule in self.store.custom_rules():
            if rule.category != category:
                continue
            existing = {normalize(keyword) for keyword in rule.keywords}
            if existing.intersection(keywords):
                logger.info(
                    "[RULES] Rule '%s' already covers %s for '%s'; skipping.",
                    rule.name,
                    ", ".join(sorted(existing.intersection(keywords))),
                    category,
                )
                return None

        return self.store.add(RuleDraft(
            name=f"Regra para {category}",
            keywords=keywords,
            category=category,
            applicable_type=transaction_type,
            priority=self.store.next_priority(),
            origin="learned",
        ))
