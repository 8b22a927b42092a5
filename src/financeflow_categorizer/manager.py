import threading
from collections.abc import Iterable

from financeflow_categorizer.classifiers.base import Classifier
from financeflow_categorizer.classifiers.history import HistoryClassifier
from financeflow_categorizer.classifiers.rules import RuleClassifier
from financeflow_categorizer.core.settings import EngineSettings
from financeflow_categorizer.domain.text import normalize
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import (
    TRANSACTION_TYPES,
    CanonicalTransaction,
    CategorizationResult,
    CategorizationRule,
    CategorizationStats,
    CategorizedTransaction,
    HistoryPattern,
    TransactionType,
)
from financeflow_categorizer.stores.history import HistoryIndex
from financeflow_categorizer.stores.rules import RuleStore

logger = get_logger(__name__)

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5


class CategorizationEngine:
    """
    Staged categorization: rules first, then history. The first stage that
    returns a decision wins; nothing is blended.
    """

    def __init__(
        self,
        rules: RuleStore,
        history: HistoryIndex,
        settings: EngineSettings | None = None,
    ):
        self.settings = settings or EngineSettings()
        self.rules = rules
        self.history = history

        # 1. Rules (authoritative, fixed confidence)
        self.rule_classifier = RuleClassifier(rules, self.settings)
        # 2. History (frequency weighted)
        self.history_classifier = HistoryClassifier(history)

        self.classifiers: list[Classifier] = [self.rule_classifier, self.history_classifier]
        # The duplicate-rule check and the insert it guards must not interleave.
        self._learn_lock = threading.Lock()

    def no_match(self) -> CategorizationResult:
        return CategorizationResult(
            matched=False,
            category=self.settings.uncategorized_label,
            confidence=0.0,
            source="none",
        )

    def classify(self, description: str, transaction_type: TransactionType) -> CategorizationResult:
        if not isinstance(description, str):
            raise TypeError(f"description must be a string, got {type(description).__name__}")
        if transaction_type not in TRANSACTION_TYPES:
            raise ValueError(f"transaction_type must be one of {TRANSACTION_TYPES}, got {transaction_type!r}")

        normalized_description = normalize(description)
        if not normalized_description:
            return self.no_match()

        for classifier in self.classifiers:
            classifier_name = classifier.__class__.__name__
            result = classifier.classify(normalized_description, transaction_type)
            if result:
                logger.debug(
                    "[ENGINE] %s matched '%s' -> '%s' (confidence: %.2f)",
                    classifier_name,
                    description[:50],
                    result.category,
                    result.confidence,
                )
                return result
            logger.debug("[ENGINE] %s returned: None", classifier_name)

        logger.debug("[ENGINE] No stage matched '%s'.", description[:50])
        return self.no_match()

    def classify_batch(
        self, descriptions: Iterable[str], transaction_type: TransactionType
    ) -> list[CategorizationResult]:
        return [self.classify(description, transaction_type) for description in descriptions]

    def classify_transactions(
        self, transactions: Iterable[CanonicalTransaction]
    ) -> list[CategorizedTransaction]:
        categorized = []
        for transaction in transactions:
            result = self.classify(transaction.description, transaction.type)
            categorized.append(CategorizedTransaction(
                transaction=transaction,
                category=result.category or self.settings.uncategorized_label,
                result=result,
            ))
        return categorized

    def learn_from_override(
        self, description: str, category: str, transaction_type: TransactionType
    ) -> CategorizationRule | None:
        """
        Remember a manual categorization.

        Adds a learned rule built from the first significant tokens (unless a
        custom rule for the category already shares one) and records the
        confirmation in history.
        """
        if not isinstance(description, str) or not isinstance(category, str):
            raise TypeError("description and category must be strings")
        if transaction_type not in TRANSACTION_TYPES:
            raise ValueError(f"transaction_type must be one of {TRANSACTION_TYPES}, got {transaction_type!r}")
        if not category.strip():
            raise ValueError("category must not be empty")
        if category.strip().lower() == self.settings.uncategorized_label.lower():
            raise ValueError(f"'{category.strip()}' is the no-match label and cannot be learned")

        logger.info("[ENGINE] Override: '%s' -> '%s' (%s)", description[:50], category, transaction_type)
        with self._learn_lock:
            rule = self.rule_classifier.learn_rule(description, category, transaction_type)
            self.history_classifier.learn(description, category, transaction_type)
        return rule

    def confirm(self, description: str, category: str) -> HistoryPattern | None:
        return self.history.observe(description, category)

    def summarize(self, results: list[CategorizationResult]) -> CategorizationStats:
        total = len(results)
        categorized = sum(1 for result in results if result.matched)
        return CategorizationStats(
            total=total,
            categorized=categorized,
            uncategorized=total - categorized,
            high_confidence=sum(1 for r in results if r.confidence >= HIGH_CONFIDENCE),
            medium_confidence=sum(1 for r in results if MEDIUM_CONFIDENCE <= r.confidence < HIGH_CONFIDENCE),
            low_confidence=sum(1 for r in results if 0 < r.confidence < MEDIUM_CONFIDENCE),
            accuracy=categorized / total if total else 0.0,
        )

    def stats(self, descriptions: list[str], transaction_type: TransactionType) -> CategorizationStats:
        return self.summarize(self.classify_batch(descriptions, transaction_type))
