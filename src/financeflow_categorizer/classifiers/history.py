from financeflow_categorizer.models import CategorizationResult, TransactionType
from financeflow_categorizer.stores.history import HistoryIndex

from .base import Classifier


class HistoryClassifier(Classifier):
    def __init__(self, index: HistoryIndex):
        self.index = index

    def classify(
        self, normalized_description: str, transaction_type: TransactionType
    ) -> CategorizationResult | None:
        pattern = self.index.best_match(normalized_description)
        if pattern is None:
            return None
        return CategorizationResult(
            matched=True,
            category=pattern.category,
            confidence=self.index.confidence_for(pattern),
            source="history",
        )

    def learn(self, description: str, category: str, transaction_type: TransactionType) -> None:
        self.index.observe(description, category)
