from abc import ABC, abstractmethod

from financeflow_categorizer.models import CategorizationResult, TransactionType


class Classifier(ABC):
    """One stage of the categorization pipeline."""

    @abstractmethod
    def classify(
        self, normalized_description: str, transaction_type: TransactionType
    ) -> CategorizationResult | None:
        """Return a decision, or None to let the next stage try."""
        pass

    @abstractmethod
    def learn(self, description: str, category: str, transaction_type: TransactionType) -> None:
        """Learn from a confirmed (possibly overridden) categorization."""
        pass
