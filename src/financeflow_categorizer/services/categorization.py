import asyncio
from time import perf_counter

from pydantic import BaseModel, Field

from financeflow_categorizer.classifiers.suggestion import CategorySuggester
from financeflow_categorizer.ingestion.banks import get_adapter
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.manager import CategorizationEngine
from financeflow_categorizer.models import (
    CategorizationResult,
    CategorizationRule,
    CategorizationStats,
    CategorizedTransaction,
    Category,
    CsvProcessingOutcome,
    TransactionType,
)

logger = get_logger(__name__)


class ImportReport(BaseModel):
    outcome: CsvProcessingOutcome
    categorized: list[CategorizedTransaction] = Field(default_factory=list)
    stats: CategorizationStats | None = None


class CategorizationPipeline:
    """
    Async facade over the synchronous engine. Engine calls are CPU-bound and
    run in a worker thread so the event loop stays responsive.
    """

    def __init__(self, engine: CategorizationEngine) -> None:
        self.engine = engine

    async def predict(self, description: str, transaction_type: TransactionType) -> CategorizationResult:
        return await asyncio.to_thread(self.engine.classify, description, transaction_type)

    async def predict_batch(
        self, descriptions: list[str], transaction_type: TransactionType
    ) -> list[CategorizationResult]:
        return await asyncio.to_thread(self.engine.classify_batch, descriptions, transaction_type)

    async def stats(self, descriptions: list[str], transaction_type: TransactionType) -> CategorizationStats:
        return await asyncio.to_thread(self.engine.stats, descriptions, transaction_type)

    async def learn(
        self, description: str, category: str, transaction_type: TransactionType
    ) -> CategorizationRule | None:
        return await asyncio.to_thread(self.engine.learn_from_override, description, category, transaction_type)

    async def suggest(self, description: str, categories: list[Category]) -> CategorizationResult:
        suggester = CategorySuggester(categories, uncategorized_label=self.engine.settings.uncategorized_label)
        return await asyncio.to_thread(suggester.suggest, description)

    def _import_sync(self, content: str, bank: str | None, categorize: bool) -> ImportReport:
        adapter = get_adapter(bank)
        start = perf_counter()
        outcome = adapter.process(content)
        report = ImportReport(outcome=outcome)

        if categorize and outcome.transactions:
            report.categorized = self.engine.classify_transactions(outcome.transactions)
            report.stats = self.engine.summarize([item.result for item in report.categorized])

        logger.info(
            "[IMPORT] %s: %d of %d rows imported, %d categorized (%.1f ms).",
            adapter.name,
            outcome.summary.valid,
            outcome.summary.total,
            report.stats.categorized if report.stats else 0,
            (perf_counter() - start) * 1000,
        )
        return report

    async def import_csv(self, content: str, bank: str | None = None, categorize: bool = True) -> ImportReport:
        return await asyncio.to_thread(self._import_sync, content, bank, categorize)
