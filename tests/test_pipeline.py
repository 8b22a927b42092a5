import pytest

from financeflow_categorizer.ingestion.banks import UnknownBankError
from financeflow_categorizer.manager import CategorizationEngine
from financeflow_categorizer.models import Category
from financeflow_categorizer.services.categorization import CategorizationPipeline
from financeflow_categorizer.stores.history import HistoryIndex
from financeflow_categorizer.stores.rules import RuleStore

NUBANK_EXPORT = (
    "date,title,amount\n"
    "2024-03-15,Uber *Trip - 15/03,-23.40\n"
    "2024-03-16,Compra no débito - Loja Nova,50.00\n"
    "2024-03-17,,10.00\n"
)


@pytest.fixture
def pipeline():
    rules = RuleStore()
    rules.seed_defaults()
    return CategorizationPipeline(CategorizationEngine(rules, HistoryIndex()))


@pytest.mark.anyio
async def test_predict(pipeline):
    res = await pipeline.predict("Uber viagem centro", "expense")
    assert res.category == "Transporte"


@pytest.mark.anyio
async def test_learn_then_predict(pipeline):
    rule = await pipeline.learn("Padaria Pão Quente", "Padaria", "expense")
    assert rule is not None

    res = await pipeline.predict("padaria pao quente", "expense")
    assert res.category == "Padaria"
    assert res.source == "rule"


@pytest.mark.anyio
async def test_suggest(pipeline):
    res = await pipeline.suggest("Farmácia São João", [Category(name="Farmácia")])
    assert res.category == "Farmácia"


@pytest.mark.anyio
async def test_import_csv_categorizes(pipeline):
    report = await pipeline.import_csv(NUBANK_EXPORT, bank="nubank")

    assert report.outcome.summary.valid == 2
    assert report.outcome.errors == ["Linha 4: Descrição vazia"]
    assert [item.transaction.description for item in report.categorized] == ["Uber *Trip", "Loja Nova"]
    assert [item.category for item in report.categorized] == ["Transporte", "Uncategorized"]
    assert report.stats.total == 2
    assert report.stats.categorized == 1


@pytest.mark.anyio
async def test_import_csv_without_categorization(pipeline):
    report = await pipeline.import_csv(NUBANK_EXPORT, bank="generic", categorize=False)
    assert report.categorized == []
    assert report.stats is None
    assert report.outcome.transactions[0].description == "Uber *Trip - 15/03"


@pytest.mark.anyio
async def test_import_csv_unknown_bank(pipeline):
    with pytest.raises(UnknownBankError):
        await pipeline.import_csv(NUBANK_EXPORT, bank="itau")
