"""
Bank-specific statement adapters.

Every adapter runs the generic ``CsvNormalizer`` and then removes the
boilerplate its bank wraps around descriptions, so all formats end up as the
same ``ImportedTransaction`` shape.
"""

import re

from financeflow_categorizer.ingestion.csv_normalizer import CsvNormalizer
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import CsvProcessingOutcome

logger = get_logger(__name__)


class UnknownBankError(ValueError):
    def __init__(self, bank: str):
        super().__init__(f"Unsupported bank format '{bank}'. Supported: {', '.join(sorted(BANK_ADAPTERS))}")
        self.bank = bank


class BankAdapter:
    name = "generic"
    boilerplate: tuple[re.Pattern[str], ...] = ()

    def __init__(self, normalizer: CsvNormalizer | None = None):
        self.normalizer = normalizer or CsvNormalizer()

    def clean_description(self, description: str) -> str:
        cleaned = description
        for pattern in self.boilerplate:
            cleaned = pattern.sub("", cleaned)
        cleaned = cleaned.strip()
        # Never blank out a description entirely.
        return cleaned or description

    def process(self, raw_text: str) -> CsvProcessingOutcome:
        outcome = self.normalizer.process(raw_text)
        if not self.boilerplate:
            return outcome

        outcome.transactions = [
            transaction.model_copy(update={"description": self.clean_description(transaction.description)})
            for transaction in outcome.transactions
        ]
        logger.debug("[CSV] Applied %s description cleanup to %d rows.", self.name, len(outcome.transactions))
        return outcome


class NubankAdapter(BankAdapter):
    name = "nubank"
    boilerplate = (
        re.compile(r"^(Pagamento|Compra no débito|PIX)\s*-\s*", re.IGNORECASE),
        re.compile(r"\s*-\s*\d{2}/\d{2}$"),
    )


class InterAdapter(BankAdapter):
    name = "inter"
    boilerplate = (
        re.compile(r"^(Pix enviado|Pix recebido|Compra no débito|Pagamento efetuado)\s*:\s*", re.IGNORECASE),
    )


class BradescoAdapter(BankAdapter):
    name = "bradesco"
    boilerplate = (
        re.compile(r"^(Compra com cartão|Transferência PIX|Pagto Eletron Cobranca)\s*-?\s*", re.IGNORECASE),
    )


BANK_ADAPTERS: dict[str, type[BankAdapter]] = {
    BankAdapter.name: BankAdapter,
    NubankAdapter.name: NubankAdapter,
    InterAdapter.name: InterAdapter,
    BradescoAdapter.name: BradescoAdapter,
}


def get_adapter(bank: str | None = None) -> BankAdapter:
    key = (bank or BankAdapter.name).strip().lower()
    adapter_cls = BANK_ADAPTERS.get(key)
    if adapter_cls is None:
        raise UnknownBankError(bank or "")
    return adapter_cls()
