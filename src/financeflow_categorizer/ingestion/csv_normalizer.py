import re

from financeflow_categorizer.domain.parsing import (
    detect_separator,
    infer_transaction_type,
    map_columns,
    missing_columns,
    normalize_amount,
    normalize_date,
    split_row,
)
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import CsvProcessingOutcome, ImportedTransaction

logger = get_logger(__name__)

EMPTY_FILE_ERROR = "Arquivo CSV vazio"
TOO_FEW_LINES_ERROR = "CSV deve ter pelo menos uma linha de cabeçalho e uma linha de dados"
MISSING_COLUMNS_ERROR = "CSV deve conter colunas para data, descrição e valor"

_ROLE_LABELS = {"date": "data", "description": "descrição", "amount": "valor"}

_WHOLE_AMOUNT = re.compile(r"[-+(]?(?:R\$\s*)?\d[\d.]*")
_CENTS = re.compile(r"\d{2}\)?")


def _cell(columns: list[str], index: int | None) -> str:
    if index is None or index >= len(columns):
        return ""
    return columns[index]


def _rejoin_decimal_comma(columns: list[str], header_count: int, amount_index: int) -> list[str]:
    """
    Undo an unquoted decimal comma in a comma-separated row.

    ``15/03/2024,Ifood,45,90`` under a three-column header splits the amount
    into ``45`` and ``90``. Only a row with exactly one extra cell whose cell
    after the amount is two digits is rejoined.
    """
    if len(columns) != header_count + 1 or amount_index + 1 >= len(columns):
        return columns
    whole, cents = columns[amount_index], columns[amount_index + 1]
    if not _WHOLE_AMOUNT.fullmatch(whole) or not _CENTS.fullmatch(cents):
        return columns
    return columns[:amount_index] + [f"{whole},{cents}"] + columns[amount_index + 2 :]


class CsvNormalizer:
    """
    Turns raw statement CSV text into canonical transactions.

    Structural problems (empty file, no data rows, missing required columns)
    abort with a single error. Bad rows are reported as ``Linha N: ...`` and
    skipped, where N is the 1-indexed line of the input text.
    """

    def process(self, raw_text: str) -> CsvProcessingOutcome:
        if raw_text is not None and not isinstance(raw_text, str):
            raise TypeError(f"CSV content must be a string, got {type(raw_text).__name__}")
        # Drop a leading UTF-8 byte order mark.
        raw_text = (raw_text or "").lstrip("\ufeff")

        outcome = CsvProcessingOutcome()
        if not raw_text or not raw_text.strip():
            outcome.errors.append(EMPTY_FILE_ERROR)
            return outcome

        numbered_lines = [
            (number, line)
            for number, line in enumerate(raw_text.splitlines(), start=1)
            if line.strip()
        ]
        if len(numbered_lines) < 2:
            outcome.errors.append(TOO_FEW_LINES_ERROR)
            return outcome

        separator = detect_separator(raw_text.splitlines())
        outcome.delimiter = separator

        headers = split_row(numbered_lines[0][1], separator)
        mapping = map_columns(headers)
        missing = missing_columns(mapping)
        if missing:
            labels = ", ".join(_ROLE_LABELS[role] for role in missing)
            outcome.errors.append(f"{MISSING_COLUMNS_ERROR} (ausente: {labels})")
            logger.warning("[CSV] Missing required columns %s in header %s.", missing, headers)
            return outcome

        logger.debug("[CSV] Separator %r, column mapping %s.", separator, mapping)

        for number, line in numbered_lines[1:]:
            outcome.summary.total += 1
            columns = split_row(line, separator)
            if separator == ",":
                columns = _rejoin_decimal_comma(columns, len(headers), mapping["amount"])
            transaction, error = self._parse_row(number, columns, mapping)
            if error:
                outcome.errors.append(error)
                outcome.summary.invalid += 1
                continue

            outcome.transactions.append(transaction)
            outcome.summary.valid += 1
            if transaction.type == "income":
                outcome.summary.income_count += 1
            else:
                outcome.summary.expense_count += 1

        logger.info(
            "[CSV] Processed %d rows: %d valid, %d invalid (%d income, %d expense).",
            outcome.summary.total,
            outcome.summary.valid,
            outcome.summary.invalid,
            outcome.summary.income_count,
            outcome.summary.expense_count,
        )
        return outcome

    def _parse_row(
        self,
        number: int,
        columns: list[str],
        mapping: dict[str, int],
    ) -> tuple[ImportedTransaction | None, str | None]:
        original_date = _cell(columns, mapping["date"])
        original_description = _cell(columns, mapping["description"])
        original_amount = _cell(columns, mapping["amount"])
        original_type = _cell(columns, mapping.get("type"))

        parsed_date = normalize_date(original_date)
        if not parsed_date:
            return None, f'Linha {number}: Data inválida "{original_date}"'

        description = original_description.strip()
        if not description:
            return None, f"Linha {number}: Descrição vazia"

        amount = normalize_amount(original_amount)
        if not amount:
            return None, f'Linha {number}: Valor inválido "{original_amount}"'

        transaction = ImportedTransaction(
            date=parsed_date,
            description=description,
            amount=abs(amount),
            type=infer_transaction_type(original_type, amount, description),
            line=number,
            original_date=original_date,
            original_description=original_description,
            original_amount=original_amount,
        )
        return transaction, None
