"""
Cell-level parsing helpers for bank statement CSV exports.

All functions are total: malformed input yields an empty/``None`` result
instead of raising, so a single bad row never aborts an import.
"""

import csv
import re
from datetime import date

from financeflow_categorizer.domain.text import normalize
from financeflow_categorizer.models import TransactionType

CANDIDATE_SEPARATORS = (",", ";", "\t", "|")
SEPARATOR_SAMPLE_LINES = 5

COLUMN_PATTERNS: dict[str, re.Pattern[str]] = {
    "date": re.compile(
        r"^(data|date|dt|dia|when|data lan[çc]amento|data do lan[çc]amento|data da transa[çc][ãa]o)$",
        re.IGNORECASE,
    ),
    "description": re.compile(
        r"^(descri[çc][ãa]o|description|desc|hist[óo]rico|memo|detail|title|t[íi]tulo)$",
        re.IGNORECASE,
    ),
    "amount": re.compile(r"^(valor|value|amount|quantia|montante|vlr|valor \(r\$\))$", re.IGNORECASE),
    "type": re.compile(r"^(tipo|type|category|categoria)$", re.IGNORECASE),
}
REQUIRED_COLUMNS = ("date", "description", "amount")

_DATE_NOISE = re.compile(r"[^\d/\-.]")
_TIME_SUFFIX = re.compile(r"(?:\s+|T)\d{1,2}:\d{2}.*$")
# (pattern, year-first)
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$"), False),  # DD/MM/YYYY
    (re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$"), False),  # DD/MM/YY
    (re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})$"), True),  # YYYY/MM/DD
    (re.compile(r"^(\d{2})(\d{2})(\d{4})$"), False),  # DDMMYYYY
    (re.compile(r"^(\d{4})(\d{2})(\d{2})$"), True),  # YYYYMMDD
)

_AMOUNT_NOISE = re.compile(r"[^\d,.\-+()]")
_AMOUNT_SIGNS = re.compile(r"[\-+()]")

INCOME_TYPE_KEYWORDS = ("receita", "entrada", "credito")
EXPENSE_DESCRIPTION_KEYWORDS = ("pagamento", "compra", "debito", "saque", "transferencia enviada")


def split_row(line: str, separator: str) -> list[str]:
    """Split one CSV line, honouring quotes, and trim each cell."""
    reader = csv.reader([line], delimiter=separator)
    try:
        cells = next(reader)
    except (StopIteration, csv.Error):
        cells = line.split(separator)
    return [cell.strip().replace('"', "") for cell in cells]


def detect_separator(lines: list[str]) -> str:
    sample = [line for line in lines[:SEPARATOR_SAMPLE_LINES] if line.strip()]
    best_separator = CANDIDATE_SEPARATORS[0]
    best_average = 0.0

    for separator in CANDIDATE_SEPARATORS:
        counts = [len(split_row(line, separator)) for line in sample]
        counts = [count for count in counts if count > 1]
        average = sum(counts) / len(counts) if counts else 0.0
        if average > best_average:
            best_average = average
            best_separator = separator

    return best_separator


def map_columns(headers: list[str]) -> dict[str, int]:
    mapping: dict[str, int] = {}
    for index, header in enumerate(headers):
        clean_header = header.strip().lstrip("\ufeff").strip().lower()
        for role, pattern in COLUMN_PATTERNS.items():
            if role in mapping:
                continue
            if pattern.match(clean_header):
                mapping[role] = index
                break
    return mapping


def missing_columns(mapping: dict[str, int]) -> list[str]:
    return [role for role in REQUIRED_COLUMNS if role not in mapping]


def _expand_year(year: str) -> int:
    if len(year) == 2:
        century = date.today().year // 100 * 100
        return century + int(year)
    return int(year)


def normalize_date(raw: str) -> str:
    """Return ``YYYY-MM-DD`` or an empty string when no supported format fits."""
    if not raw or not raw.strip():
        return ""
    # Drop a trailing time part ("15/03/2024 10:32", "2024-03-15T10:32:00").
    cleaned = _DATE_NOISE.sub("", _TIME_SUFFIX.sub("", raw.strip()))

    for pattern, year_first in _DATE_PATTERNS:
        match = pattern.match(cleaned)
        if not match:
            continue
        first, month, last = match.groups()
        year, day = (first, last) if year_first else (last, first)
        try:
            parsed = date(_expand_year(year), int(month), int(day))
        except ValueError:
            continue
        return parsed.isoformat()

    return ""


def normalize_amount(raw: str) -> float | None:
    """
    Parse a Brazilian or US formatted amount, keeping its sign.

    ``1.234,56`` and ``1,234.56`` both give 1234.56; ``(50,00)`` and ``-50,00``
    give -50.0. Returns ``None`` when nothing numeric remains.
    """
    if not raw:
        return None
    cleaned = _AMOUNT_NOISE.sub("", raw.strip())
    is_negative = "-" in cleaned or cleaned.startswith("(")
    cleaned = _AMOUNT_SIGNS.sub("", cleaned)

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        parts = cleaned.split(",")
        if len(parts) == 2 and len(parts[1]) == 2:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1:
        # 1.234.567 can only be thousands grouping
        cleaned = cleaned.replace(".", "")

    try:
        value = float(cleaned)
    except ValueError:
        return None
    return -value if is_negative else value


def type_from_column(raw_type: str) -> TransactionType:
    normalized = normalize(raw_type)
    if any(keyword in normalized for keyword in INCOME_TYPE_KEYWORDS):
        return "income"
    return "expense"


def type_from_amount(amount: float, description: str) -> TransactionType:
    if amount <= 0:
        return "expense"
    normalized = normalize(description)
    if any(keyword in normalized for keyword in EXPENSE_DESCRIPTION_KEYWORDS):
        return "expense"
    return "income"


def infer_transaction_type(raw_type: str, amount: float, description: str) -> TransactionType:
    if raw_type and raw_type.strip():
        return type_from_column(raw_type)
    return type_from_amount(amount, description)
