from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

TransactionType = Literal["income", "expense"]
ApplicableType = Literal["income", "expense", "both"]
ResultSource = Literal["rule", "history", "similarity", "none"]
RuleOrigin = Literal["system", "user", "learned"]

TRANSACTION_TYPES: tuple[str, ...] = ("income", "expense")


def _clean_keywords(value: list[str]) -> list[str]:
    keywords: list[str] = []
    seen = set()
    for raw in value:
        keyword = str(raw).strip()
        if keyword and keyword not in seen:
            keywords.append(keyword)
            seen.add(keyword)
    if not keywords:
        raise ValueError("a rule needs at least one keyword")
    return keywords


def _clean_category(value: str) -> str:
    category = value.strip()
    if not category:
        raise ValueError("category must not be empty")
    return category


class Category(BaseModel):
    name: str
    id: Optional[str] = None  # taxonomy id, when the collaborator has one


class RuleDraft(BaseModel):
    """Caller-supplied rule fields. Ids and timestamps are assigned by the store."""

    name: str
    keywords: list[str]
    category: str
    applicable_type: ApplicableType = "both"
    active: bool = True
    priority: int = 1
    origin: RuleOrigin = "user"

    @field_validator("keywords")
    @classmethod
    def _keywords_not_empty(cls, value: list[str]) -> list[str]:
        return _clean_keywords(value)

    @field_validator("category")
    @classmethod
    def _category_not_empty(cls, value: str) -> str:
        return _clean_category(value)


class CategorizationRule(RuleDraft):
    id: str
    created_at: datetime

    def applies_to(self, transaction_type: str) -> bool:
        return self.applicable_type in (transaction_type, "both")


class RulePatch(BaseModel):
    name: Optional[str] = None
    keywords: Optional[list[str]] = None
    category: Optional[str] = None
    applicable_type: Optional[ApplicableType] = None
    active: Optional[bool] = None
    priority: Optional[int] = None

    @field_validator("keywords")
    @classmethod
    def _keywords_not_empty(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return None if value is None else _clean_keywords(value)

    @field_validator("category")
    @classmethod
    def _category_not_empty(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_category(value)


class HistoryPattern(BaseModel):
    normalized_description: str
    category: str
    occurrence_count: int = Field(default=1, ge=1)
    last_used: datetime


class CategorizationResult(BaseModel):
    matched: bool
    category: Optional[str]
    confidence: float = Field(ge=0.0, le=1.0)
    source: ResultSource
    matched_rule_id: Optional[str] = None
    rule_name: Optional[str] = None


class CanonicalTransaction(BaseModel):
    date: str  # YYYY-MM-DD
    description: str
    amount: float = Field(gt=0)  # sign lives in `type`
    type: TransactionType

    @field_validator("date")
    @classmethod
    def _valid_calendar_date(cls, value: str) -> str:
        return datetime.strptime(value, "%Y-%m-%d").date().isoformat()


class ImportedTransaction(CanonicalTransaction):
    line: int
    original_date: str
    original_description: str
    original_amount: str


class CsvSummary(BaseModel):
    total: int = 0
    valid: int = 0
    invalid: int = 0
    income_count: int = 0
    expense_count: int = 0


class CsvProcessingOutcome(BaseModel):
    transactions: list[ImportedTransaction] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    summary: CsvSummary = Field(default_factory=CsvSummary)
    delimiter: Optional[str] = None


class CategorizedTransaction(BaseModel):
    transaction: CanonicalTransaction
    category: str
    result: CategorizationResult


class CategorizationStats(BaseModel):
    total: int
    categorized: int
    uncategorized: int
    high_confidence: int
    medium_confidence: int
    low_confidence: int
    accuracy: float
