from pydantic import BaseModel, Field

from financeflow_categorizer.models import Category, CategorizationRule, TransactionType


class CategorizeRequest(BaseModel):
    description: str
    type: TransactionType


class BatchCategorizeRequest(BaseModel):
    descriptions: list[str]
    type: TransactionType


class SuggestRequest(BaseModel):
    description: str
    categories: list[Category] = Field(default_factory=list)


class LearnRequest(BaseModel):
    description: str
    category: str
    type: TransactionType


class LearnResponse(BaseModel):
    status: str
    rule: CategorizationRule | None = None


class ObserveRequest(BaseModel):
    description: str
    category: str


class ImportRequest(BaseModel):
    content: str
    bank: str = "generic"
    categorize: bool = True
