"""
Best-effort category suggestions for a caller-supplied taxonomy.

Meant for hosts that have a category taxonomy but no rule store or history
yet. It is not a stage of ``CategorizationEngine``: a weak suggestion must
never shadow a rule or history decision.

Two passes, both resolved against the supplied categories:

1. A built-in keyword dictionary (``SUGGESTION_KEYWORDS``). A keyword hit
   resolves to the category whose id equals the entry's category id, or whose
   normalized name contains the keyword. The highest confidence wins; ties keep
   the earlier entry.
2. Category-name similarity, only when the first pass found nothing at
   ``FALLBACK_THRESHOLD`` or above.
"""

from typing import NamedTuple

from financeflow_categorizer.domain.text import normalize
from financeflow_categorizer.logger import get_logger
from financeflow_categorizer.models import CategorizationResult, Category

logger = get_logger(__name__)

NAME_CONTAINED_CONFIDENCE = 0.7
OVERLAP_CONFIDENCE_CAP = 0.6
OVERLAP_WEIGHT = 0.8
MIN_NAME_WORD_LENGTH = 3
FALLBACK_THRESHOLD = 0.5


class KeywordEntry(NamedTuple):
    category_id: str
    keywords: tuple[str, ...]
    confidence: float


SUGGESTION_KEYWORDS: tuple[KeywordEntry, ...] = (
    KeywordEntry(
        "alimentacao",
        ("restaurante", "lanchonete", "padaria", "supermercado", "mercado", "ifood",
         "uber eats", "delivery", "pizza", "hamburguer", "comida", "alimento"),
        0.9,
    ),
    KeywordEntry(
        "transporte",
        ("uber", "taxi", "combustivel", "gasolina", "posto", "onibus", "metro",
         "estacionamento", "pedagio", "transporte"),
        0.9,
    ),
    KeywordEntry(
        "saude",
        ("farmacia", "hospital", "clinica", "medico", "dentista", "laboratorio",
         "exame", "consulta", "medicamento", "saude"),
        0.9,
    ),
    KeywordEntry(
        "educacao",
        ("escola", "faculdade", "universidade", "curso", "livro", "material escolar",
         "educacao", "ensino"),
        0.9,
    ),
    KeywordEntry(
        "lazer",
        ("cinema", "teatro", "show", "festa", "bar", "balada", "viagem", "hotel",
         "lazer", "entretenimento"),
        0.8,
    ),
    KeywordEntry(
        "casa",
        ("luz", "agua", "gas", "internet", "telefone", "condominio", "aluguel", "iptu",
         "casa", "moradia"),
        0.9,
    ),
    KeywordEntry(
        "vestuario",
        ("roupa", "sapato", "calcado", "vestuario", "moda", "loja de roupa", "boutique"),
        0.8,
    ),
    KeywordEntry(
        "tecnologia",
        ("celular", "computador", "notebook", "tablet", "tecnologia", "eletronico",
         "software", "aplicativo"),
        0.8,
    ),
    KeywordEntry(
        "salario",
        ("salario", "bonus", "freelance", "dividendo", "renda", "receita",
         "pagamento recebido"),
        0.9,
    ),
)


class CategorySuggester:
    def __init__(
        self,
        categories: list[Category],
        uncategorized_label: str = "Uncategorized",
        keywords: tuple[KeywordEntry, ...] = SUGGESTION_KEYWORDS,
    ):
        self.categories = categories
        self.uncategorized_label = uncategorized_label
        self.keywords = keywords

    def _no_match(self) -> CategorizationResult:
        return CategorizationResult(
            matched=False,
            category=self.uncategorized_label,
            confidence=0.0,
            source="none",
        )

    def _suggestion(self, category: Category, confidence: float) -> CategorizationResult:
        return CategorizationResult(
            matched=True,
            category=category.name,
            confidence=confidence,
            source="similarity",
        )

    def _resolve(self, entry: KeywordEntry, keyword: str) -> Category | None:
        for category in self.categories:
            if category.id == entry.category_id or keyword in normalize(category.name):
                return category
        return None

    def _keyword_match(self, normalized_description: str) -> CategorizationResult | None:
        best: CategorizationResult | None = None
        for entry in self.keywords:
            for raw_keyword in entry.keywords:
                keyword = normalize(raw_keyword)
                if not keyword or keyword not in normalized_description:
                    continue
                category = self._resolve(entry, keyword)
                if category is None:
                    continue
                if best is None or entry.confidence > best.confidence:
                    best = self._suggestion(category, entry.confidence)
        return best

    def _name_match(self, normalized_description: str) -> CategorizationResult | None:
        best: CategorizationResult | None = None
        for category in self.categories:
            normalized_name = normalize(category.name)
            if not normalized_name:
                continue

            if normalized_name in normalized_description:
                return self._suggestion(category, NAME_CONTAINED_CONFIDENCE)

            name_words = normalized_name.split(" ")
            matches = sum(
                1
                for word in name_words
                if len(word) >= MIN_NAME_WORD_LENGTH and word in normalized_description
            )
            if not matches:
                continue
            confidence = min(OVERLAP_CONFIDENCE_CAP, matches / len(name_words) * OVERLAP_WEIGHT)
            if best is None or confidence > best.confidence:
                best = self._suggestion(category, confidence)
        return best

    def suggest(self, description: str) -> CategorizationResult:
        normalized_description = normalize(description or "")
        if not normalized_description:
            return self._no_match()

        best = self._keyword_match(normalized_description)
        if best is None or best.confidence < FALLBACK_THRESHOLD:
            best = self._name_match(normalized_description) or best

        if best is None:
            logger.debug("[SUGGEST] No category found for '%s'.", description[:50])
            return self._no_match()
        return best

    def suggest_batch(self, descriptions: list[str]) -> list[CategorizationResult]:
        return [self.suggest(description) for description in descriptions]
