import pytest

from financeflow_categorizer.classifiers.suggestion import CategorySuggester
from financeflow_categorizer.models import Category


@pytest.fixture
def suggester():
    return CategorySuggester([
        Category(name="Farmácia"),
        Category(name="Posto Combustível"),
        Category(name="Lazer e Cultura"),
    ])


def test_keyword_resolved_by_category_name(suggester):
    res = suggester.suggest("FARMACIA SAO JOAO")
    assert res.matched is True
    assert res.category == "Farmácia"
    assert res.confidence == pytest.approx(0.9)
    assert res.source == "similarity"


def test_keyword_resolved_by_category_id():
    suggester = CategorySuggester([
        Category(name="Comida", id="alimentacao"),
        Category(name="Saúde", id="saude"),
    ])
    assert suggester.suggest("Farmácia São João").category == "Saúde"

    res = suggester.suggest("ifood pedido")
    assert res.category == "Comida"
    assert res.confidence == pytest.approx(0.9)


def test_leisure_keywords_score_lower():
    res = CategorySuggester([Category(name="Cinema")]).suggest("Ingresso cinema shopping")
    assert res.category == "Cinema"
    assert res.confidence == pytest.approx(0.8)


def test_higher_keyword_confidence_wins():
    suggester = CategorySuggester([
        Category(name="Diversão", id="lazer"),
        Category(name="Carro", id="transporte"),
    ])
    res = suggester.suggest("Uber para o cinema")
    assert res.category == "Carro"
    assert res.confidence == pytest.approx(0.9)


def test_equal_keyword_confidence_keeps_earlier_entry():
    suggester = CategorySuggester([
        Category(name="Carro", id="transporte"),
        Category(name="Comida", id="alimentacao"),
    ])
    assert suggester.suggest("Posto de gasolina com pizza").category == "Comida"


def test_unresolved_keyword_falls_back_to_names():
    res = CategorySuggester([Category(name="Popular Mix")]).suggest("Farmácia Popular")
    assert res.category == "Popular Mix"
    # one of two name words: 1/2 * 0.8
    assert res.confidence == pytest.approx(0.4)


def test_category_name_in_description():
    res = CategorySuggester([Category(name="Pet Shop")]).suggest("PET SHOP DO BAIRRO")
    assert res.category == "Pet Shop"
    assert res.confidence == pytest.approx(0.7)


def test_partial_word_overlap():
    res = CategorySuggester([Category(name="Pet Shop")]).suggest("Pet Center Marginal")
    assert res.category == "Pet Shop"
    assert res.confidence == pytest.approx(0.4)


def test_overlap_confidence_is_capped():
    suggester = CategorySuggester([Category(name="Banca Jornal")])
    res = suggester.suggest("Jornal da banca central")
    assert res.confidence == pytest.approx(0.6)


def test_no_suggestion(suggester):
    res = suggester.suggest("Loja qualquer")
    assert res.matched is False
    assert res.source == "none"
    assert suggester.suggest("").matched is False


def test_suggest_batch(suggester):
    results = suggester.suggest_batch(["Farmácia", "nada"])
    assert [r.matched for r in results] == [True, False]
