from datetime import date

import pytest

from financeflow_categorizer.domain.parsing import (
    detect_separator,
    infer_transaction_type,
    map_columns,
    missing_columns,
    normalize_amount,
    normalize_date,
    split_row,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15/03/2024", "2024-03-15"),
        ("5-3-2024", "2024-03-05"),
        ("2024/03/15", "2024-03-15"),
        ("2024-03-15", "2024-03-15"),
        ("15032024", "2024-03-15"),
        ("20240315", "2024-03-15"),
        ("15/03/2024 10:32", "2024-03-15"),
        ("2024-03-15T10:32:00", "2024-03-15"),
        ("15 / 03 / 2024", "2024-03-15"),
        ("Data: 15/03/2024", "2024-03-15"),
        ("15.03.2024 23:59:59", "2024-03-15"),
    ],
)
def test_normalize_date_formats(raw, expected):
    assert normalize_date(raw) == expected


def test_normalize_date_two_digit_year_uses_current_century():
    century = date.today().year // 100 * 100
    assert normalize_date("15/03/24") == f"{century + 24}-03-15"


@pytest.mark.parametrize("raw", ["31/02/2024", "not a date", "", "32/01/2024", "2024/13/01"])
def test_normalize_date_rejects_invalid(raw):
    assert normalize_date(raw) == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("-50,00", -50.0),
        ("(50,00)", -50.0),
        ("R$ 45,90", 45.90),
        ("1,234", 1234.0),
        ("1.234.567", 1234567.0),
        ("12.5", 12.5),
        ("+10", 10.0),
    ],
)
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "abc", "R$"])
def test_normalize_amount_unparsable(raw):
    assert normalize_amount(raw) is None


def test_split_row_keeps_quoted_separator():
    assert split_row('15/03/2024,"Ifood, pedido","45,90"', ",") == ["15/03/2024", "Ifood, pedido", "45,90"]


def test_detect_separator():
    assert detect_separator(["data;descricao;valor", "15/03/2024;Ifood;45,90"]) == ";"
    assert detect_separator(["data,descricao,valor", "15/03/2024,Ifood,10"]) == ","
    assert detect_separator(["data\tdescricao\tvalor"]) == "\t"
    assert detect_separator(["data|descricao|valor"]) == "|"


def test_detect_separator_defaults_to_comma():
    assert detect_separator(["single column"]) == ","
    assert detect_separator([]) == ","


def test_map_columns_recognizes_headers():
    mapping = map_columns(["Data", "Descrição", "Valor", "Tipo"])
    assert mapping == {"date": 0, "description": 1, "amount": 2, "type": 3}


def test_map_columns_first_header_wins():
    mapping = map_columns(["date", "title", "amount", "description"])
    assert mapping["description"] == 1


def test_missing_columns():
    assert missing_columns(map_columns(["descricao", "valor"])) == ["date"]
    assert missing_columns(map_columns(["data", "historico", "valor"])) == []


def test_infer_type_from_column():
    assert infer_transaction_type("Receita", 10.0, "qualquer") == "income"
    assert infer_transaction_type("Crédito", 10.0, "qualquer") == "income"
    assert infer_transaction_type("despesa", 10.0, "qualquer") == "expense"


def test_infer_type_from_amount_and_description():
    assert infer_transaction_type("", -10.0, "Salario") == "expense"
    assert infer_transaction_type("", 10.0, "Salario") == "income"
    assert infer_transaction_type("", 10.0, "Pagamento de boleto") == "expense"
    assert infer_transaction_type("", 10.0, "Transferência enviada pelo Pix") == "expense"


def test_map_columns_ignores_byte_order_mark():
    assert map_columns(["\ufeffData", "Descrição", "Valor"])["date"] == 0
