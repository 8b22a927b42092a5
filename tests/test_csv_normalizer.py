import pytest

from financeflow_categorizer.ingestion.csv_normalizer import (
    EMPTY_FILE_ERROR,
    MISSING_COLUMNS_ERROR,
    TOO_FEW_LINES_ERROR,
    CsvNormalizer,
)


@pytest.fixture
def normalizer():
    return CsvNormalizer()


def test_brazilian_row_with_unquoted_decimal_comma(normalizer):
    outcome = normalizer.process("data,descricao,valor,tipo\n15/03/2024,Ifood pedido,45,90,despesa\n")

    assert outcome.errors == []
    tx = outcome.transactions[0]
    assert tx.date == "2024-03-15"
    assert tx.description == "Ifood pedido"
    assert tx.amount == pytest.approx(45.90)
    assert tx.type == "expense"
    assert tx.original_amount == "45,90"


def test_unquoted_decimal_comma_needs_exactly_one_extra_cell(normalizer):
    content = (
        "data,descricao,valor\n"
        "15/03/2024,Mercado,1.234,56\n"
        "16/03/2024,Padaria,12,5\n"
        "17/03/2024,Feira,12,50,extra\n"
    )
    outcome = normalizer.process(content)

    assert outcome.transactions[0].amount == pytest.approx(1234.56)
    # "5" is not two digits: the row keeps its cells
    assert outcome.transactions[1].amount == pytest.approx(12.0)
    # two extra cells: left alone
    assert outcome.transactions[2].amount == pytest.approx(12.0)


def test_byte_order_mark_before_header(normalizer):
    outcome = normalizer.process("\ufeffdata,descricao,valor\n15/03/2024,Mercado,\"10,00\"\n")

    assert outcome.errors == []
    assert outcome.transactions[0].date == "2024-03-15"
    assert outcome.transactions[0].amount == pytest.approx(10.0)


def test_brazilian_row_with_quoted_decimal_comma(normalizer):
    outcome = normalizer.process('data,descricao,valor,tipo\n15/03/2024,Ifood pedido,"45,90",despesa\n')

    assert outcome.errors == []
    assert outcome.delimiter == ","
    assert len(outcome.transactions) == 1
    tx = outcome.transactions[0]
    assert tx.date == "2024-03-15"
    assert tx.description == "Ifood pedido"
    assert tx.amount == pytest.approx(45.90)
    assert tx.type == "expense"
    assert tx.line == 2
    assert tx.original_amount == "45,90"


def test_semicolon_separated_export(normalizer):
    content = (
        "Data;Descrição;Valor\n"
        "01/02/2024;Salário Empresa X;5.000,00\n"
        "02/02/2024;Pagamento cartão;-1.234,56\n"
    )
    outcome = normalizer.process(content)

    assert outcome.delimiter == ";"
    assert [tx.type for tx in outcome.transactions] == ["income", "expense"]
    assert outcome.transactions[0].amount == pytest.approx(5000.0)
    assert outcome.transactions[1].amount == pytest.approx(1234.56)
    assert outcome.summary.income_count == 1
    assert outcome.summary.expense_count == 1


def test_missing_date_column_is_a_single_structural_error(normalizer):
    rows = "\n".join(f"Compra {i},10,00" for i in range(20))
    outcome = normalizer.process("descricao,valor\n" + rows)

    assert outcome.transactions == []
    assert len(outcome.errors) == 1
    assert outcome.errors[0].startswith(MISSING_COLUMNS_ERROR)
    assert "data" in outcome.errors[0]


def test_empty_file(normalizer):
    outcome = normalizer.process("   \n\n")
    assert outcome.errors == [EMPTY_FILE_ERROR]
    assert outcome.transactions == []


def test_header_only(normalizer):
    outcome = normalizer.process("data,descricao,valor\n")
    assert outcome.errors == [TOO_FEW_LINES_ERROR]


def test_non_string_input_raises(normalizer):
    with pytest.raises(TypeError):
        normalizer.process(b"data,descricao,valor")


def test_row_errors_report_physical_line_numbers(normalizer):
    content = (
        "data;descricao;valor\n"
        "15/03/2024;Mercado;10,00\n"
        "\n"
        "31/02/2024;Data ruim;10,00\n"
        "16/03/2024;;10,00\n"
        "17/03/2024;Sem valor;abc\n"
        "18/03/2024;Valor zero;0,00\n"
        "19/03/2024;Padaria;7,50\n"
    )
    outcome = normalizer.process(content)

    assert outcome.errors == [
        'Linha 4: Data inválida "31/02/2024"',
        "Linha 5: Descrição vazia",
        'Linha 6: Valor inválido "abc"',
        'Linha 7: Valor inválido "0,00"',
    ]
    assert [tx.line for tx in outcome.transactions] == [2, 8]
    assert outcome.summary.total == 6
    assert outcome.summary.valid == 2
    assert outcome.summary.invalid == 4


def test_amounts_are_absolute_and_type_carries_sign(normalizer):
    outcome = normalizer.process("date,description,amount\n2024-03-15,Refund,-50.00\n2024-03-16,Salary,3000\n")

    first, second = outcome.transactions
    assert first.amount == pytest.approx(50.0)
    assert first.type == "expense"
    assert second.type == "income"
