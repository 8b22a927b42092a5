import pytest

from financeflow_categorizer.ingestion.banks import (
    BankAdapter,
    BradescoAdapter,
    InterAdapter,
    NubankAdapter,
    UnknownBankError,
    get_adapter,
)

NUBANK_EXPORT = (
    "date,title,amount\n"
    "2024-03-15,Compra no débito - Padaria Real,12.50\n"
    "2024-03-16,PIX - Maria Silva - 16/03,-200.00\n"
    "2024-03-17,Pagamento - Netflix,39.90\n"
)


def test_nubank_strips_boilerplate():
    outcome = NubankAdapter().process(NUBANK_EXPORT)

    assert [tx.description for tx in outcome.transactions] == [
        "Padaria Real",
        "Maria Silva",
        "Netflix",
    ]
    # The raw cell is kept for auditing.
    assert outcome.transactions[0].original_description == "Compra no débito - Padaria Real"


def test_generic_adapter_keeps_descriptions():
    outcome = BankAdapter().process(NUBANK_EXPORT)
    assert outcome.transactions[0].description == "Compra no débito - Padaria Real"


def test_clean_description_never_blanks():
    assert NubankAdapter().clean_description("PIX - ") == "PIX - "


def test_inter_and_bradesco_prefixes():
    assert InterAdapter().clean_description("Pix enviado: João") == "João"
    assert BradescoAdapter().clean_description("Compra com cartão - Posto Shell") == "Posto Shell"


@pytest.mark.parametrize(
    ("bank", "expected"),
    [(None, BankAdapter), ("generic", BankAdapter), ("Nubank", NubankAdapter), (" inter ", InterAdapter)],
)
def test_get_adapter(bank, expected):
    assert type(get_adapter(bank)) is expected


def test_get_adapter_unknown_bank():
    with pytest.raises(UnknownBankError) as exc_info:
        get_adapter("itau")
    assert "itau" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)
