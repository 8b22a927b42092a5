"""
Text canonicalization for transaction descriptions.

``normalize`` is the comparison form used everywhere (rule keywords, history
keys). ``tokenize`` additionally fixes common Portuguese misspellings and
drops noise so the remaining tokens can serve as rule keywords.
"""

import re
import unicodedata

# JavaScript-style \w (ASCII only); anything else that is not whitespace becomes a space.
_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")

COMMON_TYPOS: dict[str, str] = {
    "suoermercado": "supermercado",
    "supermerkado": "supermercado",
    "supermecado": "supermercado",
    "restorant": "restaurante",
    "restaurane": "restaurante",
    "farmcia": "farmacia",
    "gasosa": "gasolina",
    "trasporte": "transporte",
    "pagmento": "pagamento",
    "pagameto": "pagamento",
    "recebimeto": "recebimento",
    "trasnferencia": "transferencia",
}

_TYPO_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(typo) for typo in COMMON_TYPOS) + r")\b",
    re.IGNORECASE,
)

STOP_WORDS = frozenset({
    "de", "da", "do", "das", "dos", "em", "na", "no", "nas", "nos",
    "para", "por", "com", "sem", "via", "pelo", "pela", "pelos", "pelas",
    "o", "a", "os", "as", "um", "uma", "uns", "umas",
    "e", "ou", "mas", "que", "se", "como", "quando", "onde",
})

MIN_TOKEN_LENGTH = 3


def normalize(text: str) -> str:
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    spaced = _NON_WORD.sub(" ", stripped)
    return _WHITESPACE.sub(" ", spaced).strip()


def correct_typos(text: str) -> str:
    if not text:
        return ""
    return _TYPO_PATTERN.sub(lambda match: COMMON_TYPOS[match.group(0).lower()], text)


def tokenize(text: str) -> list[str]:
    corrected = correct_typos(normalize(text))
    tokens = [
        token
        for token in corrected.split(" ")
        if len(token) >= MIN_TOKEN_LENGTH
        and not token.isdigit()
        and token not in STOP_WORDS
    ]
    return list(dict.fromkeys(tokens))


def words(text: str) -> list[str]:
    return normalize(text).split()
