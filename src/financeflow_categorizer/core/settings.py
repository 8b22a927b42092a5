import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from dotenv import find_dotenv, load_dotenv

from financeflow_categorizer.logger import get_logger

logger = get_logger(__name__)

Number = TypeVar("Number", int, float)


CONFIG_FILENAME = "config.yaml"

# Keys a config.yaml may provide. Real environment variables always win.
CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "LOG_COLOR",
    "DATA_DIR",
    "SEED_DEFAULT_RULES",
    "RULE_CONFIDENCE",
    "HISTORY_MIN_COMMON_WORDS",
    "HISTORY_WORD_RATIO",
    "HISTORY_SHORT_WORD_LENGTH",
    "HISTORY_CONFIDENCE_STEP",
    "HISTORY_CONFIDENCE_CAP",
    "LEARNED_KEYWORD_COUNT",
)


@dataclass
class ConfigSource:
    """Where configuration was read from, for the startup log."""

    dotenv_path: str | None = None
    config_path: str | None = None
    values: dict[str, str] = field(default_factory=dict)


_source = ConfigSource()


def _search_dirs() -> list[str]:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return [config_dir]
    cwd = os.getcwd()
    return [os.path.join(cwd, "config"), cwd]


def _find_config_file() -> str:
    dirs = _search_dirs()
    for directory in dirs:
        path = os.path.join(directory, CONFIG_FILENAME)
        if os.path.exists(path):
            return path
    # Report where it was expected even when absent.
    return os.path.join(dirs[-1], CONFIG_FILENAME)


def _find_dotenv_file() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir and os.path.exists(os.path.join(config_dir, ".env")):
        return os.path.join(config_dir, ".env")
    return find_dotenv(usecwd=True) or None


def parse_config_value(raw: str) -> str:
    """Drop an unquoted ``# comment`` and surrounding quotes from a value."""
    quote = None
    end = len(raw)
    for position, char in enumerate(raw):
        if char in "\"'":
            quote = None if quote == char else (quote or char)
        elif char == "#" and quote is None:
            end = position
            break
    value = raw[:end].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read a flat ``key: value`` file. Nested YAML is not supported."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            entry = line.strip()
            if not entry or entry.startswith("#") or ":" not in entry:
                continue
            name, raw = entry.split(":", 1)
            value = parse_config_value(raw)
            if name.strip() and value:
                values[name.strip()] = value
    return values


def load_environment() -> ConfigSource:
    global _source

    dotenv_path = _find_dotenv_file()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    config_path = _find_config_file()
    _source = ConfigSource(dotenv_path=dotenv_path, config_path=config_path, values=read_config_file(config_path))

    for key in CONFIG_KEYS:
        if key in _source.values:
            os.environ.setdefault(key, _source.values[key])
    return _source


def get_config_source() -> ConfigSource:
    return _source


def ensure_dirs(*paths: str | None) -> None:
    for path in paths:
        if path and path not in {".", "./"}:
            os.makedirs(path, exist_ok=True)


def _env_number(
    name: str,
    default: Number,
    cast: Callable[[str], Number],
    min_value: Number | None = None,
    max_value: Number | None = None,
) -> Number:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("[ENV] %s='%s' is not a number, using default %s.", name, raw, default)
        return default
    if (min_value is not None and value < min_value) or (max_value is not None and value > max_value):
        logger.warning(
            "[ENV] %s='%s' outside [%s, %s], using default %s.",
            name,
            raw,
            min_value,
            max_value,
            default,
        )
        return default
    return value


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    return _env_number(name, default, int, min_value=min_value)


def get_env_float(
    name: str,
    default: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    return _env_number(name, default, float, min_value=min_value, max_value=max_value)


def get_env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EngineSettings:
    """Heuristic constants used by the categorization engine."""

    rule_confidence: float = 0.9
    history_min_common_words: int = 2
    history_word_ratio: float = 0.5
    # Pattern words this short never count as common words.
    history_short_word_length: int = 3
    history_confidence_step: float = 0.1
    history_confidence_cap: float = 0.8
    learned_keyword_count: int = 3
    uncategorized_label: str = "Uncategorized"


def load_engine_settings() -> EngineSettings:
    defaults = EngineSettings()
    return EngineSettings(
        rule_confidence=get_env_float("RULE_CONFIDENCE", defaults.rule_confidence, 0.0, 1.0),
        history_min_common_words=get_env_int(
            "HISTORY_MIN_COMMON_WORDS", defaults.history_min_common_words, min_value=1
        ),
        history_word_ratio=get_env_float("HISTORY_WORD_RATIO", defaults.history_word_ratio, 0.0, 1.0),
        history_short_word_length=get_env_int(
            "HISTORY_SHORT_WORD_LENGTH", defaults.history_short_word_length, min_value=0
        ),
        history_confidence_step=get_env_float(
            "HISTORY_CONFIDENCE_STEP", defaults.history_confidence_step, 0.0, 1.0
        ),
        history_confidence_cap=get_env_float(
            "HISTORY_CONFIDENCE_CAP", defaults.history_confidence_cap, 0.0, 1.0
        ),
        learned_keyword_count=get_env_int(
            "LEARNED_KEYWORD_COUNT", defaults.learned_keyword_count, min_value=1
        ),
    )


def log_environment() -> None:
    logger.info("[ENV] .env file: %s", _source.dotenv_path or "<none>")
    logger.info("[ENV] Configuration file: %s", _source.config_path or "<none>")
    for key in ("CONFIG_DIR", *CONFIG_KEYS):
        current = os.getenv(key)
        logger.info("[ENV] %s=%s", key, "<unset>" if current is None else current.replace("\n", "\\n"))


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")
CONFIG_DIR = os.getenv("CONFIG_DIR")

ensure_dirs(DATA_DIR, LOG_DIR, CONFIG_DIR)

SEED_DEFAULT_RULES = get_env_bool("SEED_DEFAULT_RULES", True)

RULES_FILENAME = "rules.json"
HISTORY_FILENAME = "history.json"
