import os

import pytest

from financeflow_categorizer.core import settings


def test_read_config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "# engine tuning\n"
        "RULE_CONFIDENCE: 0.95\n"
        'DATA_DIR: "/srv/data # not a comment"\n'
        "LOG_LEVEL: debug  # inline comment\n"
        "EMPTY:\n"
        "nested:\n"
        "  - ignored\n",
        encoding="utf-8",
    )

    values = settings.read_config_file(str(path))

    assert values == {
        "RULE_CONFIDENCE": "0.95",
        "DATA_DIR": "/srv/data # not a comment",
        "LOG_LEVEL": "debug",
    }


def test_read_missing_config_file(tmp_path):
    assert settings.read_config_file(str(tmp_path / "missing.yaml")) == {}
    assert settings.read_config_file(None) == {}


def test_config_file_does_not_override_environment(tmp_path, monkeypatch):
    (tmp_path / "config.yaml").write_text("RULE_CONFIDENCE: 0.7\nLEARNED_KEYWORD_COUNT: 5\n", encoding="utf-8")
    monkeypatch.setenv("CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("RULE_CONFIDENCE", "0.85")
    monkeypatch.delenv("LEARNED_KEYWORD_COUNT", raising=False)

    try:
        source = settings.load_environment()
        engine_settings = settings.load_engine_settings()
    finally:
        # load_environment writes straight to os.environ
        os.environ.pop("LEARNED_KEYWORD_COUNT", None)

    assert source.config_path == str(tmp_path / "config.yaml")
    assert engine_settings.rule_confidence == pytest.approx(0.85)
    assert engine_settings.learned_keyword_count == 5


def test_invalid_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("RULE_CONFIDENCE", "1.5")
    monkeypatch.setenv("HISTORY_MIN_COMMON_WORDS", "many")
    monkeypatch.setenv("HISTORY_CONFIDENCE_CAP", "0.6")

    engine_settings = settings.load_engine_settings()

    assert engine_settings.rule_confidence == pytest.approx(0.9)
    assert engine_settings.history_min_common_words == 2
    assert engine_settings.history_confidence_cap == pytest.approx(0.6)


@pytest.mark.parametrize(("raw", "expected"), [("true", True), ("ON", True), ("0", False), ("no", False)])
def test_get_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SEED_DEFAULT_RULES", raw)
    assert settings.get_env_bool("SEED_DEFAULT_RULES", not expected) is expected
