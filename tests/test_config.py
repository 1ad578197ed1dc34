import pytest

from toolchat.api.app import _parse_cors_origins
from toolchat.chains.basic_chat import build_llm
from toolchat.config import AppConfig, load_config, parse_positive_int, validate_config


@pytest.fixture
def yaml_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "provider: openai\n"
        "openai:\n"
        "  model: gpt-4o-mini\n"
        "chat:\n"
        "  max_output_tokens: 800\n"
        "  history_max_length: 6\n",
        encoding="utf-8",
    )
    return str(path)


def test_defaults_without_yaml_or_env(clean_env, tmp_path):
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg.provider == "gemini"
    assert cfg.chat.max_output_tokens == 500
    assert cfg.chat.history_max_length == 10
    assert cfg.server.port == 3400


def test_malformed_history_length_falls_back_to_default(clean_env, tmp_path):
    clean_env.setenv("USER_HISTORY_MAX_LENGTH", "ten")
    clean_env.setenv("LLM_MAX_OUTPUT_TOKENS_INT", "-3")
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg.chat.history_max_length == 10
    assert cfg.chat.max_output_tokens == 500


def test_yaml_values_and_env_precedence(clean_env, yaml_path):
    cfg = load_config(yaml_path)
    assert cfg.provider == "openai"
    assert cfg.openai.model == "gpt-4o-mini"
    assert cfg.chat.max_output_tokens == 800
    assert cfg.chat.history_max_length == 6

    clean_env.setenv("USER_HISTORY_MAX_LENGTH", "4")
    clean_env.setenv("LLM_PROVIDER", "Gemini")
    cfg = load_config(yaml_path)
    assert cfg.chat.history_max_length == 4
    assert cfg.provider == "gemini"


@pytest.mark.parametrize("value", [None, "", "abc", "0", "-1", "1.5"])
def test_parse_positive_int_invalid(value):
    assert parse_positive_int(value, 7) == 7


def test_parse_positive_int_valid():
    assert parse_positive_int(" 12 ", 7) == 12
    assert parse_positive_int(3, 7) == 3


def test_validate_config_reports_missing_credentials():
    errors = validate_config(AppConfig())
    assert any("GEMINI_API_KEY" in e for e in errors)

    cfg = AppConfig(provider="openai")
    errors = validate_config(cfg)
    assert any("OPENAI_API_KEY" in e for e in errors)
    assert len(errors) == 2


def test_validate_config_rejects_unknown_provider():
    errors = validate_config(AppConfig(provider="llama"))
    assert len(errors) == 1
    assert "llama" in errors[0]


def test_validate_config_ok(cfg):
    assert validate_config(cfg) == []


def test_build_llm_applies_limits(cfg):
    cfg.chat.max_output_tokens = 321
    llm = build_llm(cfg)
    assert llm.max_tokens == 321
    assert llm.max_retries == 0
    assert llm.request_timeout == cfg.chat.request_timeout
    assert llm.model_name == "gemini-2.0-flash"
    assert llm.openai_api_base == cfg.gemini.base_url


def test_parse_cors_origins():
    assert _parse_cors_origins(None) == ["*"]
    assert _parse_cors_origins(" * ") == ["*"]
    assert _parse_cors_origins("http://a, http://b,") == ["http://a", "http://b"]
