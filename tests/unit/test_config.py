# tests/unit/test_config.py
"""测试进程级配置的默认值、环境变量覆盖与请求配置快照的校验。"""

import pytest
from pydantic import ValidationError

from chat_translator.config import ChatTranslatorConfig, RequestConfig
from chat_translator.types import ProviderKind


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """避免开发者本地的 .env 或 CT_ 环境变量影响测试。"""
    monkeypatch.chdir(tmp_path)
    for name in ("CT_TARGET_LANG", "CT_CACHE__TTL", "CT_RATE_LIMIT__PER_CREDENTIAL_LIMIT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = ChatTranslatorConfig()

    assert config.target_lang == "ja"
    assert config.cache.maxsize == 2000
    assert config.cache.ttl == 300.0
    assert config.cache.sweep_interval == 60.0
    assert config.rate_limit.per_credential_limit == 15
    assert config.rate_limit.window_seconds == 60.0
    assert config.http.timeout_total == 10.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CT_TARGET_LANG", "ko")
    monkeypatch.setenv("CT_CACHE__TTL", "30")
    monkeypatch.setenv("CT_RATE_LIMIT__PER_CREDENTIAL_LIMIT", "5")

    config = ChatTranslatorConfig()

    assert config.target_lang == "ko"
    assert config.cache.ttl == 30.0
    assert config.rate_limit.per_credential_limit == 5


def test_invalid_target_lang_is_rejected() -> None:
    with pytest.raises(ValidationError, match="格式无效"):
        ChatTranslatorConfig(target_lang="japanese")


def test_non_positive_cache_ttl_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ChatTranslatorConfig(cache={"ttl": 0})


def test_request_config_defaults() -> None:
    config = RequestConfig()

    assert config.provider == ProviderKind.GOOGLE
    assert config.credentials == ()
    assert config.fallback_enabled is True
    assert config.dictionary == ""


def test_request_config_drops_blank_credentials() -> None:
    config = RequestConfig(provider="gemini", credentials=["key-a", " ", "", "key-b "])

    assert config.provider == ProviderKind.GEMINI
    assert config.credentials == ("key-a", "key-b")


def test_request_config_is_immutable() -> None:
    config = RequestConfig()
    with pytest.raises(ValidationError):
        config.fallback_enabled = False  # type: ignore[misc]


def test_unknown_provider_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RequestConfig(provider="bing")
