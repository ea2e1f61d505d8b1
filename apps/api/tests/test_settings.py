from __future__ import annotations

from loyalty_gateway.core.settings import Settings


def test_cors_origins_from_comma_separated_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")

    settings = Settings(_env_file=None)

    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]


def test_cors_origins_accept_json_list_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["http://a.test"]')

    assert Settings(_env_file=None).cors_allow_origins == ["http://a.test"]


def test_cors_origins_default_to_any(monkeypatch) -> None:
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert Settings(_env_file=None).cors_allow_origins == ["*"]


def test_sender_prefers_configured_name(settings) -> None:
    assert settings.sender("Rivo Loyalty") == "Wingstop <rewards@example.com>"

    settings.email_from_name = None
    assert settings.sender("Rivo Loyalty") == "Rivo Loyalty <rewards@example.com>"
    assert settings.sender() == "Wingstop <rewards@example.com>"
