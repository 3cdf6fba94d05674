"""Tests for environment-driven settings."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from pagerender.config import Settings


def test_defaults(monkeypatch):
    for name in ("DEFAULT_PROCESSING_MODE", "MAX_UPLOAD_BYTES", "PAGE_WORKERS", "LOG_STRUCTURED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.default_processing_mode == "lossless"
    assert settings.max_upload_bytes == 100_000_000
    assert settings.effective_page_workers() == 1
    assert settings.structured_logs is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEFAULT_PROCESSING_MODE", "auto")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")
    monkeypatch.setenv("PAGE_WORKERS", "4")
    monkeypatch.setenv("LOG_STRUCTURED", "false")

    settings = Settings()

    assert settings.default_processing_mode == "auto"
    assert settings.max_upload_bytes == 1024
    assert settings.effective_page_workers() == 4
    assert settings.structured_logs is False


def test_non_positive_workers_fall_back_to_sequential():
    assert Settings(PAGE_WORKERS=0).effective_page_workers() == 1


def test_mode_is_normalized_and_checked(monkeypatch):
    monkeypatch.setenv("DEFAULT_PROCESSING_MODE", " AUTO ")
    assert Settings().default_processing_mode == "auto"

    monkeypatch.setenv("DEFAULT_PROCESSING_MODE", "fast")
    with pytest.raises(ValidationError):
        Settings()


def test_cors_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    assert Settings().cors_allow_origins == ["https://a.example", "https://b.example"]
