"""
Tests de la configuration et des préfixes de chemins.
"""

import warnings

import pytest

from pharmapos.core.config import Settings
from pharmapos.core.paths import matches_any_prefix, starts_with_segments


def test_settings_are_case_insensitive(monkeypatch):
    monkeypatch.setenv("log_level", "DEBUG")
    assert Settings().LOG_LEVEL == "DEBUG"


def test_settings_use_v2_configuration():
    assert Settings.model_config["env_file"] == ".env"
    assert "Config" not in vars(Settings)

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        Settings()


@pytest.mark.parametrize("path,prefix,expected", [
    ("/api/auth", "/api/auth", True),
    ("/api/auth/login", "/api/auth", True),
    ("/api/authors", "/api/auth", False),
    ("/api/billingreport", "/api/billing", False),
    ("/api/billing/", "/api/billing/", True),
    ("/", "/", True),
    ("/health", "/", False),
])
def test_starts_with_segments(path, prefix, expected):
    assert starts_with_segments(path, prefix) is expected


def test_matches_any_prefix():
    assert matches_any_prefix("/docs/oauth2-redirect", ["/swagger", "/docs"])
    assert not matches_any_prefix("/documents", ["/swagger", "/docs"])
