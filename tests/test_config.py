"""Tests for runtime settings."""

import pytest
from pydantic import ValidationError

from cryptax.config import DEFAULT_STABLECOIN_ACCOUNTS, CryptaxSettings


class TestCryptaxSettings:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = CryptaxSettings()
        assert settings.cost_basis_method == "FIFO"
        assert settings.stablecoin_accounts == DEFAULT_STABLECOIN_ACCOUNTS
        assert settings.output_timestamp_format == "%Y%m%d%H%M%S"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CRYPTAX_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CRYPTAX_STABLECOIN_ACCOUNTS", '["USDC", "EURC"]')
        settings = CryptaxSettings()
        assert settings.log_level == "DEBUG"
        assert settings.stablecoin_accounts == frozenset({"USDC", "EURC"})

    def test_log_level_is_normalized(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CRYPTAX_LOG_LEVEL", " warning ")
        assert CryptaxSettings().log_level == "WARNING"

    def test_unknown_log_level_rejected(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CRYPTAX_LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            CryptaxSettings()
