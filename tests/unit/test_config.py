"""Test Settings loading from TOML, overrides and environment."""

import pytest

from diploma_registry.core.config import GovernanceSettings, Settings, load_settings
from diploma_registry.core.errors import ConfigError
from diploma_registry.core.models import DEFAULT_MAX_DIPLOMAS, DEFAULT_MINT_FEE


class TestSettingsDefaults:
    def test_governance_defaults(self):
        settings = Settings()
        assert settings.governance.max_diplomas == DEFAULT_MAX_DIPLOMAS == 1_000_000
        assert settings.governance.mint_fee == DEFAULT_MINT_FEE == 500

    def test_other_defaults(self):
        settings = Settings()
        assert settings.authorized_issuers == []
        assert settings.state_path == "data/registry.json"
        assert settings.audit.persist_path is None
        assert settings.audit.max_memory_entries == 100_000
        assert settings.observability.log_level == "INFO"
        assert settings.observability.log_format == "console"


class TestLoadSettings:
    def test_missing_path_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "nope.toml")
        assert settings.governance.mint_fee == 500

    def test_none_path(self):
        assert load_settings(None).state_path == "data/registry.json"

    def test_toml_file(self, tmp_path):
        path = tmp_path / "registry.toml"
        path.write_text(
            'authorized_issuers = ["ST1UNI", "ST2UNI"]\n'
            'state_path = "var/state.json"\n'
            "\n"
            "[governance]\n"
            "max_diplomas = 10\n"
            "mint_fee = 0\n"
            "\n"
            "[audit]\n"
            'persist_path = "var/audit.jsonl"\n'
        )
        settings = load_settings(path)
        assert settings.authorized_issuers == ["ST1UNI", "ST2UNI"]
        assert settings.state_path == "var/state.json"
        assert settings.governance.max_diplomas == 10
        assert settings.governance.mint_fee == 0
        assert settings.audit.persist_path == "var/audit.jsonl"

    def test_overrides_win(self, tmp_path):
        path = tmp_path / "registry.toml"
        path.write_text('state_path = "a.json"\n')
        settings = load_settings(path, overrides={"state_path": "b.json"})
        assert settings.state_path == "b.json"

    def test_env_nested(self, monkeypatch):
        monkeypatch.setenv("DIPLOMA_GOVERNANCE__MINT_FEE", "750")
        monkeypatch.setenv("DIPLOMA_OBSERVABILITY__LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.governance.mint_fee == 750
        assert settings.observability.log_level == "DEBUG"


class TestGovernanceSettings:
    def test_to_config(self):
        config = GovernanceSettings(max_diplomas=3, mint_fee=10).to_config()
        assert config.max_diplomas == 3
        assert config.mint_fee == 10
        assert config.last_token_id == 0
        assert config.authority_contract is None

    def test_to_config_rejects_zero_capacity(self):
        with pytest.raises(ConfigError):
            GovernanceSettings(max_diplomas=0).to_config()

    def test_to_config_rejects_negative_fee(self):
        with pytest.raises(ConfigError):
            GovernanceSettings(mint_fee=-1).to_config()
