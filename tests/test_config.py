"""Tests for contractlens.config module.

Covers:
- Section defaults and value bounds
- ContractLensConfig environment variable support
- Configuration load/save to YAML
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from contractlens.config import (
    ContractLensConfig,
    EntityConfig,
    NormalizerConfig,
    TypoConfig,
)
from contractlens.core.errors import ConfigurationError

# ============================================================================
# Section Tests
# ============================================================================


class TestSections:
    """Tests for the per-stage config sections."""

    def test_typo_defaults(self):
        """TypoConfig has sensible defaults."""
        config = TypoConfig()
        assert config.max_edit_distance == 2
        assert config.similarity_threshold == 0.75
        assert config.max_suggestions == 5

    def test_typo_bounds(self):
        """Out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            TypoConfig(max_edit_distance=9)
        with pytest.raises(ValidationError):
            TypoConfig(similarity_threshold=1.5)

    def test_entity_defaults(self):
        """EntityConfig has sensible defaults."""
        config = EntityConfig()
        assert config.confidence_threshold == 0.75
        assert config.max_entity_length == 100
        assert config.enable_fuzzy_matching is True
        assert config.context_window == 50

    def test_normalizer_defaults(self):
        """NormalizerConfig preserves entities and filters profanity by default."""
        config = NormalizerConfig()
        assert config.preserve_case is False
        assert config.preserve_emails is True
        assert config.remove_stopwords is False
        assert config.filter_profanity is True
        assert config.max_query_length == 1000
        assert config.min_query_length == 1


# ============================================================================
# ContractLensConfig Tests
# ============================================================================


class TestContractLensConfig:
    """Tests for ContractLensConfig settings."""

    def test_default_values(self, monkeypatch):
        """ContractLensConfig has sensible defaults."""
        monkeypatch.delenv("CONTRACTLENS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("CONTRACTLENS_LEXICON_PATH", raising=False)
        config = ContractLensConfig()
        assert config.lexicon_path is None
        assert config.log_level == "INFO"
        assert config.intent.tagger_model_path is None
        assert config.typo == TypoConfig()

    def test_log_level_from_env(self, monkeypatch):
        """CONTRACTLENS_LOG_LEVEL sets log_level."""
        monkeypatch.setenv("CONTRACTLENS_LOG_LEVEL", "DEBUG")
        assert ContractLensConfig().log_level == "DEBUG"

    def test_lexicon_path_from_env(self, monkeypatch, tmp_path):
        """CONTRACTLENS_LEXICON_PATH sets lexicon_path."""
        monkeypatch.setenv("CONTRACTLENS_LEXICON_PATH", str(tmp_path / "lexicon.yaml"))
        assert ContractLensConfig().lexicon_path == tmp_path / "lexicon.yaml"

    def test_nested_section_from_env(self, monkeypatch):
        """Nested sections use a double underscore."""
        monkeypatch.setenv("CONTRACTLENS_TYPO__MAX_EDIT_DISTANCE", "3")
        monkeypatch.setenv("CONTRACTLENS_ENTITIES__ENABLE_FUZZY_MATCHING", "false")
        config = ContractLensConfig()
        assert config.typo.max_edit_distance == 3
        assert config.entities.enable_fuzzy_matching is False


# ============================================================================
# Load / Save Tests
# ============================================================================


class TestLoadSave:
    """Tests for ContractLensConfig.load() and save()."""

    def test_load_none(self):
        """load(None) returns defaults."""
        assert isinstance(ContractLensConfig.load(None), ContractLensConfig)

    def test_load_missing_file(self, tmp_path):
        """A missing file falls back to defaults."""
        config = ContractLensConfig.load(tmp_path / "missing.yaml")
        assert config.typo == TypoConfig()

    def test_load_empty_file(self, tmp_path):
        """An empty file falls back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert ContractLensConfig.load(path).entities == EntityConfig()

    def test_load_values(self, tmp_path):
        """File values are applied to their sections."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "typo:\n"
            "  max_suggestions: 3\n"
            "normalizer:\n"
            "  remove_stopwords: true\n"
            "log_level: WARNING\n"
        )
        config = ContractLensConfig.load(path)
        assert config.typo.max_suggestions == 3
        assert config.normalizer.remove_stopwords is True
        assert config.log_level == "WARNING"

    def test_file_beats_env(self, monkeypatch, tmp_path):
        """Values in the file take precedence over the environment."""
        monkeypatch.setenv("CONTRACTLENS_LOG_LEVEL", "DEBUG")
        path = tmp_path / "config.yaml"
        path.write_text("log_level: ERROR\n")
        assert ContractLensConfig.load(path).log_level == "ERROR"

    def test_load_non_mapping(self, tmp_path):
        """A top-level list raises ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            ContractLensConfig.load(path)

    def test_load_invalid_yaml(self, tmp_path):
        """Unparseable YAML raises ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("typo: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ContractLensConfig.load(path)

    def test_load_invalid_value(self, tmp_path):
        """Out-of-range values raise ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("typo:\n  max_edit_distance: 9\n")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            ContractLensConfig.load(path)

    def test_save_and_load(self, tmp_path):
        """Saved configs load back unchanged."""
        path = tmp_path / "nested" / "config.yaml"
        config = ContractLensConfig(
            typo=TypoConfig(max_edit_distance=3),
            lexicon_path=tmp_path / "lexicon.yaml",
        )
        config.save(path)

        assert path.exists()
        loaded = ContractLensConfig.load(path)
        assert loaded.typo.max_edit_distance == 3
        assert loaded.lexicon_path == Path(tmp_path / "lexicon.yaml")
