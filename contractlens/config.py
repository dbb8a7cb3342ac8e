"""contractlens Configuration.

Includes:
- ContractLensConfig: Top-level settings with environment variable support
- TypoConfig, EntityConfig, NormalizerConfig, IntentConfig: Per-stage sections

Environment Variables:
    CONTRACTLENS_LEXICON_PATH: YAML lexicon overlay applied on top of the defaults
    CONTRACTLENS_LOG_LEVEL: Console log level for the CLI
    CONTRACTLENS_TYPO__MAX_EDIT_DISTANCE: Nested sections use a double underscore
    CONTRACTLENS_ENTITIES__CONFIDENCE_THRESHOLD: Minimum entity confidence
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class TypoConfig(BaseModel):
    """Typo correction settings.

    Attributes:
        max_edit_distance: Largest Levenshtein distance considered a typo
        similarity_threshold: Minimum similarity for an edit-distance correction
        max_suggestions: Cap on suggestions returned per word
    """

    max_edit_distance: int = Field(default=2, ge=1, le=4)
    similarity_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    max_suggestions: int = Field(default=5, ge=1, le=50)


class EntityConfig(BaseModel):
    """Entity resolution settings.

    Attributes:
        confidence_threshold: Entities scoring below this are dropped
        max_entity_length: Longer pattern matches are ignored
        enable_fuzzy_matching: Match known entities (fuzzily for names)
        enable_context_analysis: Adjust confidence from surrounding keywords
        context_window: Characters of context on each side of an entity
    """

    confidence_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    max_entity_length: int = Field(default=100, ge=1, le=1000)
    enable_fuzzy_matching: bool = True
    enable_context_analysis: bool = True
    context_window: int = Field(default=50, ge=0, le=500)


class NormalizerConfig(BaseModel):
    """Query normalization settings."""

    preserve_case: bool = False
    preserve_punctuation: bool = True
    preserve_numbers: bool = True
    preserve_emails: bool = True
    preserve_urls: bool = True
    preserve_phones: bool = True
    remove_stopwords: bool = False
    filter_profanity: bool = True
    process_emoji: bool = True
    max_query_length: int = Field(default=1000, ge=1, le=100_000)
    min_query_length: int = Field(default=1, ge=0, le=1000)


class IntentConfig(BaseModel):
    """Intent classification settings.

    Attributes:
        tagger_model_path: Tab-separated word/tag model; the shape-based
            tagger is used when unset
    """

    tagger_model_path: Optional[Path] = None


class ContractLensConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with the CONTRACTLENS_
    prefix; nested sections use ``__`` (CONTRACTLENS_TYPO__MAX_SUGGESTIONS=3).

    Precedence (highest to lowest):
        1. Values in a config file passed to load()
        2. Environment variables (CONTRACTLENS_*)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTRACTLENS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    typo: TypoConfig = Field(default_factory=TypoConfig)
    entities: EntityConfig = Field(default_factory=EntityConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    intent: IntentConfig = Field(default_factory=IntentConfig)

    lexicon_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ContractLensConfig":
        """Load configuration from a YAML file if it exists.

        Args:
            path: Config file; environment and defaults only when None or missing

        Returns:
            ContractLensConfig

        Raises:
            ConfigurationError: If the file cannot be parsed or holds invalid values
        """
        from ruamel.yaml import YAML
        from ruamel.yaml.error import YAMLError

        from .core.errors import ConfigurationError

        if path is None or not Path(path).exists():
            return cls()

        yaml = YAML(typ="safe")
        try:
            with Path(path).open() as f:
                data = yaml.load(f)
        except (OSError, YAMLError) as e:
            raise ConfigurationError(f"Failed to read config {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {path} must be a mapping, got {type(data).__name__}")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {path}: {e}") from e

    def save(self, path: Path) -> None:
        """Save configuration to a YAML file, creating parent directories."""
        from ruamel.yaml import YAML

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        yaml = YAML()
        yaml.default_flow_style = False

        with path.open("w") as f:
            yaml.dump(self.model_dump(mode="json"), f)


__all__ = [
    "ContractLensConfig",
    "EntityConfig",
    "IntentConfig",
    "NormalizerConfig",
    "TypoConfig",
]
