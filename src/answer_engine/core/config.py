"""
Configuration Management

Centralized configuration management with YAML file support,
environment variable overrides, and threshold validation.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load .env file if it exists
load_dotenv()


NORMALIZER_BACKENDS = ("nltk", "fallback")


@dataclass
class MatchingConfig:
    """Thresholds for the fuzzy text matching pipeline."""
    min_length: int = 3
    min_submitted_length: int = 4
    min_length_ratio: float = 0.8
    max_length_ratio: float = 1.3
    char_overlap_threshold: float = 0.7
    common_start_overlap_threshold: float = 0.85
    single_word_similarity: float = 0.9
    related_word_similarity: float = 0.8
    word_match_similarity: float = 0.98
    word_match_ratio: float = 1.0
    significant_word_length: int = 2  # tokens must be strictly longer
    final_similarity_threshold: float = 0.875


@dataclass
class NormalizerConfig:
    """Text normalizer configuration."""
    backend: str = "nltk"
    timeout: Optional[float] = 2.0  # seconds, None disables the guard thread
    default_language: str = "en"
    languages: List[str] = field(default_factory=lambda: ["en", "nl", "de", "fr", "es"])


@dataclass
class ScoringConfig:
    """Scoring rules that are not text matching."""
    numeric_scale: int = 4
    sequence_partial_points: int = 1


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/answer_engine.log"
    max_size: str = "10MB"
    backup_count: int = 5


@dataclass
class AppConfig:
    """Main application configuration."""
    name: str = "Answer Evaluation Engine"
    version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    matching: MatchingConfig = field(default_factory=MatchingConfig)
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}", {'error': str(e)}) from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "AppConfig":
        """Build configuration from a plain dictionary."""
        config_data = cls._apply_env_overrides(dict(config_data))

        # Handle nested app configuration structure
        if 'app' in config_data:
            app_config = config_data.pop('app')
            config_data.update(app_config)

        sections = {
            'matching': MatchingConfig,
            'normalizer': NormalizerConfig,
            'scoring': ScoringConfig,
            'logging': LoggingConfig,
        }

        try:
            for name, section_cls in sections.items():
                if name in config_data and isinstance(config_data[name], dict):
                    config_data[name] = section_cls(**config_data[name])
            config = cls(**config_data)
        except TypeError as e:
            raise ConfigurationError("Unknown configuration field", {'error': str(e)}) from e

        config._coerce_env_types()
        config.validate()
        return config

    @staticmethod
    def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'ANSWER_ENGINE_LOG_LEVEL': ['logging', 'level'],
            'ANSWER_ENGINE_NORMALIZER': ['normalizer', 'backend'],
            'ANSWER_ENGINE_NORMALIZER_TIMEOUT': ['normalizer', 'timeout'],
            'DEBUG': ['debug'],
            'ENVIRONMENT': ['environment'],
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                current = config_data
                for key in config_path[:-1]:
                    section = current.get(key)
                    current[key] = dict(section) if isinstance(section, dict) else {}
                    current = current[key]
                current[config_path[-1]] = env_value

        return config_data

    def _coerce_env_types(self) -> None:
        """Environment overrides arrive as strings."""
        if isinstance(self.debug, str):
            self.debug = self.debug.strip().lower() in ('1', 'true', 'yes', 'on')
        if isinstance(self.normalizer.timeout, str):
            try:
                self.normalizer.timeout = float(self.normalizer.timeout)
            except ValueError as e:
                raise ConfigurationError(
                    "normalizer.timeout must be a number",
                    {'value': self.normalizer.timeout}
                ) from e

    def validate(self) -> None:
        """
        Validate threshold ranges and option values.

        Raises:
            ConfigurationError: If any value is out of range
        """
        errors = []

        unit_interval_fields = (
            'min_length_ratio', 'char_overlap_threshold', 'common_start_overlap_threshold',
            'single_word_similarity', 'related_word_similarity', 'word_match_similarity',
            'word_match_ratio', 'final_similarity_threshold',
        )
        for name in unit_interval_fields:
            value = getattr(self.matching, name)
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                errors.append(f"matching.{name} must be between 0.0 and 1.0, got {value!r}")

        if not isinstance(self.matching.max_length_ratio, (int, float)) or \
                self.matching.max_length_ratio < 1.0:
            errors.append(
                f"matching.max_length_ratio must be at least 1.0, got {self.matching.max_length_ratio!r}"
            )

        for name in ('min_length', 'min_submitted_length', 'significant_word_length'):
            value = getattr(self.matching, name)
            if not isinstance(value, int) or value < 0:
                errors.append(f"matching.{name} must be a non-negative integer, got {value!r}")

        if self.normalizer.backend not in NORMALIZER_BACKENDS:
            errors.append(
                f"normalizer.backend must be one of {', '.join(NORMALIZER_BACKENDS)}, "
                f"got {self.normalizer.backend!r}"
            )
        if self.normalizer.timeout is not None and self.normalizer.timeout <= 0:
            errors.append(f"normalizer.timeout must be positive, got {self.normalizer.timeout!r}")

        if not isinstance(self.scoring.numeric_scale, int) or self.scoring.numeric_scale < 0:
            errors.append(f"scoring.numeric_scale must be a non-negative integer, got {self.scoring.numeric_scale!r}")
        if not isinstance(self.scoring.sequence_partial_points, int) or self.scoring.sequence_partial_points < 0:
            errors.append(
                f"scoring.sequence_partial_points must be a non-negative integer, "
                f"got {self.scoring.sequence_partial_points!r}"
            )

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ConfigurationError(error_msg)


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get the application configuration instance."""
    global _config

    if _config is None:
        if config_path is None:
            # Default configuration path
            config_path = Path("config/default.yaml")

        if config_path.exists():
            _config = AppConfig.from_yaml(config_path)
        else:
            # Use default configuration if file doesn't exist
            _config = AppConfig.from_dict({})

    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return get_config(config_path)
