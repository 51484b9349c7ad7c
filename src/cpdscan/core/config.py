"""Configuration management for cpdscan."""

from pathlib import Path
from typing import Any
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from cpdscan.error.exceptions import ConfigurationError

DEFAULT_LANGUAGE = "java"
DEFAULT_RENDERER = "text"
DEFAULT_SKIP_BLOCKS_PATTERN = "#if 0|#endif"
MATCH_STRATEGIES = ("suffix", "hash")


class CPDConfig(BaseModel):
    """Immutable option set shared by the tokenizer and the match engine.

    Unknown keys are ignored so that configuration files written for newer
    versions still load.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    minimum_tile_size: int = Field(description="Minimum token length reported as a duplicate")
    language: str = Field(default=DEFAULT_LANGUAGE, description="Source code language")
    encoding: str = Field(default="utf-8", description="Character encoding of the sources")
    ignore_literals: bool = Field(default=False, description="Ignore literal values")
    ignore_identifiers: bool = Field(default=False, description="Ignore identifier names")
    ignore_annotations: bool = Field(default=False, description="Ignore language annotations")
    ignore_comments: bool = Field(default=True, description="Ignore comment contents")
    skip_blocks: bool = Field(default=True, description="Skip blocks between skip markers")
    skip_blocks_pattern: str = Field(
        default=DEFAULT_SKIP_BLOCKS_PATTERN, description="Start and end marker separated by |"
    )
    skip_duplicate_files: bool = Field(
        default=False, description="Ignore copies of files with the same name and length"
    )
    skip_lexical_errors: bool = Field(
        default=False, description="Skip the rest of a file that fails to tokenize"
    )
    match_strategy: str = Field(default="suffix", description="Candidate discovery strategy")
    jobs: int = Field(default=1, description="Number of tokenizer worker processes")
    renderer: str = Field(default=DEFAULT_RENDERER, description="Report format")

    @field_validator("minimum_tile_size")
    @classmethod
    def _check_tile_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"minimum_tile_size must be a positive integer, got {value}")
        return value

    @field_validator("jobs")
    @classmethod
    def _check_jobs(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"jobs must be at least 1, got {value}")
        return value

    @field_validator("match_strategy")
    @classmethod
    def _check_strategy(cls, value: str) -> str:
        if value not in MATCH_STRATEGIES:
            raise ValueError(
                f"Unknown match strategy '{value}'. Available: {', '.join(MATCH_STRATEGIES)}"
            )
        return value

    @model_validator(mode="after")
    def _check_registered_names(self) -> "CPDConfig":
        # Imported here: the registries import this module for the defaults.
        from cpdscan.render import available_renderers
        from cpdscan.tokenizer.registry import available_languages

        if self.language not in available_languages():
            raise ValueError(
                f"Unknown language '{self.language}'. Available: {', '.join(available_languages())}"
            )
        if self.renderer not in available_renderers():
            raise ValueError(
                f"Unknown renderer '{self.renderer}'. Available: {', '.join(available_renderers())}"
            )
        return self

    @model_validator(mode="after")
    def _check_skip_blocks_pattern(self) -> "CPDConfig":
        if self.skip_blocks:
            parse_skip_blocks_pattern(self.skip_blocks_pattern)
        return self

    def __init__(self, **options: Any) -> None:
        """Validate ``options``.

        Raises:
            ConfigurationError: If any option is invalid.
        """
        try:
            super().__init__(**options)
        except ValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(messages) from e

    @property
    def skip_block_markers(self) -> tuple[str, str] | None:
        """Start and end markers, or None when skip blocks are disabled."""
        if not self.skip_blocks:
            return None
        return parse_skip_blocks_pattern(self.skip_blocks_pattern)

    @classmethod
    def create(cls, **options: Any) -> "CPDConfig":
        """Build and validate a configuration.

        Raises:
            ConfigurationError: If any option is invalid.
        """
        return cls(**options)

    def with_options(self, **options: Any) -> "CPDConfig":
        """Return a validated copy with ``options`` overriding current values."""
        data = self.model_dump()
        data.update({key: value for key, value in options.items() if value is not None})
        return CPDConfig.create(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def parse_skip_blocks_pattern(pattern: str) -> tuple[str, str]:
    """Split a ``start|end`` pattern into its two markers.

    Raises:
        ValueError: Unless the pattern holds exactly one ``|`` between two
            non-empty markers.
    """
    parts = pattern.split("|")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(
            f"Invalid skip blocks pattern '{pattern}': expected 'start|end' with two non-empty markers"
        )
    return parts[0], parts[1]


def load_config(config_path: Path | None = None, **overrides: Any) -> CPDConfig:
    """Load configuration from a JSON file and apply overrides.

    Args:
        config_path: Path to configuration file. If None, only overrides are used.
        **overrides: Option values taking precedence over the file; None values are skipped.

    Returns:
        Validated CPDConfig

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigurationError: If the merged options are invalid
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    data.update({key: value for key, value in overrides.items() if value is not None})
    if "minimum_tile_size" not in data:
        raise ConfigurationError("minimum_tile_size is required")
    return CPDConfig.create(**data)
