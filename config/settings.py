"""
Configuration management for CommitGrade.

This module provides centralized configuration with:
- Size thresholds and vendored/generated path exclusions
- Exemption heuristics (vendor updates, mechanical moves)
- Message scoring weights and wrap width
- The grade table combining size and message quality
- Logging and output settings

Every section is immutable once constructed: a grading run reads the same
configuration from start to finish.
"""

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GRADE_LETTERS = "ABCDF"

# Grade letters ordered from worst to best, used for table monotonicity checks.
_GRADE_RANK = {letter: rank for rank, letter in enumerate("FDCBA")}


class SizeSettings(BaseModel):
    """Size classification thresholds (inclusive upper bounds of changed lines)."""

    model_config = {"frozen": True}

    trivial_max: int = Field(default=24, ge=0, description="Largest Trivial diff")
    small_max: int = Field(default=80, ge=0, description="Largest Small diff")
    medium_max: int = Field(default=300, ge=0, description="Largest Medium diff")
    large_max: int = Field(default=1000, ge=0, description="Largest Large diff")
    exclude_patterns: List[str] = Field(
        default=[
            "vendor/",
            "third_party/",
            "external/",
            "deps/",
            "node_modules/",
            "*.lock",
            "package-lock.json",
            "go.sum",
            "*.min.js",
            "*_pb2.py",
        ],
        description="Globs or path prefixes whose lines do not count towards size",
    )

    @model_validator(mode="after")
    def validate_ascending(self):
        bounds = [self.trivial_max, self.small_max, self.medium_max, self.large_max]
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            raise ValueError(f"Size thresholds must be strictly ascending: {bounds}")
        return self


class ExemptionSettings(BaseModel):
    """Heuristics for commits exempt from the size penalty."""

    model_config = {"frozen": True}

    vendor_prefixes: List[str] = Field(
        default=["vendor/", "third_party/", "external/", "deps/"],
        description="Path prefixes holding vendored dependencies",
    )
    update_patterns: List[str] = Field(
        default=[
            r"^(bump|update|upgrade)\b",
            r"^re-?vendor\b",
            r"^vendor\b",
            r"\bupdate vendored\b",
            r"^(chore|build)\(deps\)",
        ],
        description="Subject regexes (case-insensitive) marking dependency updates",
    )
    move_pattern: str = Field(
        default=r"\bmoved?\b|\brenamed?\b",
        description="Subject regex (case-insensitive) naming a move or rename",
    )
    balance_tolerance: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Allowed |insertions - deletions| as a fraction of the diff",
    )
    max_lines_per_moved_file: int = Field(
        default=4, ge=0, description="Lines per file below which a balanced diff is a move"
    )

    @field_validator("update_patterns")
    @classmethod
    def validate_update_patterns(cls, v):
        for pattern in v:
            _check_regex(pattern)
        return v

    @field_validator("move_pattern")
    @classmethod
    def validate_move_pattern(cls, v):
        _check_regex(v)
        return v


class ScoringWeights(BaseModel):
    """Relative weight of each message signal in the message score."""

    model_config = {"frozen": True}

    subject: float = Field(default=0.35, ge=0.0)
    body: float = Field(default=0.20, ge=0.0)
    separator: float = Field(default=0.10, ge=0.0)
    wrapping: float = Field(default=0.20, ge=0.0)
    paragraphs: float = Field(default=0.10, ge=0.0)
    trailers: float = Field(default=0.05, ge=0.0)

    def total(self) -> float:
        return (
            self.subject
            + self.body
            + self.separator
            + self.wrapping
            + self.paragraphs
            + self.trailers
        )


class MessageSettings(BaseModel):
    """Message parsing and scoring configuration."""

    model_config = {"frozen": True}

    wrap_width: int = Field(default=72, ge=20, description="Maximum body line width")
    subject_short_length: int = Field(
        default=10, ge=0, description="Subjects up to this length get no credit"
    )
    subject_min_length: int = Field(
        default=20, ge=1, description="Shortest subject that gets full credit"
    )
    subject_max_length: int = Field(
        default=70, ge=1, description="Longest subject that gets full credit"
    )
    subject_hard_max_length: int = Field(
        default=100, ge=1, description="Subjects longer than this get no credit"
    )
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    excellent_score: int = Field(default=85, ge=0, le=100)
    good_score: int = Field(default=60, ge=0, le=100)
    fair_score: int = Field(default=25, ge=0, le=100)

    @model_validator(mode="after")
    def validate_bounds(self):
        subject_bounds = [
            self.subject_short_length,
            self.subject_min_length,
            self.subject_max_length,
            self.subject_hard_max_length,
        ]
        if any(lower >= upper for lower, upper in zip(subject_bounds, subject_bounds[1:])):
            raise ValueError(f"Subject length bounds must be strictly ascending: {subject_bounds}")
        if not self.fair_score < self.good_score < self.excellent_score:
            raise ValueError("Tier scores must satisfy fair < good < excellent")
        if self.weights.total() <= 0:
            raise ValueError("At least one scoring weight must be positive")
        return self


class GradeTableSettings(BaseModel):
    """
    Grade per size class and message tier.

    Each row holds four grade letters for the Poor, Fair, Good and Excellent
    message tiers.
    """

    model_config = {"frozen": True}

    trivial: str = Field(default="BAAA")
    small: str = Field(default="BAAA")
    medium: str = Field(default="DCBA")
    large: str = Field(default="FDCC")
    huge: str = Field(default="FFDC")
    exempt_floor: str = Field(default="B", description="Lowest grade of an exempt commit")

    @field_validator("trivial", "small", "medium", "large", "huge")
    @classmethod
    def validate_row(cls, v):
        row = v.strip().upper()
        if len(row) != 4 or any(letter not in GRADE_LETTERS for letter in row):
            raise ValueError(f"Grade row must be four letters out of {GRADE_LETTERS}: {v!r}")
        ranks = [_GRADE_RANK[letter] for letter in row]
        if ranks != sorted(ranks):
            raise ValueError(f"Grade row must not get worse as message quality improves: {v!r}")
        return row

    @field_validator("exempt_floor")
    @classmethod
    def validate_floor(cls, v):
        letter = v.strip().upper()
        if len(letter) != 1 or letter not in GRADE_LETTERS:
            raise ValueError(f"Exempt floor must be one of {GRADE_LETTERS}")
        return letter

    @model_validator(mode="after")
    def validate_columns(self):
        rows = self.rows()
        for column in range(4):
            ranks = [_GRADE_RANK[row[column]] for row in rows]
            if ranks != sorted(ranks, reverse=True):
                raise ValueError("Grade table must not get better as commits get larger")
        return self

    def rows(self) -> List[str]:
        return [self.trivial, self.small, self.medium, self.large, self.huge]


class MonitoringSettings(BaseModel):
    """Logging configuration settings."""

    model_config = {"frozen": True}

    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class OutputSettings(BaseModel):
    """Presentation and traversal defaults for the CLI."""

    model_config = {"frozen": True}

    workers: int = Field(default=4, ge=1, le=64, description="Parallel grading workers")
    author_width: int = Field(default=19, ge=4, description="Author column width")
    short_id_length: int = Field(default=7, ge=4, le=40, description="Displayed commit id length")


class Settings(BaseSettings):
    """
    Main application settings.

    Values come from defaults, an optional ``.env`` file and environment
    variables prefixed with ``COMMITGRADE_``; nested sections use ``__``:

        COMMITGRADE_SIZE__MEDIUM_MAX=400
        COMMITGRADE_MESSAGE__WRAP_WIDTH=80
        COMMITGRADE_MONITORING__LOG_LEVEL=DEBUG
    """

    app_name: str = Field(default="CommitGrade", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")

    size: SizeSettings = Field(default_factory=SizeSettings)
    exemption: ExemptionSettings = Field(default_factory=ExemptionSettings)
    message: MessageSettings = Field(default_factory=MessageSettings)
    grades: GradeTableSettings = Field(default_factory=GradeTableSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    model_config = SettingsConfigDict(
        env_prefix="COMMITGRADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )


def _check_regex(pattern: str) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid regular expression {pattern!r}: {e}")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration object

    Example:
        >>> settings = get_settings()
        >>> print(settings.size.medium_max)
        >>> print(settings.message.wrap_width)
    """
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Install the root logging handler with the configured level and format."""
    logging.basicConfig(
        level=getattr(logging, settings.monitoring.log_level),
        format=settings.monitoring.log_format,
    )


def validate_configuration(settings: Settings) -> Dict[str, Any]:
    """
    Check a settings object for combinations that validate but grade oddly.

    Hard errors are already rejected by the pydantic validators, so this
    reports softer problems as warnings.

    Returns:
        Dict[str, Any]: Validation results with status, errors and warnings
    """
    errors = []
    warnings = []

    weights_total = settings.message.weights.total()
    if abs(weights_total - 1.0) > 1e-6:
        warnings.append(
            f"Scoring weights sum to {weights_total:.2f}; scores are normalized to 0-100"
        )

    if settings.message.wrap_width > 100:
        warnings.append("Wrap width above 100 effectively disables the wrapping check")

    uncovered = [
        prefix
        for prefix in settings.exemption.vendor_prefixes
        if not any(
            pattern.rstrip("/") == prefix.rstrip("/") for pattern in settings.size.exclude_patterns
        )
    ]
    if uncovered:
        warnings.append(
            f"Vendor prefixes not excluded from size: {', '.join(uncovered)}"
        )

    if settings.grades.trivial[0] in "DF":
        errors.append("Trivial commits with short messages should not fail")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def export_config(settings: Settings) -> Dict[str, Any]:
    """
    Export configuration as a JSON-friendly dictionary.

    Returns:
        Dict[str, Any]: Every section of the settings
    """
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "size": settings.size.model_dump(),
        "exemption": settings.exemption.model_dump(),
        "message": settings.message.model_dump(),
        "grades": settings.grades.model_dump(),
        "monitoring": {"log_level": settings.monitoring.log_level},
        "output": settings.output.model_dump(),
    }
