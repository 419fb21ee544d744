"""
Data models for CommitGrade.

This module provides:
- Ordered enumerations for size classes, message tiers and grades
- The immutable commit input consumed by the grading engine
- Derived message structure and score records
- Grade specifications used to filter graded output
"""

from enum import Enum, IntEnum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, computed_field, model_validator


class SizeClass(IntEnum):
    """Magnitude of a change, ordered from smallest to largest."""

    TRIVIAL = 0
    SMALL = 1
    MEDIUM = 2
    LARGE = 3
    HUGE = 4

    def __str__(self) -> str:
        return self.name.capitalize()


class MessageTier(IntEnum):
    """Ordinal band of a message score."""

    POOR = 0
    FAIR = 1
    GOOD = 2
    EXCELLENT = 3

    def __str__(self) -> str:
        return self.name.capitalize()


class Grade(IntEnum):
    """Final commit grade, ordered so that ``Grade.F < Grade.A``."""

    F = 0
    D = 1
    C = 2
    B = 3
    A = 4

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_letter(cls, letter: str) -> "Grade":
        try:
            return cls[letter.strip().upper()]
        except KeyError:
            raise ValueError(f"Grade must be one of: A, B, C, D, F (got {letter!r})")


class Relation(Enum):
    """Relation between a grade and a grade specification."""

    EQ = ""
    GE = "+"
    LE = "-"


class FileChange(BaseModel):
    """Line counts for one changed path."""

    model_config = {"frozen": True}

    path: str = Field(..., description="Path relative to the repository root")
    insertions: int = Field(default=0, ge=0, description="Lines added")
    deletions: int = Field(default=0, ge=0, description="Lines deleted")

    @property
    def lines(self) -> int:
        return self.insertions + self.deletions


class DiffStats(BaseModel):
    """Diff statistics of a single commit."""

    model_config = {"frozen": True}

    insertions: int = Field(default=0, ge=0, description="Lines added")
    deletions: int = Field(default=0, ge=0, description="Lines deleted")
    files: Tuple[FileChange, ...] = Field(default=(), description="Per-file line counts")

    @classmethod
    def from_paths(cls, insertions: int, deletions: int, paths=()) -> "DiffStats":
        """Build stats when only totals and the list of touched paths are known."""
        seen = dict.fromkeys(paths)
        return cls(
            insertions=insertions,
            deletions=deletions,
            files=tuple(FileChange(path=path) for path in seen),
        )

    @computed_field
    @property
    def total(self) -> int:
        return self.insertions + self.deletions

    @property
    def files_changed(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(change.path for change in self.files))


class CommitInput(BaseModel):
    """
    Everything the grading engine needs to know about one commit.

    Instances are immutable. Negative line counts are rejected here, at the
    boundary with the history reader, so the engine never sees them.
    """

    model_config = {"frozen": True}

    subject: str = Field(default="", description="First line of the message")
    body: Tuple[str, ...] = Field(default=(), description="Message lines after the subject")
    stats: DiffStats = Field(default_factory=DiffStats)
    parents: int = Field(default=1, ge=0, description="Number of parent commits")
    is_merge: bool = Field(default=False, description="Defaults to parents >= 2")
    is_root: bool = Field(default=False, description="Defaults to parents == 0")

    @model_validator(mode="before")
    @classmethod
    def derive_flags(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        try:
            parents = int(data.get("parents", 1))
        except (TypeError, ValueError):
            return data
        data = dict(data)
        if data.get("is_merge") is None:
            data["is_merge"] = parents >= 2
        if data.get("is_root") is None:
            data["is_root"] = parents == 0
        return data

    @classmethod
    def from_message(cls, message: str, **kwargs) -> "CommitInput":
        """Split a raw commit message into subject and body lines."""
        lines = message.splitlines()
        subject = lines[0] if lines else ""
        return cls(subject=subject, body=tuple(lines[1:]), **kwargs)


class MessageStructure(BaseModel):
    """Structural facts about a commit message."""

    model_config = {"frozen": True}

    subject_len: int = 0
    subject_words: int = 0
    has_blank_separator: bool = False
    body_present: bool = False
    wrapped_ok: bool = True
    paragraph_count: int = 0
    body_len: int = 0
    body_line_count: int = 0
    checked_line_count: int = 0
    overlong_line_count: int = 0
    trailer_count: int = 0


class MessageScore(BaseModel):
    """Message quality on a 0-100 scale with its tier and per-signal breakdown."""

    model_config = {"frozen": True}

    value: int = Field(..., ge=0, le=100)
    tier: MessageTier
    components: Dict[str, float] = Field(default_factory=dict)


class GradedCommit(BaseModel):
    """Everything the engine derived while grading one commit."""

    model_config = {"frozen": True}

    size_class: SizeClass
    exempt: bool
    structure: MessageStructure
    score: MessageScore
    grade: Grade


class GradeSpec(BaseModel):
    """
    A grade with an optional relation: ``B`` (exactly B), ``B+`` (B or
    better), ``B-`` (B or worse). Letters are case-insensitive.
    """

    model_config = {"frozen": True}

    grade: Grade
    relation: Relation = Relation.EQ

    @classmethod
    def parse(cls, text: str) -> "GradeSpec":
        if not text:
            raise ValueError("Grade must be specified")
        letter, suffix = text[0], text[1:]
        if letter.upper() not in Grade.__members__:
            raise ValueError("Grade must be one of: A, B, C, D, F")
        if len(suffix) > 1:
            raise ValueError("Grade specification should not contain extra characters")
        try:
            relation = Relation(suffix)
        except ValueError:
            raise ValueError("Grade relation must be one of: +, -, <empty>")
        return cls(grade=Grade[letter.upper()], relation=relation)

    def matches(self, grade: Grade) -> bool:
        if self.relation is Relation.GE:
            return grade >= self.grade
        if self.relation is Relation.LE:
            return grade <= self.grade
        return grade == self.grade

    def __str__(self) -> str:
        return f"{self.grade!s}{self.relation.value}"
