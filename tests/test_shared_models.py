"""
Unit tests for shared models module.

This module tests the ordered enumerations, commit input validation and
grade specification parsing.
"""

import pytest
from pydantic import ValidationError

from shared.models import (
    CommitInput,
    DiffStats,
    FileChange,
    Grade,
    GradeSpec,
    MessageTier,
    Relation,
    SizeClass,
)


class TestEnumerations:
    """Test cases for ordered enumerations."""

    def test_grades_are_ordered_from_f_to_a(self):
        """Test grade ordering."""
        assert Grade.D > Grade.F
        assert Grade.C > Grade.D
        assert Grade.B > Grade.C
        assert Grade.A > Grade.B

    def test_grade_renders_as_letter(self):
        """Test grade string form."""
        assert str(Grade.A) == "A"
        assert f"{Grade.F!s}" == "F"

    def test_grade_from_letter(self):
        """Test grade lookup by letter."""
        assert Grade.from_letter("b") is Grade.B
        assert Grade.from_letter(" C ") is Grade.C

        with pytest.raises(ValueError):
            Grade.from_letter("E")

    def test_size_classes_are_ordered(self):
        """Test size class ordering."""
        assert SizeClass.TRIVIAL < SizeClass.SMALL < SizeClass.MEDIUM
        assert SizeClass.MEDIUM < SizeClass.LARGE < SizeClass.HUGE
        assert str(SizeClass.HUGE) == "Huge"

    def test_message_tiers_are_ordered(self):
        """Test message tier ordering."""
        assert MessageTier.POOR < MessageTier.FAIR < MessageTier.GOOD < MessageTier.EXCELLENT


class TestDiffStats:
    """Test cases for DiffStats."""

    def test_total(self):
        """Test total changed lines."""
        stats = DiffStats(insertions=10, deletions=5)

        assert stats.total == 15
        assert stats.files_changed == ()

    def test_files_changed_keeps_order_and_drops_duplicates(self):
        """Test that changed paths form an ordered set."""
        stats = DiffStats.from_paths(3, 1, ["b.py", "a.py", "b.py"])

        assert stats.files_changed == ("b.py", "a.py")

    def test_file_change_lines(self):
        """Test per-file line totals."""
        change = FileChange(path="src/app.py", insertions=4, deletions=2)

        assert change.lines == 6

    def test_negative_counts_are_rejected(self):
        """Test that impossible diff statistics fail validation."""
        with pytest.raises(ValidationError):
            DiffStats(insertions=-1, deletions=0)

        with pytest.raises(ValidationError):
            FileChange(path="a.py", deletions=-3)

    def test_zero_line_changes_are_representable(self):
        """Test that pure renames with no counted lines are valid."""
        stats = DiffStats.from_paths(0, 0, ["old.py"])

        assert stats.total == 0
        assert stats.files_changed == ("old.py",)


class TestCommitInput:
    """Test cases for CommitInput."""

    def test_defaults(self):
        """Test an ordinary single-parent commit."""
        commit = CommitInput(subject="Add login form")

        assert commit.parents == 1
        assert commit.is_root is False
        assert commit.is_merge is False
        assert commit.body == ()

    def test_flags_derive_from_parents(self):
        """Test root and merge flags derived from the parent count."""
        assert CommitInput(parents=0).is_root is True
        assert CommitInput(parents=2).is_merge is True
        assert CommitInput(parents=3).is_root is False

    def test_explicit_flags_win(self):
        """Test that explicitly given flags are kept."""
        commit = CommitInput(parents=1, is_root=True)

        assert commit.is_root is True

    def test_from_message(self):
        """Test splitting a raw message into subject and body."""
        commit = CommitInput.from_message("Subject line\n\nBody text\nmore")

        assert commit.subject == "Subject line"
        assert commit.body == ("", "Body text", "more")

    def test_from_empty_message(self):
        """Test that an empty message gives an empty subject."""
        commit = CommitInput.from_message("")

        assert commit.subject == ""
        assert commit.body == ()

    def test_commit_input_is_immutable(self):
        """Test that the engine input cannot be mutated."""
        commit = CommitInput(subject="Fix")

        with pytest.raises(ValidationError):
            commit.subject = "Changed"

    def test_negative_parents_rejected(self):
        """Test parent count validation."""
        with pytest.raises(ValidationError):
            CommitInput(parents=-1)


class TestGradeSpec:
    """Test cases for GradeSpec."""

    @pytest.mark.parametrize("text", ["", "+", "-", "C++", "Abyrvalg!", "E", "B*"])
    def test_invalid_grade_spec_returns_error(self, text):
        """Test rejected specifications."""
        with pytest.raises(ValueError):
            GradeSpec.parse(text)

    @pytest.mark.parametrize(
        "text,grade,relation",
        [
            ("A", Grade.A, Relation.EQ),
            ("b+", Grade.B, Relation.GE),
            ("C-", Grade.C, Relation.LE),
            ("f", Grade.F, Relation.EQ),
        ],
    )
    def test_valid_grade_spec_is_parsed(self, text, grade, relation):
        """Test accepted specifications, in both cases."""
        spec = GradeSpec.parse(text)

        assert spec.grade is grade
        assert spec.relation is relation

    def test_grade_spec_matches_eq(self):
        """Test exact matching."""
        spec = GradeSpec.parse("C")

        assert [g for g in Grade if spec.matches(g)] == [Grade.C]

    def test_grade_spec_matches_ge(self):
        """Test 'or better' matching."""
        spec = GradeSpec.parse("C+")

        assert {g for g in Grade if spec.matches(g)} == {Grade.A, Grade.B, Grade.C}

    def test_grade_spec_matches_le(self):
        """Test 'or worse' matching."""
        spec = GradeSpec.parse("C-")

        assert {g for g in Grade if spec.matches(g)} == {Grade.C, Grade.D, Grade.F}

    def test_grade_spec_renders(self):
        """Test the string form of a specification."""
        assert str(GradeSpec.parse("b+")) == "B+"
