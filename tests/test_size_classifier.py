"""
Unit tests for size classification.
"""

import pytest

from config.settings import SizeSettings
from services.commit_grading.size_classifier import (
    ExclusionPolicy,
    SizeClassifier,
    effective_lines,
)
from shared.models import DiffStats, FileChange, SizeClass


def make_stats(*changes):
    files = tuple(FileChange(path=path, insertions=ins, deletions=dels) for path, ins, dels in changes)
    return DiffStats(
        insertions=sum(c.insertions for c in files),
        deletions=sum(c.deletions for c in files),
        files=files,
    )


class TestExclusionPolicy:
    """Test cases for ExclusionPolicy."""

    def test_prefix_matches_on_directory_boundary(self):
        """Test prefix rules."""
        policy = ExclusionPolicy(["vendor/"])

        assert policy.matches("vendor/lib/a.go")
        assert policy.matches("vendor")
        assert not policy.matches("vendored/a.go")
        assert not policy.matches("src/vendor/a.go")

    def test_glob_matches_path_or_file_name(self):
        """Test glob rules."""
        policy = ExclusionPolicy(["*.lock", "gen/*_pb2.py"])

        assert policy.matches("Cargo.lock")
        assert policy.matches("frontend/yarn.lock")
        assert policy.matches("gen/api_pb2.py")
        assert not policy.matches("src/lock.py")

    def test_patterns_from_generator(self):
        """Test that a one-shot iterable keeps both prefix and glob rules."""
        policy = ExclusionPolicy(p for p in ["vendor/", "*.lock"])

        assert policy.prefixes == ("vendor",)
        assert policy.globs == ("*.lock",)
        assert policy.matches("vendor/x.go")
        assert policy.matches("Cargo.lock")

    def test_empty_policy_is_falsy(self):
        """Test that an empty policy matches nothing."""
        policy = ExclusionPolicy([])

        assert not policy
        assert not policy.matches("vendor/a.go")


class TestEffectiveLines:
    """Test cases for effective_lines."""

    def test_no_exclusions(self):
        """Test that unmatched files count in full."""
        stats = make_stats(("src/a.py", 10, 2), ("src/b.py", 3, 0))

        assert effective_lines(stats, ExclusionPolicy(["vendor/"])) == 15

    def test_excluded_lines_are_subtracted(self):
        """Test partial exclusion."""
        stats = make_stats(("src/a.py", 10, 2), ("package-lock.json", 900, 850))

        assert effective_lines(stats, ExclusionPolicy(["package-lock.json"])) == 12

    def test_all_files_excluded(self):
        """Test that a commit touching only excluded files counts as zero lines."""
        stats = make_stats(("vendor/a.go", 4000, 10), ("vendor/b.go", 100, 0))

        assert effective_lines(stats, ExclusionPolicy(["vendor/"])) == 0

    def test_totals_without_file_breakdown(self):
        """Test stats with only totals."""
        stats = DiffStats(insertions=50, deletions=5)

        assert effective_lines(stats, ExclusionPolicy(["vendor/"])) == 55

    def test_never_negative(self):
        """Test that inconsistent per-file counts never produce negative sizes."""
        files = (
            FileChange(path="src/a.py", insertions=1),
            FileChange(path="vendor/a.go", insertions=500),
        )
        stats = DiffStats(insertions=10, deletions=0, files=files)

        assert effective_lines(stats, ExclusionPolicy(["vendor/"])) == 0


class TestSizeClassifier:
    """Test cases for SizeClassifier."""

    @pytest.fixture
    def classifier(self):
        return SizeClassifier(SizeSettings())

    @pytest.mark.parametrize(
        "lines,expected",
        [
            (0, SizeClass.TRIVIAL),
            (24, SizeClass.TRIVIAL),
            (25, SizeClass.SMALL),
            (80, SizeClass.SMALL),
            (81, SizeClass.MEDIUM),
            (300, SizeClass.MEDIUM),
            (301, SizeClass.LARGE),
            (1000, SizeClass.LARGE),
            (1001, SizeClass.HUGE),
            (250000, SizeClass.HUGE),
        ],
    )
    def test_thresholds_are_inclusive(self, classifier, lines, expected):
        """Test boundaries of every size class."""
        assert classifier.classify_lines(lines) is expected

    def test_classification_is_monotonic(self, classifier):
        """Test that more lines never give a smaller class."""
        classes = [classifier.classify_lines(n) for n in range(0, 1500, 7)]

        assert classes == sorted(classes)

    def test_empty_diff_is_trivial(self, classifier):
        """Test a commit with no changed files."""
        assert classifier.classify(DiffStats()) is SizeClass.TRIVIAL

    def test_vendored_files_do_not_count(self, classifier):
        """Test that configured exclusions reduce the size class."""
        stats = make_stats(("src/main.go", 20, 5), ("vendor/github.com/x/y.go", 3000, 1200))

        assert stats.total > 1000
        assert classifier.classify(stats) is SizeClass.SMALL

    def test_policy_override(self, classifier):
        """Test that an explicit policy replaces the configured one."""
        stats = make_stats(("src/main.go", 20, 5), ("vendor/github.com/x/y.go", 3000, 1200))

        assert classifier.classify(stats, policy=ExclusionPolicy()) is SizeClass.HUGE

    def test_custom_thresholds(self):
        """Test classification with tuned thresholds."""
        classifier = SizeClassifier(
            SizeSettings(trivial_max=5, small_max=10, medium_max=20, large_max=40)
        )

        assert classifier.classify_lines(6) is SizeClass.SMALL
        assert classifier.classify_lines(41) is SizeClass.HUGE
