"""
Size classification of commit diffs.

Lines in vendored or generated files are subtracted before the remaining
line count is bucketed, so a dependency drop does not make a commit Huge.
"""

import fnmatch
import logging
from typing import Iterable, Tuple

from config.settings import SizeSettings
from shared.models import DiffStats, SizeClass

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


class ExclusionPolicy:
    """Path rules whose files do not count towards commit size.

    A rule containing glob characters is matched with ``fnmatch`` against the
    full path and against the file name; any other rule is a directory prefix.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        patterns = tuple(patterns)
        self.globs: Tuple[str, ...] = tuple(p for p in patterns if _GLOB_CHARS & set(p))
        self.prefixes: Tuple[str, ...] = tuple(
            p.strip("/") for p in patterns if p.strip("/") and not _GLOB_CHARS & set(p)
        )

    def matches(self, path: str) -> bool:
        path = path.lstrip("/")
        for prefix in self.prefixes:
            if path == prefix or path.startswith(prefix + "/"):
                return True
        name = path.rsplit("/", 1)[-1]
        return any(
            fnmatch.fnmatchcase(path, pattern) or fnmatch.fnmatchcase(name, pattern)
            for pattern in self.globs
        )

    def __bool__(self) -> bool:
        return bool(self.globs or self.prefixes)


def effective_lines(stats: DiffStats, policy: ExclusionPolicy) -> int:
    """Changed lines after dropping the contribution of excluded files."""
    if not policy or not stats.files:
        return stats.total

    excluded = [change for change in stats.files if policy.matches(change.path)]
    if not excluded:
        return stats.total
    if len(excluded) == len(stats.files):
        return 0

    excluded_lines = sum(change.lines for change in excluded)
    logger.debug(
        f"Excluding {excluded_lines} lines in {len(excluded)} files from size"
    )
    return max(0, stats.total - excluded_lines)


class SizeClassifier:
    """Buckets effective changed lines using ascending inclusive thresholds."""

    def __init__(self, settings: SizeSettings):
        self.settings = settings
        self.policy = ExclusionPolicy(settings.exclude_patterns)
        self._bounds = (
            (settings.trivial_max, SizeClass.TRIVIAL),
            (settings.small_max, SizeClass.SMALL),
            (settings.medium_max, SizeClass.MEDIUM),
            (settings.large_max, SizeClass.LARGE),
        )

    def classify_lines(self, lines: int) -> SizeClass:
        for upper, size_class in self._bounds:
            if lines <= upper:
                return size_class
        return SizeClass.HUGE

    def classify(self, stats: DiffStats, policy: ExclusionPolicy = None) -> SizeClass:
        """Size class of a diff; ``policy`` overrides the configured exclusions."""
        lines = effective_lines(stats, self.policy if policy is None else policy)
        return self.classify_lines(lines)
