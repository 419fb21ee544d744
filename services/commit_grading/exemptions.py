"""
Detection of commits exempt from the size penalty.

Rules are an ordered list of named predicates. Any match exempts the commit.
The list errs on the side of missing an exemption: a genuinely bad huge
commit must not slip through as a "refactor".
"""

import logging
import re
from typing import Callable, List, NamedTuple

from config.settings import ExemptionSettings
from shared.models import CommitInput

from .size_classifier import ExclusionPolicy

logger = logging.getLogger(__name__)


class ExemptionRule(NamedTuple):
    name: str
    predicate: Callable[[CommitInput], bool]


def is_initial_commit(commit: CommitInput) -> bool:
    """Initial commits are inherently large and message-light."""
    return commit.is_root


def is_balanced_diff(commit: CommitInput, tolerance: float) -> bool:
    """Insertions and deletions differ by at most ``tolerance`` of the diff."""
    stats = commit.stats
    allowed = int(stats.total * tolerance)
    return abs(stats.insertions - stats.deletions) <= allowed


class ExemptionDetector:
    """Evaluates the configured exemption rules in order."""

    def __init__(self, settings: ExemptionSettings):
        self.settings = settings
        self.vendor_policy = ExclusionPolicy(settings.vendor_prefixes)
        self.update_patterns = [re.compile(p, re.IGNORECASE) for p in settings.update_patterns]
        self.move_pattern = re.compile(settings.move_pattern, re.IGNORECASE)
        self.rules: List[ExemptionRule] = [
            ExemptionRule("initial-commit", is_initial_commit),
            ExemptionRule("vendor-update", self.is_vendor_update),
            ExemptionRule("mechanical-move", self.is_mechanical_move),
        ]

    def is_vendor_update(self, commit: CommitInput) -> bool:
        paths = commit.stats.files_changed
        if not paths or not self.vendor_policy:
            return False
        if not all(self.vendor_policy.matches(path) for path in paths):
            return False
        subject = commit.subject.strip()
        return any(pattern.search(subject) for pattern in self.update_patterns)

    def is_mechanical_move(self, commit: CommitInput) -> bool:
        stats = commit.stats
        files = len(stats.files_changed)
        if files == 0 or not is_balanced_diff(commit, self.settings.balance_tolerance):
            return False
        if self.move_pattern.search(commit.subject):
            return True
        if stats.total == 0:
            return True
        # a one-file tweak is an ordinary edit, not a move
        return files > 1 and stats.total <= files * self.settings.max_lines_per_moved_file

    def detect(self, commit: CommitInput) -> bool:
        for rule in self.rules:
            if rule.predicate(commit):
                logger.debug(f"Commit {commit.subject!r} exempt by rule {rule.name}")
                return True
        return False
