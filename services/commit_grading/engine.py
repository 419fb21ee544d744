"""
Grading engine: one commit in, one grade out.

The engine is a pure function of a CommitInput and the settings it was built
with. It holds no state between calls, so commits can be graded on worker
threads; ``grade_many`` hands results back in input order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from config.settings import Settings, get_settings
from shared.models import CommitInput, Grade, GradedCommit

from .exemptions import ExemptionDetector
from .grade_combiner import GradeCombiner
from .message_parser import MessageParser
from .message_scorer import MessageScorer
from .size_classifier import SizeClassifier

logger = logging.getLogger(__name__)


class GradingEngine:
    """Wires the size classifier, exemption detector, message parser,
    message scorer and grade combiner from one settings object."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.size_classifier = SizeClassifier(self.settings.size)
        self.exemption_detector = ExemptionDetector(self.settings.exemption)
        self.message_parser = MessageParser(self.settings.message.wrap_width)
        self.message_scorer = MessageScorer(self.settings.message)
        self.grade_combiner = GradeCombiner(self.settings.grades)

    def evaluate(self, commit: CommitInput) -> GradedCommit:
        """Grade a commit and keep every intermediate result."""
        size_class = self.size_classifier.classify(commit.stats)
        exempt = self.exemption_detector.detect(commit)
        structure = self.message_parser.parse(commit.subject, commit.body)
        score = self.message_scorer.score(structure)
        grade = self.grade_combiner.combine(size_class, exempt, score)

        logger.debug(
            f"Graded {commit.subject!r}: size={size_class!s}, exempt={exempt}, "
            f"score={score.value} ({score.tier!s}), grade={grade!s}"
        )
        return GradedCommit(
            size_class=size_class,
            exempt=exempt,
            structure=structure,
            score=score,
            grade=grade,
        )

    def grade(self, commit: CommitInput) -> Grade:
        return self.evaluate(commit).grade

    def grade_many(self, commits: Iterable[CommitInput], workers: int = 1) -> List[GradedCommit]:
        """Evaluate commits, in parallel when ``workers > 1``, preserving order."""
        commits = list(commits)
        if workers <= 1 or len(commits) <= 1:
            return [self.evaluate(commit) for commit in commits]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.evaluate, commits))
