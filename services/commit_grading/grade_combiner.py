"""
Combination of size and message quality into a letter grade.

This is the only place where the two signals meet. The decision table comes
from settings, so it can be tuned (or replaced by a smoother function)
without touching parsing or classification.
"""

from typing import Dict, Tuple

from config.settings import GradeTableSettings
from shared.models import Grade, MessageScore, MessageTier, SizeClass


class GradeCombiner:
    """Looks up the grade for a (size class, message tier) pair.

    Exempt commits are graded on the message alone: an excellent message
    gives A, anything else the exempt floor.
    """

    def __init__(self, settings: GradeTableSettings):
        self.settings = settings
        self.exempt_floor = Grade.from_letter(settings.exempt_floor)
        self.table: Dict[Tuple[SizeClass, MessageTier], Grade] = {}
        for size_class, row in zip(SizeClass, settings.rows()):
            for tier, letter in zip(MessageTier, row):
                self.table[(size_class, tier)] = Grade.from_letter(letter)

    def combine(self, size_class: SizeClass, exempt: bool, message_score: MessageScore) -> Grade:
        if not exempt:
            return self.table[(size_class, message_score.tier)]
        if message_score.tier is MessageTier.EXCELLENT:
            return Grade.A
        return self.exempt_floor
