"""
Message quality scoring.

Each structural signal is scored between 0 and 1 by its own function and the
weighted sum is scaled to 0-100. The scorer looks at message structure only;
leniency for small commits lives in the grade combiner.
"""

import logging
from typing import Dict

from config.settings import MessageSettings
from shared.models import MessageScore, MessageStructure, MessageTier

logger = logging.getLogger(__name__)


def subject_score(structure: MessageStructure, settings: MessageSettings) -> float:
    """Score the subject by length.

    One-word subjects ("Fix", "JIRA-1234") get nothing regardless of length.
    Credit ramps up between the short and minimum lengths, is full up to the
    maximum length and fades out towards the hard maximum, since long
    subjects at least carry some information.
    """
    length = structure.subject_len
    if structure.subject_words <= 1 or length <= settings.subject_short_length:
        return 0.0
    if length < settings.subject_min_length:
        span = settings.subject_min_length - settings.subject_short_length
        return (length - settings.subject_short_length) / span
    if length <= settings.subject_max_length:
        return 1.0
    if length < settings.subject_hard_max_length:
        span = settings.subject_hard_max_length - settings.subject_max_length
        return (settings.subject_hard_max_length - length) / span
    return 0.0


def body_score(structure: MessageStructure) -> float:
    return 1.0 if structure.body_present else 0.0


def separator_score(structure: MessageStructure) -> float:
    return 1.0 if structure.body_present and structure.has_blank_separator else 0.0


def wrapping_score(structure: MessageStructure) -> float:
    """Fraction of checked body lines within the wrap width.

    A pasted log or an ASCII diagram costs only its share of the body.
    """
    if not structure.body_present:
        return 0.0
    if structure.checked_line_count == 0:
        return 1.0
    return 1.0 - structure.overlong_line_count / structure.checked_line_count


def paragraphs_score(structure: MessageStructure) -> float:
    count = structure.paragraph_count
    if count == 0:
        return 0.0
    if count == 1:
        return 0.5
    if count == 2:
        return 0.85
    return 1.0


def trailers_score(structure: MessageStructure) -> float:
    count = structure.trailer_count
    if count == 0:
        return 0.0
    if count == 1:
        return 0.6
    if count == 2:
        return 0.8
    return 1.0


class MessageScorer:
    """Combines the per-signal scores into a MessageScore."""

    def __init__(self, settings: MessageSettings):
        self.settings = settings

    def components(self, structure: MessageStructure) -> Dict[str, float]:
        return {
            "subject": subject_score(structure, self.settings),
            "body": body_score(structure),
            "separator": separator_score(structure),
            "wrapping": wrapping_score(structure),
            "paragraphs": paragraphs_score(structure),
            "trailers": trailers_score(structure),
        }

    def tier(self, value: int) -> MessageTier:
        if value >= self.settings.excellent_score:
            return MessageTier.EXCELLENT
        if value >= self.settings.good_score:
            return MessageTier.GOOD
        if value >= self.settings.fair_score:
            return MessageTier.FAIR
        return MessageTier.POOR

    def score(self, structure: MessageStructure) -> MessageScore:
        weights = self.settings.weights
        components = self.components(structure)
        weighted = sum(getattr(weights, name) * value for name, value in components.items())
        value = round(100 * weighted / weights.total())
        value = min(100, max(0, value))

        logger.debug(f"Message score {value}: {components}")
        return MessageScore(value=value, tier=self.tier(value), components=components)
