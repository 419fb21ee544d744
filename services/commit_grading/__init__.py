"""
Commit Grading Service

Grades commits A-F from the size of the change and the structure of the
commit message.
"""

from .engine import GradingEngine
from .exemptions import ExemptionDetector, ExemptionRule
from .grade_combiner import GradeCombiner
from .message_parser import MessageParser, parse
from .message_scorer import MessageScorer
from .size_classifier import ExclusionPolicy, SizeClassifier

__version__ = "1.0.0"
__description__ = "Size and message based commit grading"

__all__ = [
    "ExclusionPolicy",
    "ExemptionDetector",
    "ExemptionRule",
    "GradeCombiner",
    "GradingEngine",
    "MessageParser",
    "MessageScorer",
    "SizeClassifier",
    "parse",
]
