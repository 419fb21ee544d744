"""
Structural parsing of commit messages.

The parser never rejects a message. Whatever is malformed (a missing blank
line after the subject, overlong lines, stray whitespace) is recorded in the
resulting MessageStructure and left to the scorer to judge.
"""

import re
from typing import Iterable, List, Sequence

from shared.models import MessageStructure

DEFAULT_WRAP_WIDTH = 72

# Well-known Git trailer keys, compared case-insensitively.
TRAILER_KEYS = frozenset(
    [
        "acked-by",
        "analyzed-by",
        "approved-by",
        "assisted-by",
        "based-on",
        "bisected-by",
        "caught-by",
        "cc",
        "checked-by",
        "co-authored-by",
        "co-developed-by",
        "fixed-by",
        "fixes",
        "found-by",
        "investigated-by",
        "link",
        "rebased-by",
        "reported-by",
        "reviewed-by",
        "sent-by",
        "signed-off-by",
        "sponsored-by",
        "submitted-by",
        "suggested-by",
        "tested-by",
        "triaged-by",
        "written-by",
    ]
)

_FENCE = re.compile(r"^\s*(```|~~~)")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+>]|\d+[.)])\s+")


def is_blank(line: str) -> bool:
    return not line.strip()


def is_trailer(line: str) -> bool:
    key, sep, _ = line.partition(":")
    return bool(sep) and key.strip().lower() in TRAILER_KEYS


def is_indented_code(line: str) -> bool:
    return line.startswith(("    ", "\t"))


def is_unbreakable(line: str) -> bool:
    """A line with no whitespace left after its bullet/quote marker, e.g. a URL."""
    content = _LIST_MARKER.sub("", line, count=1).strip()
    return not any(ch.isspace() for ch in content)


def split_paragraphs(lines: Iterable[str]) -> List[List[str]]:
    paragraphs: List[List[str]] = []
    current: List[str] = []
    for line in lines:
        if is_blank(line):
            if current:
                paragraphs.append(current)
                current = []
        else:
            current.append(line)
    if current:
        paragraphs.append(current)
    return paragraphs


def wrap_violations(lines: Sequence[str], width: int) -> tuple:
    """Return (checked, overlong) counts for the non-blank lines of a body.

    Fenced and indented code blocks and unbreakable lines are not checked.
    """
    checked = overlong = 0
    in_fence = False
    for line in lines:
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence or is_blank(line) or is_indented_code(line) or is_unbreakable(line):
            continue
        checked += 1
        if len(line.rstrip()) > width:
            overlong += 1
    return checked, overlong


def parse(subject: str, body: Sequence[str], wrap_width: int = DEFAULT_WRAP_WIDTH) -> MessageStructure:
    """Derive the structure of a commit message from its subject and body lines."""
    subject = (subject or "").strip()
    structure = {
        "subject_len": len(subject),
        "subject_words": len(subject.split()),
    }

    lines = [line.rstrip("\r\n") for line in body or ()]
    if not lines:
        return MessageStructure(**structure)

    content = [line for line in lines if not is_trailer(line)]
    paragraphs = split_paragraphs(content)
    checked, overlong = wrap_violations(content, wrap_width)

    structure.update(
        has_blank_separator=is_blank(lines[0]),
        body_present=bool(paragraphs),
        paragraph_count=len(paragraphs),
        body_len=sum(len(line.strip()) for paragraph in paragraphs for line in paragraph),
        body_line_count=sum(len(paragraph) for paragraph in paragraphs),
        checked_line_count=checked,
        overlong_line_count=overlong,
        wrapped_ok=overlong == 0,
        trailer_count=len(lines) - len(content),
    )
    return MessageStructure(**structure)


class MessageParser:
    """Parser bound to a configured wrap width."""

    def __init__(self, wrap_width: int = DEFAULT_WRAP_WIDTH):
        self.wrap_width = wrap_width

    def parse(self, subject: str, body: Sequence[str]) -> MessageStructure:
        return parse(subject, body, self.wrap_width)
