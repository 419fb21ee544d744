"""
Commit history reader backed by GitPython.

Walks a repository from a start revision in ``git log`` order and turns each
commit into a CommitInput for the grading engine. Metadata filters run before
diff statistics are computed, since stats are the expensive part.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from git import Repo
from git.exc import BadName, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from shared.models import CommitInput, DiffStats, FileChange

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 7


class RepositoryError(Exception):
    """The repository or start revision cannot be read."""


@dataclass(frozen=True)
class CommitMetadata:
    """Cheap per-commit facts available without computing a diff."""

    id: str
    author: str
    parents: int

    @property
    def short_id(self) -> str:
        return self.id[:SHORT_ID_LENGTH]

    @property
    def is_merge(self) -> bool:
        return self.parents >= 2


class CommitFilter:
    """Decides from metadata alone whether a commit is worth parsing."""

    def accept(self, metadata: CommitMetadata) -> bool:
        raise NotImplementedError


class AuthorFilter(CommitFilter):
    """Accepts only commits by an exact author name."""

    def __init__(self, author: str):
        self.author = author

    def accept(self, metadata: CommitMetadata) -> bool:
        return metadata.author == self.author


class MergeFilter(CommitFilter):
    """Accepts only non-merge commits."""

    def accept(self, metadata: CommitMetadata) -> bool:
        return not metadata.is_merge


class CommitFilters:
    """A chain of filters; a commit must pass all of them."""

    def __init__(self, filters: Sequence[CommitFilter] = ()):
        self.filters = list(filters)

    def accept(self, metadata: CommitMetadata) -> bool:
        return all(f.accept(metadata) for f in self.filters)


def decode_message(message) -> str:
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return message or ""


def extract_diff_stats(commit) -> DiffStats:
    """Per-file insertion and deletion counts of a commit against its first parent."""
    stats = commit.stats
    files = tuple(
        FileChange(
            path=path,
            insertions=counts.get("insertions", 0),
            deletions=counts.get("deletions", 0),
        )
        for path, counts in stats.files.items()
    )
    return DiffStats(
        insertions=stats.total.get("insertions", 0),
        deletions=stats.total.get("deletions", 0),
        files=files,
    )


@dataclass(frozen=True)
class HistoryEntry:
    """A commit ready for grading, with the metadata shown alongside its grade."""

    metadata: CommitMetadata
    commit: CommitInput


class HistoryItem:
    """A traversed commit whose diff has not been computed yet."""

    def __init__(self, metadata: CommitMetadata, git_commit):
        self.metadata = metadata
        self.git_commit = git_commit

    def parse(self) -> CommitInput:
        """Build the CommitInput; raises ValueError for impossible diff stats."""
        message = decode_message(self.git_commit.message)
        return CommitInput.from_message(
            message,
            stats=extract_diff_stats(self.git_commit),
            parents=self.metadata.parents,
        )


class GitHistory:
    """Read-only view of a repository's commit graph."""

    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def open(cls, path: str = ".") -> "GitHistory":
        if not os.path.exists(path):
            raise RepositoryError(f"Repository path does not exist: {path}")
        try:
            repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise RepositoryError(f"Invalid Git repository: {path}")
        logger.debug(f"Opened repository at {repo.working_dir}")
        return cls(repo)

    def traverse(self, start: str = "HEAD") -> Iterator[HistoryItem]:
        try:
            self.repo.commit(start)
        except (BadName, GitCommandError, ValueError) as e:
            raise RepositoryError(f"Unknown revision {start!r}: {e}")

        try:
            for git_commit in self.repo.iter_commits(start):
                metadata = CommitMetadata(
                    id=git_commit.hexsha,
                    author=git_commit.author.name or "",
                    parents=len(git_commit.parents),
                )
                yield HistoryItem(metadata, git_commit)
        except GitCommandError as e:
            logger.error(f"Git command error while walking {start}: {e}")
            raise RepositoryError(f"Git command error: {e}")


def read_entries(items: Iterable[HistoryItem], filters: Optional[CommitFilters] = None) -> Iterator[HistoryEntry]:
    """Parse the items that pass the filters, skipping commits that fail to parse."""
    filters = filters or CommitFilters()
    for item in items:
        if not filters.accept(item.metadata):
            continue
        try:
            commit = item.parse()
        except (ValueError, GitCommandError) as e:
            logger.warning(f"Skipping commit {item.metadata.short_id}: {e}")
            continue
        yield HistoryEntry(metadata=item.metadata, commit=commit)

