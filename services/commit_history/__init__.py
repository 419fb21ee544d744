"""
Commit History Service

Reads commits and their diff statistics from a Git repository.
"""

from .repository import (
    AuthorFilter,
    CommitFilter,
    CommitFilters,
    CommitMetadata,
    GitHistory,
    HistoryEntry,
    HistoryItem,
    MergeFilter,
    RepositoryError,
    read_entries,
)

__version__ = "1.0.0"
__description__ = "Git commit history reader"

__all__ = [
    "AuthorFilter",
    "CommitFilter",
    "CommitFilters",
    "CommitMetadata",
    "GitHistory",
    "HistoryEntry",
    "HistoryItem",
    "MergeFilter",
    "RepositoryError",
    "read_entries",
]
