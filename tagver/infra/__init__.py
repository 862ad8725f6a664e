"""
Infrastructure layer for tagver.

Contains abstractions for external systems:
- GitClient: Git command execution for one repository
- RevWalk: Streaming, scoped ancestry traversal

These provide clean interfaces that can be replaced for testing.
"""

from .git_client import GitClient, GitCommit, RevCommit, RevWalk

__all__ = [
    'GitClient',
    'GitCommit',
    'RevCommit',
    'RevWalk',
]
