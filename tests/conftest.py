"""
Shared fixtures for tagver tests.

- GitRepo: builds real throwaway git repositories with deterministic dates
- FakeRepository: in-memory commit graph implementing the rev_walk() and
  tag_date() accessors the services need
"""

import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from tagver.infra.git_client import RevCommit

EPOCH = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class GitRepo:
    """A real git repository in a temporary directory."""

    def __init__(self, path: Path):
        self.path = path
        self.clock = EPOCH
        self.counter = 0
        path.mkdir(parents=True, exist_ok=True)
        self.git('init', '-q')
        self.git('symbolic-ref', 'HEAD', 'refs/heads/master')

    def _env(self):
        env = os.environ.copy()
        date = self.clock.strftime('%Y-%m-%dT%H:%M:%S+0000')
        env.update({
            'GIT_AUTHOR_NAME': 'Test Author',
            'GIT_AUTHOR_EMAIL': 'author@example.com',
            'GIT_COMMITTER_NAME': 'Test Committer',
            'GIT_COMMITTER_EMAIL': 'committer@example.com',
            'GIT_AUTHOR_DATE': date,
            # also used as the tagger date of annotated tags
            'GIT_COMMITTER_DATE': date,
            'GIT_CONFIG_NOSYSTEM': '1',
        })
        return env

    def git(self, *args) -> str:
        cmd = ['git', '-c', 'commit.gpgSign=false', '-c', 'tag.gpgSign=false',
               '-c', 'init.defaultBranch=master'] + list(args)
        result = subprocess.run(
            cmd, cwd=self.path, capture_output=True, text=True, env=self._env(), check=True
        )
        return result.stdout.strip()

    def tick(self, minutes: int = 1) -> None:
        self.clock += timedelta(minutes=minutes)

    def commit(self, message: str = None) -> str:
        """Create a commit adding its own file; returns its id.

        Each commit touches a different file so branches always merge cleanly.
        """
        self.tick()
        self.counter += 1
        name = f"file{self.counter}.txt"
        (self.path / name).write_text(f"change {self.counter}\n")
        self.git('add', name)
        self.git('commit', '-q', '-m', message or f"commit {self.counter}")
        return self.head()

    def tag(self, name: str, annotated: bool = False, rev: str = 'HEAD') -> None:
        self.tick()
        if annotated:
            self.git('tag', '-a', name, '-m', f"release {name}", rev)
        else:
            self.git('tag', name, rev)

    def head(self) -> str:
        return self.git('rev-parse', 'HEAD')

    def checkout(self, rev: str, create: bool = False) -> None:
        if create:
            self.git('checkout', '-q', '-b', rev)
        else:
            self.git('checkout', '-q', rev)

    def merge(self, branch: str) -> str:
        self.tick()
        self.git('merge', '-q', '--no-ff', '--no-edit', branch)
        return self.head()

    def make_dirty(self) -> None:
        """Modify a tracked file without committing."""
        (self.path / f"file{self.counter}.txt").write_text("uncommitted\n")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user configuration and TAGVER_* variables out of the tests."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    for key in list(os.environ):
        if key.startswith('TAGVER_'):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def git_repo(tmp_path):
    """An empty git repository on branch master."""
    return GitRepo(tmp_path / 'repo')


class FakeWalk:
    """Context-managed iterator over FakeRepository commits."""

    def __init__(self, repository, start):
        self.repository = repository
        self.start = start
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        self.closed = True

    def __iter__(self):
        reachable = self.repository.ancestors(self.start)
        # children before parents, newest first
        for commit_id in reversed(self.repository.order):
            if self.closed:
                return
            if commit_id in reachable:
                self.repository.yielded += 1
                yield RevCommit(commit_id, self.repository.parents[commit_id])


class FakeRepository:
    """
    In-memory commit graph.

    Example:
        repo = FakeRepository()
        repo.add('A')
        repo.add('B', 'A')
        repo.add('C', 'B')
    """

    def __init__(self):
        self.parents = {}
        self.order = []
        self.dates = {}
        self.walks = []
        self.yielded = 0
        self.branch = 'master'

    def add(self, commit_id, *parents, date=None):
        self.parents[commit_id] = tuple(parents)
        self.order.append(commit_id)
        self.dates[commit_id] = date or EPOCH + timedelta(minutes=len(self.order))
        return commit_id

    def chain(self, *ids):
        previous = None
        for commit_id in ids:
            if previous is None:
                self.add(commit_id)
            else:
                self.add(commit_id, previous)
            previous = commit_id

    def ancestors(self, start):
        seen = set()
        stack = [start]
        while stack:
            current = stack.pop()
            if current in seen or current not in self.parents:
                continue
            seen.add(current)
            stack.extend(self.parents[current])
        return seen

    def rev_walk(self, start):
        walk = FakeWalk(self, start)
        self.walks.append(walk)
        return walk

    def commit_date(self, commit_id):
        return self.dates.get(commit_id)

    def tag_date(self, tag):
        if tag.annotated:
            return tag.tagger_date
        return self.commit_date(tag.target)

    def current_branch(self):
        return self.branch


@pytest.fixture
def fake_repo():
    return FakeRepository()
