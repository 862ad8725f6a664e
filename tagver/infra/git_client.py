"""
Git client infrastructure for tagver.

Provides a clean abstraction over git command execution.
All repository access goes through this client, making it:
- Easy to replace with an in-memory repository for testing
- Consistent in error handling
- Isolated from the version-resolution logic
"""

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from ..domain.tag import TagRef
from ..exit_codes import GitCommandError, NoWorkTreeError

logger = logging.getLogger(__name__)

# NUL separated so any ref name or subject survives parsing
TAG_FORMAT = ('%(refname)%00%(objectname)%00%(objecttype)%00'
              '%(*objectname)%00%(*objecttype)%00%(taggerdate:iso-strict)')
HEAD_FORMAT = '%H%x00%cI%x00%cn%x00%ce%x00%s'


@dataclass
class GitCommit:
    """A git commit with metadata."""
    hash: str
    date: datetime
    committer: str
    email: str
    message: str


@dataclass(frozen=True)
class RevCommit:
    """A commit seen during an ancestry walk."""
    id: str
    parents: Tuple[str, ...] = ()


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        logger.debug(f"Unparseable git date: {value!r}")
        return None


class RevWalk:
    """
    Streaming ancestry walk backed by `git rev-list --parents`.

    Commits are yielded in rev-list order (reverse chronological, children
    before their parents). The underlying process is a scoped resource: use
    the walk as a context manager so it is terminated on every exit path,
    including an early break out of the iteration.

    Example:
        with client.rev_walk(head_id) as walk:
            for commit in walk:
                print(commit.id, commit.parents)
    """

    def __init__(self, path: str, start: str):
        self.path = path
        self.start = start
        self._process: Optional[subprocess.Popen] = None
        self._stderr = None

    @property
    def command(self) -> List[str]:
        return ['git', 'rev-list', '--parents', self.start, '--']

    def _open(self) -> subprocess.Popen:
        if self._process is None:
            logger.debug(f"Starting walk in '{self.path}': {' '.join(self.command)}")
            # stderr goes to a file, a pipe left unread could block git mid-walk
            self._stderr = tempfile.TemporaryFile(mode='w+', encoding='utf-8')
            try:
                self._process = subprocess.Popen(
                    self.command,
                    cwd=self.path,
                    stdout=subprocess.PIPE,
                    stderr=self._stderr,
                    text=True,
                    encoding='utf-8'
                )
            except OSError as e:
                self._stderr.close()
                self._stderr = None
                raise GitCommandError(' '.join(self.command), -1, message=f"cannot start git: {e}") from e
        return self._process

    def _read_stderr(self) -> Optional[str]:
        if self._stderr is None:
            return None
        self._stderr.seek(0)
        return self._stderr.read()

    def __enter__(self) -> 'RevWalk':
        self._open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __iter__(self) -> Iterator[RevCommit]:
        process = self._open()
        assert process.stdout is not None
        for line in process.stdout:
            parts = line.split()
            if parts:
                yield RevCommit(parts[0], tuple(parts[1:]))

        returncode = process.wait()
        if returncode != 0:
            raise GitCommandError(' '.join(self.command), returncode, self._read_stderr())

    def close(self) -> None:
        """Terminate the walk process if still running and release its streams."""
        process = self._process
        if process is None:
            return
        self._process = None
        if process.poll() is None:
            process.kill()
        process.wait()
        if process.stdout is not None:
            process.stdout.close()
        if self._stderr is not None:
            self._stderr.close()
            self._stderr = None


class GitClient:
    """
    Abstraction over git commands for one repository.

    Provides the operations the version engine needs (ref resolution, tag
    listing and peeling, ancestry walks) plus head-commit details, with
    consistent error handling and return types.

    Example:
        client = GitClient("/path/to/repo")
        head = client.resolve("HEAD")
        if head is None:
            print("Repository has no commits")
    """

    def __init__(self, path: str = ".", timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            path: Path inside the git repository
            timeout: Command timeout in seconds (default: 30)
        """
        self.path = str(path)
        self.timeout = timeout

    def _run(self, args: List[str], check: bool = False) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments passed to git
            check: Raise GitCommandError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git'] + args
        cmd_str = ' '.join(cmd)
        logger.debug(f"Running command in '{self.path}': {cmd_str}")

        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                encoding='utf-8',
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(f"Git command timed out: {cmd_str}")
            if check:
                raise GitCommandError(cmd_str, -1, message=f"git command timed out: {cmd_str}") from e
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {cmd_str} - {e}")
            if check:
                raise GitCommandError(cmd_str, -1, message=f"cannot run git: {e}") from e
            return None, -1

        if check and result.returncode != 0:
            raise GitCommandError(cmd_str, result.returncode, result.stderr)

        output = result.stdout
        return output.strip() if output else None, result.returncode

    def is_git_repo(self) -> bool:
        """Check if the client path is inside a git repository."""
        if not os.path.isdir(self.path):
            return False
        _, code = self._run(['rev-parse', '--git-dir'])
        return code == 0

    def is_bare(self) -> bool:
        output, code = self._run(['rev-parse', '--is-bare-repository'])
        return code == 0 and output == 'true'

    def resolve(self, rev: str) -> Optional[str]:
        """
        Resolve a revision to a commit id.

        Returns:
            Full commit id, or None when the revision does not exist
            (including HEAD of a repository without commits)
        """
        output, code = self._run(['rev-parse', '--verify', '--quiet', f'{rev}^{{commit}}'])
        if code == 0 and output:
            return output
        return None

    def tag_list(self) -> List[TagRef]:
        """
        List all tags, sorted by ref name.

        Annotated tags pointing directly at a commit come back already
        peeled and carry their tagger date. A tag of a tag stays unpeeled
        here, since for-each-ref dereferences one level only; `peel`
        resolves it down to the commit.
        """
        output, _ = self._run(['for-each-ref', f'--format={TAG_FORMAT}', 'refs/tags'], check=True)
        if not output:
            return []

        tags = []
        for line in output.split('\n'):
            parts = line.split('\x00')
            if len(parts) < 3:
                continue
            ref_name, object_id, object_type = parts[0], parts[1], parts[2]
            peeled_type = parts[4] if len(parts) > 4 else ''
            peeled = parts[3] if len(parts) > 3 and parts[3] and peeled_type == 'commit' else None
            date = _parse_date(parts[5]) if len(parts) > 5 else None

            annotated = object_type == 'tag'
            tags.append(TagRef.from_ref_name(
                ref_name,
                object_id,
                annotated=annotated,
                peeled_id=peeled if annotated else None,
                tagger_date=date if annotated else None
            ))

        logger.debug(f"Read {len(tags)} tags from {self.path}")
        return tags

    def peel(self, tag: TagRef) -> TagRef:
        """
        Resolve an annotated tag to the commit it points at.

        Raises:
            GitCommandError: If the tag object cannot be peeled
        """
        if tag.is_peeled:
            return tag
        output, code = self._run(['rev-parse', '--verify', '--quiet', f'{tag.object_id}^{{}}'])
        if code != 0 or not output:
            raise GitCommandError(f"git rev-parse {tag.object_id}^{{}}", code, message=f"cannot peel tag {tag.name}")
        return tag.with_peeled_id(output)

    def rev_walk(self, start: str) -> RevWalk:
        """Open an ancestry walk starting at the given commit."""
        return RevWalk(self.path, start)

    def commit_date(self, commit_id: str) -> Optional[datetime]:
        """Committer date of a commit."""
        output, _ = self._run(['show', '-s', '--format=%cI', commit_id], check=True)
        return _parse_date(output)

    def tag_date(self, tag: TagRef) -> Optional[datetime]:
        """
        Creation date of a tag.

        Annotated tags use their tagger date; lightweight tags carry no date
        of their own, so the committer date of the tagged commit is used.
        """
        if not tag.annotated:
            return self.commit_date(tag.target)
        if tag.tagger_date is not None:
            return tag.tagger_date
        output, _ = self._run(
            ['for-each-ref', '--format=%(taggerdate:iso-strict)', tag.ref_name],
            check=True
        )
        return _parse_date(output)

    def head_commit_info(self) -> Optional[GitCommit]:
        """Committer details of the HEAD commit, None for an empty repository."""
        output, code = self._run(['log', '-1', f'--format={HEAD_FORMAT}', 'HEAD'])
        if code != 0 or not output:
            return None

        parts = output.split('\x00', 4)
        if len(parts) < 5:
            return None

        return GitCommit(
            hash=parts[0],
            date=_parse_date(parts[1]) or datetime.now(),
            committer=parts[2],
            email=parts[3],
            message=parts[4]
        )

    def current_branch(self) -> Optional[str]:
        """Get current branch name, None when HEAD is detached."""
        output, code = self._run(['symbolic-ref', '--quiet', '--short', 'HEAD'])
        if code == 0 and output:
            return output
        return None

    def is_dirty(self) -> bool:
        """
        Check if tracked files have uncommitted changes.

        Raises:
            NoWorkTreeError: For a repository without worktree and index
        """
        if self.is_bare():
            raise NoWorkTreeError('git status', -1, message=f"no worktree and index at {self.path}")
        output, _ = self._run(['status', '--porcelain', '--untracked-files=no'], check=True)
        return bool(output)
