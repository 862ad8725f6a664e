"""
Version calculation service for tagver.

Orchestrates one version computation:

    classify tags -> filter reachable -> resolve base commit -> strategy.build

and caches the result. The cached version stays valid until HEAD moves to
another commit or the configuration changes.
"""

import logging
from typing import Any, Dict, Optional, Union

from ..config import load_config
from ..domain.commit import Commit
from ..domain.metadata import Metadatas, MetadataHolder
from ..domain.policy import LookupPolicy, Strategies
from ..domain.version import Version
from ..exit_codes import ConfigError, NoWorkTreeError, VersionCalculationError
from ..infra.git_client import GitClient
from ..strategies import (
    STRATEGY_OPTIONS,
    MavenVersionStrategy,
    Pep440VersionStrategy,
    VersionNamingConfiguration,
    VersionStrategy,
    create_strategy,
)
from .base_commit import BaseCommitResolver, deepest_reachable_commit
from .tag_classifier import TagSets, classify

logger = logging.getLogger(__name__)

ENGINE_OPTIONS = (
    'strategy',
    'lookup_policy',
    'max_depth',
    'find_tag_version_pattern',
    'non_qualifier_branches',
)
OPTIONS = ENGINE_OPTIONS + tuple(o for o in STRATEGY_OPTIONS if o not in ENGINE_OPTIONS)


def _validate_options(options: Dict[str, Any]) -> None:
    unknown = sorted(set(options) - set(OPTIONS))
    if unknown:
        raise ConfigError(f"Unknown version option(s): {', '.join(unknown)}")
    if 'strategy' in options:
        Strategies.parse(options['strategy'])
    if 'lookup_policy' in options:
        LookupPolicy.parse(options['lookup_policy'])
    max_depth = options.get('max_depth')
    if max_depth is not None and (isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0):
        raise ConfigError(f"max_depth must be a non-negative integer, got {max_depth!r}")


class VersionCalculator:
    """
    Computes the version of a git working tree.

    Example:
        calculator = VersionCalculator("/path/to/repo")
        print(calculator.get_version())            # "1.0.0-3"
        calculator.configure(lookup_policy="nearest", strategy="maven")
        print(calculator.get_version())            # recomputed: "1.0.1-SNAPSHOT"
        print(calculator.meta(Metadatas.BASE_TAG)) # "v1.0.0"
    """

    def __init__(
        self,
        path: str = ".",
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize VersionCalculator.

        Args:
            path: Path inside the git working tree
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
        """
        self.path = str(path)
        self.config = config if config is not None else load_config(project_dir=self.path)
        timeout = self.config.get('git', {}).get('timeout_seconds', 30)
        self.git = git_client or GitClient(self.path, timeout=timeout)

        self.options: Dict[str, Any] = {
            k: v for k, v in self.config.get('version', {}).items() if k in OPTIONS
        }
        _validate_options(self.options)

        self.metadatas = MetadataHolder()
        self.head_commit: Optional[Commit] = None
        self.base_commit: Optional[Commit] = None
        self._computation_required = True
        self._computed_version = None
        self._computed_head: Optional[str] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, **options) -> 'VersionCalculator':
        """Change version options; the next access recomputes."""
        _validate_options(options)
        self.options.update(options)
        self._computation_required = True
        return self

    @property
    def lookup_policy(self) -> LookupPolicy:
        return LookupPolicy.parse(self.options.get('lookup_policy', 'max'))

    @property
    def strategy_name(self) -> Strategies:
        return Strategies.parse(self.options.get('strategy', 'configurable'))

    @property
    def max_depth(self) -> Optional[int]:
        return self.options.get('max_depth')

    def naming(self) -> VersionNamingConfiguration:
        kwargs = {}
        if self.options.get('find_tag_version_pattern'):
            kwargs['find_tag_version_pattern'] = self.options['find_tag_version_pattern']
        if self.options.get('non_qualifier_branches') is not None:
            kwargs['non_qualifier_branches'] = self.options['non_qualifier_branches']
        return VersionNamingConfiguration(**kwargs)

    def create_strategy(self, metadatas: Optional[MetadataHolder] = None) -> VersionStrategy:
        return create_strategy(
            self.strategy_name,
            self.naming(),
            self.git,
            metadatas if metadatas is not None else self.metadatas,
            self.options
        )

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def _current_head(self) -> str:
        return self.git.resolve('HEAD') or ''

    def needs_recompute(self) -> bool:
        if self._computation_required:
            return True
        return self._current_head() != self._computed_head

    def get_version_object(self, force: bool = False):
        """
        Get the computed version, recomputing when needed.

        Args:
            force: Recompute even if the cached version is still valid

        Raises:
            VersionCalculationError: If git access fails during the computation
            ConfigError: For invalid options
        """
        if force or self.needs_recompute():
            self._compute()
        else:
            logger.debug(f"Using cached version {self._computed_version}")
        return self._computed_version

    def get_version(self, force: bool = False) -> str:
        return str(self.get_version_object(force))

    def meta(self, key: Union[Metadatas, str]) -> Optional[str]:
        """Metadata of the last computation (computing first if needed)."""
        if isinstance(key, str):
            key = Metadatas[key.upper()]
        if self._computed_version is None:
            self.get_version()
        return self.metadatas.meta(key)

    def describe(self) -> Dict[str, Any]:
        """Summary of the last computation: version, head and base commits."""
        version = self.get_version_object()
        return {
            'path': self.path,
            'version': str(version),
            'strategy': self.strategy_name.value,
            'lookup_policy': self.lookup_policy.value,
            'max_depth': self.max_depth,
            'dirty': self.metadatas.meta(Metadatas.DIRTY) == 'true',
            'head': self.head_commit.to_dict() if self.head_commit else None,
            'base': self.base_commit.to_dict() if self.base_commit else None,
            'base_tag': self.metadatas.meta(Metadatas.BASE_TAG),
        }

    def classify_tags(self) -> TagSets:
        """Classify the repository tags with the configured strategy."""
        strategy = self.create_strategy(MetadataHolder())
        head_id = self.git.resolve('HEAD')
        return classify(self.git.tag_list(), head_id, strategy.is_version_tag, peel=self.git.peel)

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def _compute(self) -> None:
        self.metadatas = MetadataHolder()
        self.head_commit = None
        self.base_commit = None

        if not self.git.is_git_repo():
            logger.debug(f"{self.path} is not a git repository")
            version = Version.NOT_GIT_VERSION
        else:
            try:
                version = self._build_version()
            except NoWorkTreeError as e:
                # e.g. a bare repository or a detached git worktree
                logger.debug(f"No worktree and index: {e}")
                version = Version.NO_WORKTREE_AND_INDEX
            except ConfigError:
                raise
            except Exception as e:
                raise VersionCalculationError(f"failure calculating version for {self.path}: {e}") from e

        self._computed_version = version
        self._computed_head = self._current_head()
        self._computation_required = False
        logger.debug(f"Computed version {version} at {self._computed_head[:8] or 'no HEAD'}")

    def _build_version(self):
        strategy = self.create_strategy()

        dirty = self.git.is_dirty()
        self.metadatas.register_metadata(Metadatas.DIRTY, str(dirty).lower())
        if dirty:
            self.metadatas.register_metadata(Metadatas.DIRTY_TEXT, 'dirty')

        head_id = self.git.resolve('HEAD')
        sets = classify(self.git.tag_list(), head_id, strategy.is_version_tag, peel=self.git.peel)

        if head_id is None:
            # freshly initialized repository without any commit
            sets.register(self.metadatas, include_head=False)
            return Version.EMPTY_REPOSITORY_VERSION

        sets.register(self.metadatas)
        info = self.git.head_commit_info()
        if info is not None:
            self.metadatas.register_metadata(Metadatas.HEAD_COMMITTER_NAME, info.committer)
            self.metadatas.register_metadata(Metadatas.HEAD_COMMITTER_EMAIL, info.email)
            self.metadatas.register_metadata(Metadatas.HEAD_COMMIT_DATETIME, info.date.isoformat())
        self.metadatas.register_metadata(Metadatas.GIT_SHA1_FULL, head_id)
        self.metadatas.register_metadata(Metadatas.GIT_SHA1_8, head_id[:8])

        head = Commit(head_id, 0, sets.head_version_annotated, sets.head_version_lightweight)

        resolver = BaseCommitResolver(self.git, self.lookup_policy, strategy, self.max_depth)
        base = resolver.resolve(head_id, sets.all_version, sets.all_version_annotated, sets.all_version_lightweight)
        if base is None:
            # no reachable version tag, fall back to the deepest commit we can reach
            base = deepest_reachable_commit(self.git, head_id, self.max_depth)

        self.head_commit = head
        self.base_commit = base

        version = strategy.build(head, [base])
        self.metadatas.register_metadata(Metadatas.CALCULATED_VERSION, version)
        self._register_next_versions(strategy)
        return version

    def _patch_incremented(self, strategy: VersionStrategy) -> bool:
        """Whether the strategy bumped the patch of the base version."""
        if self.metadatas.meta(Metadatas.HEAD_VERSION_TAGS):
            return False
        if isinstance(strategy, (MavenVersionStrategy, Pep440VersionStrategy)):
            return True
        return bool(self.options.get('auto_increment_patch'))

    def _register_next_versions(self, strategy: VersionStrategy) -> None:
        base_version = self.metadatas.meta(Metadatas.BASE_VERSION)
        if base_version is None:
            return
        base = Version.parse(base_version)
        unqualified = base.no_qualifier()

        unreleased = base.is_snapshot or self.metadatas.meta(Metadatas.BASE_TAG_TYPE) == 'LIGHTWEIGHT'
        if unreleased:
            # the base version has never been published, it is the next one
            next_patch = unqualified
            next_minor = unqualified if unqualified.patch == 0 else unqualified.increment_minor()
            next_major = unqualified if unqualified.minor == 0 else unqualified.increment_major()
        else:
            current = Version(
                int(self.metadatas.meta(Metadatas.CURRENT_VERSION_MAJOR)),
                int(self.metadatas.meta(Metadatas.CURRENT_VERSION_MINOR)),
                int(self.metadatas.meta(Metadatas.CURRENT_VERSION_PATCH)),
            )
            if self._patch_incremented(strategy) and current != unqualified:
                current = Version(current.major, current.minor, current.patch - 1)
            next_patch = current.increment_patch()
            next_minor = current.increment_minor()
            next_major = current.increment_major()

        self.metadatas.register_metadata(Metadatas.NEXT_MAJOR_VERSION, next_major)
        self.metadatas.register_metadata(Metadatas.NEXT_MINOR_VERSION, next_minor)
        self.metadatas.register_metadata(Metadatas.NEXT_PATCH_VERSION, next_patch)
