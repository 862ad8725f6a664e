"""Tests for base commit resolution under the three lookup policies."""

from datetime import datetime, timedelta, timezone

import pytest

from tagver.domain import LookupPolicy, MetadataHolder, TagRef
from tagver.exit_codes import ConfigError
from tagver.services.base_commit import (
    BaseCommitResolver,
    StatefulMax,
    TagDateExtractor,
    UNKNOWN_DATE,
    deepest_reachable_commit,
)
from tagver.strategies import ConfigurableVersionStrategy, VersionNamingConfiguration

T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


def annotated(name, commit_id, minutes):
    return TagRef.annotated_tag(name, f"tagobj-{name}", peeled_id=commit_id,
                                tagger_date=T0 + timedelta(minutes=minutes))


def resolver_for(repo, policy, max_depth=None):
    strategy = ConfigurableVersionStrategy(VersionNamingConfiguration(), repo, MetadataHolder())
    return BaseCommitResolver(repo, policy, strategy, max_depth)


def resolve(resolver, head, tags):
    return resolver.resolve(
        head,
        tags,
        [t for t in tags if t.annotated],
        [t for t in tags if not t.annotated],
    )


@pytest.fixture
def linear_repo(fake_repo):
    """A - B - C - D (HEAD)"""
    fake_repo.chain("A", "B", "C", "D")
    return fake_repo


@pytest.fixture
def merge_repo(fake_repo):
    """
        A - B - D - M (HEAD)
         \\        /
          C ------E
    """
    fake_repo.chain("A", "B", "D")
    fake_repo.add("C", "A")
    fake_repo.add("E", "C")
    fake_repo.add("M", "D", "E")
    return fake_repo


class TestStatefulMax:

    def test_first_seen_wins_ties(self):
        items = [("a", 1), ("b", 3), ("c", 3), ("d", 2)]
        assert StatefulMax(lambda item: item[1]).fold(items) == ("b", 3)

    def test_empty_fold_is_none(self):
        assert StatefulMax(lambda item: item).fold([]) is None

    def test_key_computed_once_per_item(self):
        calls = []

        def key(item):
            calls.append(item)
            return item

        StatefulMax(key).fold([3, 1, 2])
        assert calls == [3, 1, 2]


class TestTagDateExtractor:

    def test_lightweight_dates_come_from_commit(self, linear_repo):
        tag = TagRef.lightweight("v1", "B")
        with TagDateExtractor(linear_repo) as extractor:
            assert extractor.date_of(tag) == linear_repo.dates["B"]

    def test_missing_date_sorts_first(self, linear_repo):
        tag = TagRef.annotated_tag("v1", "obj", peeled_id="B")
        with TagDateExtractor(linear_repo) as extractor:
            assert extractor.date_of(tag) == UNKNOWN_DATE

    def test_naive_dates_become_utc(self, linear_repo):
        tag = TagRef.annotated_tag("v1", "obj", peeled_id="B", tagger_date=datetime(2024, 1, 1))
        with TagDateExtractor(linear_repo) as extractor:
            assert extractor.date_of(tag).tzinfo is not None


class TestMaxPolicy:

    def test_highest_version_wins(self, linear_repo):
        tags = [TagRef.lightweight("v1.0.0", "C"), TagRef.lightweight("v2.0.0", "A")]
        base = resolve(resolver_for(linear_repo, LookupPolicy.MAX), "D", tags)
        assert base.id == "A"
        assert base.distance == 3
        assert [t.name for t in base.lightweight_tags] == ["v2.0.0"]
        assert base.annotated_tags == ()

    def test_tie_keeps_first_in_walk_order(self, linear_repo):
        """v1.0.0 on C and 1.0.0 on B parse equal; C is seen first from D."""
        tags = [TagRef.lightweight("1.0.0", "B"), TagRef.lightweight("v1.0.0", "C")]
        resolver = resolver_for(linear_repo, LookupPolicy.MAX)
        results = {resolve(resolver, "D", tags).id for _ in range(5)}
        assert results == {"C"}

    def test_tag_on_head(self, linear_repo):
        tag = TagRef.lightweight("v1.0.0", "D")
        base = resolve(resolver_for(linear_repo, LookupPolicy.MAX), "D", [tag])
        assert base.id == "D"
        assert base.distance == 0
        assert base.lightweight_tags == (tag,)

    def test_annotated_tag_on_head(self, linear_repo):
        tag = annotated("v1.0.0", "D", 0)
        base = resolve(resolver_for(linear_repo, LookupPolicy.MAX), "D", [tag])
        assert base.distance == 0
        assert base.annotated_tags == (tag,)
        assert base.lightweight_tags == ()

    def test_unreachable_tags_ignored(self, merge_repo):
        merge_repo.add("F", "M")
        tags = [TagRef.lightweight("v9.0.0", "F"), TagRef.lightweight("v1.0.0", "B")]
        base = resolve(resolver_for(merge_repo, LookupPolicy.MAX), "M", tags)
        assert base.id == "B"

    def test_no_tags_returns_none(self, linear_repo):
        assert resolve(resolver_for(linear_repo, LookupPolicy.MAX), "D", []) is None

    def test_beyond_depth_ceiling_returns_none(self, linear_repo):
        tags = [TagRef.lightweight("v1.0.0", "A")]
        assert resolve(resolver_for(linear_repo, LookupPolicy.MAX, max_depth=2), "D", tags) is None
        assert resolve(resolver_for(linear_repo, LookupPolicy.MAX, max_depth=3), "D", tags).distance == 3


class TestLatestPolicy:

    def test_most_recent_annotated_tag_wins(self, linear_repo):
        tags = [annotated("v3.0.0", "A", 1), annotated("v1.0.0", "B", 10), annotated("v2.0.0", "C", 5)]
        base = resolve(resolver_for(linear_repo, LookupPolicy.LATEST), "D", tags)
        assert base.id == "B"
        assert base.distance == 2

    def test_lightweight_tags_dropped(self, linear_repo):
        tags = [TagRef.lightweight("v9.0.0", "C"), annotated("v1.0.0", "A", 0)]
        base = resolve(resolver_for(linear_repo, LookupPolicy.LATEST), "D", tags)
        assert base.id == "A"

    def test_only_lightweight_tags_yields_none(self, linear_repo):
        tags = [TagRef.lightweight("v1.0.0", "C")]
        assert resolve(resolver_for(linear_repo, LookupPolicy.LATEST), "D", tags) is None


class TestNearestPolicy:

    def test_closest_tag_wins(self, linear_repo):
        tags = [TagRef.lightweight("v9.0.0", "A"), TagRef.lightweight("v1.2.0", "C")]
        base = resolve(resolver_for(linear_repo, LookupPolicy.NEAREST), "D", tags)
        assert base.id == "C"
        assert base.distance == 1

    def test_equal_distance_later_tag_wins(self, merge_repo):
        """D and E are both one edge from M; the later tag wins."""
        tags = [annotated("v2.0.0", "D", 30), annotated("v1.0.0", "E", 5)]
        base = resolve(resolver_for(merge_repo, LookupPolicy.NEAREST), "M", tags)
        assert base.id == "D"
        assert base.distance == 1

        tags = [annotated("v2.0.0", "D", 5), annotated("v1.0.0", "E", 30)]
        base = resolve(resolver_for(merge_repo, LookupPolicy.NEAREST), "M", tags)
        assert base.id == "E"

    def test_equal_distance_lightweight_uses_commit_date(self, merge_repo):
        # E was committed after D
        tags = [TagRef.lightweight("v2.0.0", "D"), TagRef.lightweight("v1.0.0", "E")]
        base = resolve(resolver_for(merge_repo, LookupPolicy.NEAREST), "M", tags)
        assert base.id == "E"

    def test_shortest_path_through_merge(self, merge_repo):
        """A is three edges away along either parent."""
        tags = [TagRef.lightweight("v1.0.0", "A")]
        base = resolve(resolver_for(merge_repo, LookupPolicy.NEAREST), "M", tags)
        assert base.distance == 3

    def test_no_reachable_tag_yields_none(self, linear_repo):
        assert resolve(resolver_for(linear_repo, LookupPolicy.NEAREST), "D", []) is None


class TestPolicyParsing:

    def test_policy_name_accepted(self, linear_repo):
        assert resolver_for(linear_repo, "nearest").policy is LookupPolicy.NEAREST

    def test_unknown_policy_fails_immediately(self, linear_repo):
        with pytest.raises(ConfigError):
            resolver_for(linear_repo, "closest")


class TestDeepestReachableCommit:

    def test_depth_ceiling_respected(self, fake_repo):
        fake_repo.chain("C1", "C2", "C3", "C4", "C5")
        commit = deepest_reachable_commit(fake_repo, "C5", max_depth=1)
        assert commit.id == "C4"
        assert commit.distance == 1
        assert not commit.is_tagged

    def test_unbounded_reaches_root(self, fake_repo):
        fake_repo.chain("C1", "C2", "C3", "C4", "C5")
        commit = deepest_reachable_commit(fake_repo, "C5")
        assert commit.id == "C1"
        assert commit.distance == 4

    def test_zero_ceiling_is_head(self, fake_repo):
        fake_repo.chain("C1", "C2")
        commit = deepest_reachable_commit(fake_repo, "C2", max_depth=0)
        assert (commit.id, commit.distance) == ("C2", 0)

    def test_single_commit(self, fake_repo):
        fake_repo.add("ROOT")
        commit = deepest_reachable_commit(fake_repo, "ROOT")
        assert (commit.id, commit.distance) == ("ROOT", 0)

    def test_walk_closed(self, fake_repo):
        fake_repo.chain("C1", "C2", "C3")
        deepest_reachable_commit(fake_repo, "C3", max_depth=1)
        assert all(walk.closed for walk in fake_repo.walks)
