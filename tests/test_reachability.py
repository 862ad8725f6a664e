"""Tests for reachable-tag filtering."""

from tagver.domain import TagRef
from tagver.services.reachability import filter_reachable_tags, index_by_target


class TestIndexByTarget:

    def test_groups_tags_sharing_a_commit(self):
        a1 = TagRef.lightweight("a1", "A")
        a2 = TagRef.annotated_tag("a2", "tagobj", peeled_id="A")
        b = TagRef.lightweight("b", "B")
        index = index_by_target([a1, b, a2])
        assert index == {"A": [a1, a2], "B": [b]}


class TestFilterReachableTags:
    """
    History used by most tests:

        A - B - C - D (HEAD)
             \\
              X - Y       (side branch, not reachable from D)
    """

    def build(self, fake_repo):
        fake_repo.chain("A", "B")
        fake_repo.add("X", "B")
        fake_repo.add("Y", "X")
        fake_repo.add("C", "B")
        fake_repo.add("D", "C")
        return fake_repo

    def test_excludes_tags_off_the_ancestry(self, fake_repo):
        repo = self.build(fake_repo)
        tags = [TagRef.lightweight("on-a", "A"), TagRef.lightweight("on-y", "Y"),
                TagRef.lightweight("on-c", "C")]
        reachable = filter_reachable_tags(repo, "D", tags)
        assert [t.name for t in reachable] == ["on-c", "on-a"]

    def test_result_targets_are_ancestors(self, fake_repo):
        repo = self.build(fake_repo)
        tags = [TagRef.lightweight(f"t-{c}", c) for c in "ABCDXY"]
        for head in "ABCDXY":
            ancestors = repo.ancestors(head)
            for tag in filter_reachable_tags(repo, head, tags):
                assert tag.target in ancestors

    def test_head_itself_is_reachable(self, fake_repo):
        repo = self.build(fake_repo)
        tag = TagRef.lightweight("on-head", "D")
        assert filter_reachable_tags(repo, "D", [tag]) == [tag]

    def test_walk_order_not_input_order(self, fake_repo):
        repo = self.build(fake_repo)
        tags = [TagRef.lightweight("old", "A"), TagRef.lightweight("new", "C")]
        assert [t.name for t in filter_reachable_tags(repo, "D", tags)] == ["new", "old"]

    def test_tags_on_same_commit_keep_input_order(self, fake_repo):
        repo = self.build(fake_repo)
        tags = [TagRef.lightweight("second", "B"), TagRef.lightweight("first", "B")]
        assert [t.name for t in filter_reachable_tags(repo, "D", tags)] == ["second", "first"]

    def test_no_candidates_does_not_walk(self, fake_repo):
        repo = self.build(fake_repo)
        assert filter_reachable_tags(repo, "D", []) == []
        assert repo.walks == []

    def test_walk_stops_once_all_tagged_commits_seen(self, fake_repo):
        repo = self.build(fake_repo)
        filter_reachable_tags(repo, "D", [TagRef.lightweight("on-c", "C")])
        # D then C, never B or A
        assert repo.yielded == 2
        assert all(walk.closed for walk in repo.walks)

    def test_walk_closed_when_nothing_found(self, fake_repo):
        repo = self.build(fake_repo)
        assert filter_reachable_tags(repo, "D", [TagRef.lightweight("on-y", "Y")]) == []
        assert all(walk.closed for walk in repo.walks)
