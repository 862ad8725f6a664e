"""Tests for the breadth-first distance calculator."""

import pytest

from tagver.services.distance import DistanceCalculator


@pytest.fixture
def linear_repo(fake_repo):
    """C0 - C1 - ... - C9, HEAD at C9."""
    fake_repo.chain(*[f"C{i}" for i in range(10)])
    return fake_repo


@pytest.fixture
def merge_repo(fake_repo):
    """
        A - B - C - D - M (HEAD)
         \\            /
          E ---------
    """
    fake_repo.chain("A", "B", "C", "D")
    fake_repo.add("E", "A")
    fake_repo.add("M", "D", "E")
    return fake_repo


class TestDistanceCalculator:

    def test_distance_to_self_is_zero(self, linear_repo):
        with DistanceCalculator.create("C9", linear_repo) as calculator:
            assert calculator.distance_to("C9") == 0
        # no walk needed
        assert linear_repo.walks == []

    def test_linear_distances(self, linear_repo):
        with DistanceCalculator.create("C9", linear_repo) as calculator:
            assert calculator.distance_to("C8") == 1
            assert calculator.distance_to("C0") == 9

    def test_distances_add_up_along_a_chain(self, linear_repo):
        """distance(C -> A) == distance(C -> B) + distance(B -> A)."""
        for c, b, a in [("C9", "C5", "C1"), ("C7", "C6", "C0"), ("C3", "C3", "C0")]:
            with DistanceCalculator.create(c, linear_repo) as from_c:
                c_to_a = from_c.distance_to(a)
                c_to_b = from_c.distance_to(b)
            with DistanceCalculator.create(b, linear_repo) as from_b:
                b_to_a = from_b.distance_to(a)
            assert c_to_a == c_to_b + b_to_a

    def test_minimal_distance_through_merge(self, merge_repo):
        """A is two edges away through E even though the first parent path is longer."""
        with DistanceCalculator.create("M", merge_repo) as calculator:
            assert calculator.distance_to("A") == 2
            assert calculator.distance_to("B") == 3
            assert calculator.distance_to("E") == 1

    def test_unreachable_returns_none(self, merge_repo):
        merge_repo.add("Z")
        with DistanceCalculator.create("M", merge_repo) as calculator:
            assert calculator.distance_to("Z") is None
            assert calculator.distance_to("unknown") is None

    def test_depth_ceiling(self, linear_repo):
        with DistanceCalculator.create("C9", linear_repo, max_depth=3) as calculator:
            assert calculator.distance_to("C6") == 3
            assert calculator.distance_to("C5") is None

    def test_zero_ceiling_only_reaches_source(self, linear_repo):
        with DistanceCalculator.create("C9", linear_repo, max_depth=0) as calculator:
            assert calculator.distance_to("C9") == 0
            assert calculator.distance_to("C8") is None

    def test_negative_ceiling_rejected(self, linear_repo):
        with pytest.raises(ValueError):
            DistanceCalculator(linear_repo, "C9", max_depth=-1)

    def test_repeated_queries_reuse_one_walk(self, linear_repo):
        with DistanceCalculator.create("C9", linear_repo) as calculator:
            assert calculator.distance_to("C2") == 7
            yielded = linear_repo.yielded
            # already discovered: answered from memory
            assert calculator.distance_to("C5") == 4
            assert linear_repo.yielded == yielded
            assert calculator.distance_to("C0") == 9
        assert len(linear_repo.walks) == 1

    def test_walk_released_on_close(self, linear_repo):
        calculator = DistanceCalculator.create("C9", linear_repo)
        calculator.distance_to("C7")
        assert not linear_repo.walks[0].closed
        calculator.close()
        assert linear_repo.walks[0].closed

    def test_walk_released_on_error(self, linear_repo):
        with pytest.raises(RuntimeError):
            with DistanceCalculator.create("C9", linear_repo) as calculator:
                calculator.distance_to("C7")
                raise RuntimeError("boom")
        assert linear_repo.walks[0].closed
