"""Tests for merging blame across sampled files."""

import itertools
import random
from datetime import datetime, timezone

from revping_core.credit import collect_credit, merge_credit, rank_authors, sample_paths
from revping_core.models import AuthorshipRecord


def _at(day):
    return datetime(2024, 1, day, tzinfo=timezone.utc)


def _table(**counts):
    """Build a credit table from name=(count, day) pairs."""
    return {
        name: AuthorshipRecord(author_name=name, edit_count=count, last_edit_at=_at(day))
        for name, (count, day) in counts.items()
    }


FILE_A = _table(alice=(3, 2))
FILE_B = _table(alice=(2, 9), bob=(4, 5))
FILE_C = _table(carol=(1, 1), bob=(1, 20))


class TestMergeCredit:
    def test_sums_counts(self):
        merged = merge_credit([FILE_A, FILE_B])
        assert {n: r.edit_count for n, r in merged.items()} == {"alice": 5, "bob": 4}

    def test_keeps_latest_edit(self):
        merged = merge_credit([FILE_A, FILE_B, FILE_C])
        assert merged["alice"].last_edit_at == _at(9)
        assert merged["bob"].last_edit_at == _at(20)

    def test_order_independent(self):
        expected = merge_credit([FILE_A, FILE_B, FILE_C])
        for perm in itertools.permutations([FILE_A, FILE_B, FILE_C]):
            assert merge_credit(perm) == expected

    def test_does_not_mutate_inputs(self):
        merge_credit([FILE_A, FILE_B])
        assert FILE_A["alice"].edit_count == 3
        assert FILE_B["alice"].edit_count == 2

    def test_empty(self):
        assert merge_credit([]) == {}
        assert merge_credit([{}, {}]) == {}


class TestRankAuthors:
    def test_descending_by_count(self):
        assert rank_authors(merge_credit([FILE_A, FILE_B])) == ["alice", "bob"]

    def test_ties_keep_scan_order(self):
        table = _table(zed=(2, 1), amy=(2, 1), kim=(5, 1))
        assert rank_authors(table) == ["kim", "zed", "amy"]

    def test_empty(self):
        assert rank_authors({}) == []


class TestSamplePaths:
    def test_caps_at_sample_size(self):
        paths = [f"f{i}.py" for i in range(50)]
        sampled = sample_paths(paths, 9, random.Random(1))
        assert len(sampled) == 9
        assert len(set(sampled)) == 9
        assert set(sampled) <= set(paths)

    def test_takes_everything_when_fewer_paths(self):
        paths = ["a.py", "b.py"]
        assert sorted(sample_paths(paths, 9, random.Random(1))) == paths

    def test_seeded_rng_is_reproducible(self):
        paths = [f"f{i}.py" for i in range(30)]
        assert sample_paths(paths, 5, random.Random(42)) == sample_paths(paths, 5, random.Random(42))

    def test_empty(self):
        assert sample_paths([], 9, random.Random(1)) == []


class TestCollectCredit:
    def test_blames_each_sampled_path(self):
        tables = {"a.py": FILE_A, "b.py": FILE_B}
        calls = []

        def fake_blame(repo, path):
            calls.append((repo, path))
            return tables[path]

        credit = collect_credit("/repo", ["a.py", "b.py"], sample_size=9, rng=random.Random(3), blame=fake_blame)

        assert sorted(calls) == [("/repo", "a.py"), ("/repo", "b.py")]
        assert rank_authors(credit) == ["alice", "bob"]

    def test_sample_size_bounds_blame_calls(self):
        calls = []

        def fake_blame(repo, path):
            calls.append(path)
            return {}

        collect_credit("/repo", [f"f{i}.py" for i in range(100)], sample_size=9, rng=random.Random(0), blame=fake_blame)
        assert len(calls) == 9

    def test_no_paths_means_no_credit(self):
        assert collect_credit("/repo", [], blame=lambda repo, path: FILE_A) == {}
