from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from toolplan.planning import (
    collect_targets,
    normalize_target,
    partition_by_conflicts,
    paths_conflict,
    targets_conflict,
)


def test_normalize_target_strips_exactly_one_trailing_separator():
    assert normalize_target("src/") == "src"
    assert normalize_target("src//") == "src/"
    assert normalize_target("src\\") == "src"
    assert normalize_target("src") == "src"
    assert normalize_target("") == ""


def test_paths_conflict_equal_and_containment():
    assert paths_conflict("src/a.ts", "src/a.ts")
    assert paths_conflict("src", "src/a.ts")
    assert paths_conflict("src/a.ts", "src/")
    assert paths_conflict("src/", "src")
    assert paths_conflict("src\\lib", "src\\lib\\x.py")


def test_paths_conflict_sibling_prefix_is_not_containment():
    assert not paths_conflict("src", "srcfoo")
    assert not paths_conflict("src/a.ts", "src/a.tsx")
    assert not paths_conflict("src/a.ts", "src/b.ts")


def test_targets_conflict_any_pair():
    assert targets_conflict(["a.ts", "lib"], ["b.ts", "lib/x.ts"])
    assert not targets_conflict(["a.ts"], ["b.ts", "c.ts"])
    assert not targets_conflict([], ["a.ts"])


def test_partition_keeps_order_and_separates_conflicts():
    items = [("w1", ["a.ts"]), ("w2", ["a.ts"]), ("w3", ["b.ts"]), ("w4", ["a.ts"])]
    clusters = partition_by_conflicts(items, lambda item: item[1])

    assert [[name for name, _ in c] for c in clusters] == [["w1", "w3"], ["w2"], ["w4"]]


def test_partition_never_moves_item_ahead_of_earlier_conflict():
    # C does not conflict with A, but must still run after B.
    items = [("A", ["x.ts"]), ("B", ["x.ts", "z.ts"]), ("C", ["z.ts"])]
    clusters = partition_by_conflicts(items, lambda item: item[1])

    assert [[name for name, _ in c] for c in clusters] == [["A"], ["B"], ["C"]]


def test_collect_targets_cleans_input():
    assert collect_targets("a.ts") == ["a.ts"]
    assert collect_targets(["a.ts", " ", "", "a.ts", 3, "b.ts"]) == ["a.ts", "b.ts"]
    assert collect_targets("   ") == []
    assert collect_targets(None) == []
    assert collect_targets({"path": "a.ts"}) == []


_segment = st.sampled_from(["src", "lib", "a.ts", "b.ts", "docs"])
_path = st.lists(_segment, min_size=1, max_size=3).map("/".join)


@given(st.lists(st.lists(_path, min_size=1, max_size=3), max_size=12))
def test_partition_is_lossless_and_conflict_free(target_lists):
    items = list(enumerate(target_lists))
    clusters = partition_by_conflicts(items, lambda item: item[1])

    flattened = [idx for cluster in clusters for idx, _ in cluster]
    assert sorted(flattened) == list(range(len(items)))

    for cluster in clusters:
        for i, (_, a) in enumerate(cluster):
            for _, b in cluster[i + 1:]:
                assert not targets_conflict(a, b)


@given(_path, _path)
def test_paths_conflict_is_symmetric(a, b):
    assert paths_conflict(a, b) == paths_conflict(b, a)


@given(st.lists(st.lists(_path, min_size=1, max_size=3), max_size=12))
def test_partition_keeps_conflicting_items_in_input_order(target_lists):
    items = list(enumerate(target_lists))
    clusters = partition_by_conflicts(items, lambda item: item[1])
    cluster_of = {idx: pos for pos, cluster in enumerate(clusters) for idx, _ in cluster}

    for i, a in items:
        for j, b in items[i + 1:]:
            if targets_conflict(a, b):
                assert cluster_of[i] < cluster_of[j]
