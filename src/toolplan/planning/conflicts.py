"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Target-path conflict detection.

Two targets conflict when they name the same path or when one is an ancestor
directory of the other. Paths are compared textually after removing a single
trailing separator; no filesystem access and no case folding.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence, TypeVar

T = TypeVar("T")

_SEPARATORS = ("/", "\\")


def normalize_target(path: str) -> str:
    """Strip exactly one trailing path separator."""
    if path and path[-1] in _SEPARATORS:
        return path[:-1]
    return path


def _contains(parent: str, child: str) -> bool:
    return (
        len(child) > len(parent)
        and child.startswith(parent)
        and child[len(parent)] in _SEPARATORS
    )


def paths_conflict(a: str, b: str) -> bool:
    """Return True when `a` and `b` are equal or one contains the other."""
    a = normalize_target(a)
    b = normalize_target(b)
    return a == b or _contains(a, b) or _contains(b, a)


def targets_conflict(a: Iterable[str], b: Iterable[str]) -> bool:
    """Return True when any path of `a` conflicts with any path of `b`."""
    b_list = list(b)
    return any(paths_conflict(x, y) for x in a for y in b_list)


def partition_by_conflicts(
    items: Sequence[T],
    targets_of: Callable[[T], Sequence[str]],
) -> list[list[T]]:
    """
    Split `items` into clusters whose members never conflict with each other.

    Each item joins the first cluster after the last cluster it conflicts
    with, else opens a new one. Clusters run in order, so an item always runs
    after every earlier item it conflicts with. Input order is preserved
    inside clusters.
    """
    clusters: list[list[T]] = []
    cluster_targets: list[list[str]] = []
    for item in items:
        targets = list(targets_of(item))
        start = 0
        for idx, existing in enumerate(cluster_targets):
            if targets_conflict(targets, existing):
                start = idx + 1
        if start < len(clusters):
            clusters[start].append(item)
            cluster_targets[start].extend(targets)
        else:
            clusters.append([item])
            cluster_targets.append(targets)
    return clusters


def collect_targets(value: Any) -> list[str]:
    """
    Coerce a `targets`-style value into a clean list.

    Strings and lists of strings are accepted; blank entries and non-string
    items are dropped and duplicates removed keeping first occurrence.
    """
    if isinstance(value, str):
        raw: list[Any] = [value]
    elif isinstance(value, (list, tuple)):
        raw = list(value)
    else:
        return []

    out: list[str] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, str):
            continue
        entry = entry.strip()
        if not entry or entry in seen:
            continue
        seen.add(entry)
        out.append(entry)
    return out
