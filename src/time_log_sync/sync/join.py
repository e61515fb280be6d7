"""Full outer join of two collections keyed by an equivalence."""

from collections.abc import Callable, Hashable, Iterable
from itertools import zip_longest
from typing import TypeVar

L = TypeVar("L")
R = TypeVar("R")


def full_outer_join(
    left: Iterable[L],
    right: Iterable[R],
    key: Callable[[L], Hashable],
    right_key: Callable[[R], Hashable] | None = None,
) -> list[tuple[L | None, R | None]]:
    """Pair items of two collections whose keys are equal.

    Items sharing a key are paired one to one in input order; surplus
    items on either side are paired with None. Every input item appears in
    exactly one pair and no pair is (None, None). Neither input is modified.

    Args:
        left: Left collection.
        right: Right collection.
        key: Key function for left items, and for right items unless
            right_key is given. Two items are equivalent when their keys
            compare equal.
        right_key: Key function for right items.

    Returns:
        Pairs grouped by key, keys in first-seen order with the left side first.
    """
    right_key = right_key or key

    groups: dict[Hashable, tuple[list[L], list[R]]] = {}
    for item in left:
        groups.setdefault(key(item), ([], []))[0].append(item)
    for item in right:
        groups.setdefault(right_key(item), ([], []))[1].append(item)

    return [
        pair
        for left_items, right_items in groups.values()
        for pair in zip_longest(left_items, right_items)
    ]
