"""Pure helpers for link-set bookkeeping."""
from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def unique(items: Iterable[T]) -> list[T]:
    """De-duplicate while keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def diff_links(current: Iterable[T], desired: Iterable[T]) -> tuple[list[T], list[T]]:
    """Return ``(to_add, to_remove)`` turning ``current`` into ``desired``.

    ``to_add`` keeps the order of ``desired``; ``to_remove`` the order of ``current``.
    """
    current_list = unique(current)
    desired_list = unique(desired)
    current_set = set(current_list)
    desired_set = set(desired_list)
    to_add = [item for item in desired_list if item not in current_set]
    to_remove = [item for item in current_list if item not in desired_set]
    return to_add, to_remove
