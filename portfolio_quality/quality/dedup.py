"""
Duplicate removal for portfolio data.

Snapshot collections are deduplicated by id and admin record lists by a
key field. The first occurrence always wins and order is preserved.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from .schema import EntityKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..core.models import Snapshot


def unique_by(items: Iterable[Any], key: Callable[[Any], Any]) -> list[Any]:
    """
    Keep the first item for each key value.

    Items whose key is None or empty are kept as-is.
    """
    seen: set = set()
    result = []
    for item in items:
        k = key(item)
        if k in (None, ""):
            result.append(item)
            continue
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


def deduplicate(snapshot: Snapshot) -> Snapshot:
    """
    Return a copy of the snapshot without repeated ids.

    References are left untouched, so the result may still contain
    dangling ones.
    """
    return replace(
        snapshot,
        **{
            kind.value: tuple(unique_by(getattr(snapshot, kind.value), lambda e: e.id))
            for kind in EntityKind
        },
    )


def merge_records(
    primary: Iterable[dict],
    secondary: Iterable[dict],
    key: str,
) -> list[dict]:
    """
    Concatenate two record lists, keeping the first record per ``key``.

    Used to merge a remote export (primary) with local seed data.

    Args:
        primary: Records that win on conflict
        secondary: Records appended when their key is new
        key: Field compared for equality, e.g. "title" or "name"

    Returns:
        Merged list
    """
    return unique_by([*primary, *secondary], lambda r: r.get(key))


def duplicate_ids(snapshot: Snapshot) -> dict[str, list[str]]:
    """Ids that occur more than once, per collection."""
    result: dict[str, list[str]] = {}
    for kind in EntityKind:
        counts = Counter(entity.id for entity in getattr(snapshot, kind.value))
        repeated = [entity_id for entity_id, count in counts.items() if count > 1]
        if repeated:
            result[kind.value] = repeated
    return result
