from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Sequence, TypeVar


T = TypeVar("T")


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> list[T]:
    """Return a uniformly shuffled copy of items.

    rng を渡すとシード固定で再現できる。省略時はモジュールの乱数を使う。
    """

    out = list(items)
    (rng if rng is not None else random).shuffle(out)
    return out


def truncate(items: list[T], limit: int) -> list[T]:
    """Cut items to limit; a non-positive limit keeps everything."""
    if limit <= 0 or limit >= len(items):
        return items
    return items[:limit]


def require_aware(value: datetime, name: str = "now") -> datetime:
    """Reject naive datetimes; every stored timestamp carries a timezone."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware, got naive datetime {value.isoformat()}")
    return value
