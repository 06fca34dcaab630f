"""In-memory search/status filtering over a loaded record list."""

from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# Values the status selector sends for "no status filter"
ALL_STATUSES = frozenset({"", "todos", "all"})


def normalize_status_filter(value: Optional[str]) -> Optional[str]:
    """Map the selector's "all" sentinel to None."""
    if value is None:
        return None
    value = value.strip()
    if value.lower() in ALL_STATUSES:
        return None
    return value


def filter_records(
    records: Sequence[T],
    term: Optional[str] = None,
    status: Optional[str] = None,
    *,
    text_fields: Sequence[Callable[[T], Optional[str]]],
    status_field: Optional[Callable[[T], Optional[str]]] = None,
) -> List[T]:
    """
    Return the records whose text fields contain `term` (case-insensitive) and
    whose status equals `status`. Order is preserved and the input is untouched.
    """
    needle = (term or "").lower()
    wanted = normalize_status_filter(status)
    if wanted is not None and status_field is None:
        raise ValueError("status filter given but no status_field to match against")

    visible = []
    for record in records:
        if needle and not any(needle in (get(record) or "").lower() for get in text_fields):
            continue
        if wanted is not None and status_field(record) != wanted:
            continue
        visible.append(record)
    return visible
