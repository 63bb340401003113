# logitrack/services/view_state.py
"""
List-screen view state: partition -> search -> sort over already fetched records.
Pure functions, nothing here touches the store.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal, Optional, Sequence

Direction = Literal["asc", "desc"]
TruckView = Literal["own", "subcontractor", "all"]

TRUCK_SEARCH_FIELDS = ("license_plate", "model", "brand", "driver", "province")
SUBCONTRACTOR_SEARCH_FIELDS = ("name", "contact_person", "phone")
USER_SEARCH_FIELDS = ("email", "display_name", "role")
WAITLIST_SEARCH_FIELDS = ("email",)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _last_sign_in(user: Any) -> Any:
    value = _field(user, "last_login")
    return value.timestamp() if value is not None else 0


# Sort keys that are derived rather than read straight off the record
USER_SORT_KEYS: dict[str, Callable[[Any], Any]] = {
    "role": lambda user: _field(user, "role") or "user",
    "last_sign_in_time": _last_sign_in,
}


def partition_trucks(trucks: Iterable[Any], view: TruckView = "all") -> list[Any]:
    if view == "own":
        return [t for t in trucks if _field(t, "ownership_type") != "subcontractor"]
    if view == "subcontractor":
        return [t for t in trucks if _field(t, "ownership_type") == "subcontractor"]
    return list(trucks)


def search_records(records: Iterable[Any], query: str, fields: Sequence[str]) -> list[Any]:
    """Case-insensitive substring match on any of `fields`. An empty query keeps everything."""
    if not query:
        return list(records)
    needle = query.lower()
    return [
        r for r in records
        if any(needle in str(_field(r, name) or "").lower() for name in fields)
    ]


def _compare(a: Any, b: Any) -> int:
    # Values that cannot be ordered (None against a string, say) count as equal.
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        pass
    return 0


def sort_records(records: Iterable[Any], key: Optional[str], direction: Direction = "asc",
                 key_funcs: Optional[dict[str, Callable[[Any], Any]]] = None) -> list[Any]:
    """Stable sort by one key. Ties keep their input order in both directions."""
    records = list(records)
    if not key:
        return records
    extract = (key_funcs or {}).get(key) or (lambda r: _field(r, key))
    sign = 1 if direction == "asc" else -1
    return sorted(records, key=functools.cmp_to_key(lambda a, b: sign * _compare(extract(a), extract(b))))


@dataclass(frozen=True)
class SortState:
    key: Optional[str] = None
    direction: Direction = "asc"

    def toggle(self, key: str) -> "SortState":
        """Clicking the active ascending column flips it; anything else sorts ascending."""
        if self.key == key and self.direction == "asc":
            return SortState(key, "desc")
        return SortState(key, "asc")


@dataclass
class ListView:
    search_fields: Sequence[str]
    query: str = ""
    sort: SortState = field(default_factory=SortState)
    partition: Optional[TruckView] = None
    sort_keys: dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def apply(self, records: Iterable[Any]) -> list[Any]:
        if self.partition is not None:
            records = partition_trucks(records, self.partition)
        records = search_records(records, self.query, self.search_fields)
        return sort_records(records, self.sort.key, self.sort.direction, self.sort_keys)


def truck_view(view: TruckView = "own", query: str = "", sort: Optional[SortState] = None) -> ListView:
    return ListView(TRUCK_SEARCH_FIELDS, query, sort or SortState(), partition=view)


def user_view(query: str = "", sort: Optional[SortState] = None) -> ListView:
    return ListView(USER_SEARCH_FIELDS, query, sort or SortState(), sort_keys=USER_SORT_KEYS)
