"""Read-side projections over a trip's items.

Everything here is a pure function of the TripItem rows (with their
saved_item loaded) and is safe to recompute on every read.
"""
from collections import OrderedDict
from typing import Iterable, List, Optional, Tuple
from travel_inbox.models.items.saved_item import CATEGORY_ORDER, ItemCategory


def item_sort_key(trip_item) -> Tuple[int, int]:
    # sort_order can tie after a cross-day move; id keeps the order total
    return (trip_item.sort_order, trip_item.id)


def attachment_order(trip_items: Iterable) -> List:
    return sorted(trip_items, key=lambda ti: ti.id)


def is_placed(day_index: Optional[int], day_count: int) -> bool:
    """True when a stored day index points at a day the trip currently has."""
    return day_index is not None and 1 <= day_index <= day_count


def group_by_day(trip_items: Iterable, day_count: int) -> Tuple["OrderedDict[int, List]", List]:
    """Split items into days 1..day_count plus the unassigned bucket.

    Stale indices (beyond a shortened range, or on a draft trip) are shown as
    unassigned; the stored value is not changed.
    """
    days: "OrderedDict[int, List]" = OrderedDict((day, []) for day in range(1, day_count + 1))
    unassigned: List = []
    for trip_item in trip_items:
        if is_placed(trip_item.day_index, day_count):
            days[trip_item.day_index].append(trip_item)
        else:
            unassigned.append(trip_item)

    for day in days:
        days[day].sort(key=item_sort_key)
    unassigned.sort(key=item_sort_key)
    return days, unassigned


def group_by_category(trip_items: Iterable) -> "OrderedDict[ItemCategory, List]":
    """Fixed five-bucket partition in canonical category order."""
    buckets: "OrderedDict[ItemCategory, List]" = OrderedDict((category, []) for category in CATEGORY_ORDER)
    for trip_item in attachment_order(trip_items):
        buckets[ItemCategory(trip_item.saved_item.category)].append(trip_item)
    return buckets


def unique_cities(trip_items: Iterable) -> List[str]:
    """Distinct cities in order of first appearance."""
    seen = set()
    cities: List[str] = []
    for trip_item in attachment_order(trip_items):
        city = (trip_item.saved_item.city or "").strip()
        if city and city not in seen:
            seen.add(city)
            cities.append(city)
    return cities


def matches_search(trip_item, query: Optional[str]) -> bool:
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    item = trip_item.saved_item
    category = ItemCategory(item.category).value
    haystacks = [item.title, item.city, item.notes, category]
    return any(needle in value.lower() for value in haystacks if value)


def filter_items(trip_items: Iterable, query: Optional[str]) -> List:
    return [trip_item for trip_item in trip_items if matches_search(trip_item, query)]
