"""Interactive fuzzy picker used to choose listing rows."""

from .app import Picker, PickerOptions, PickerResult, PickerState, filter_items
from .items import PickerItem, items_from_listing

__all__ = [
    "Picker",
    "PickerItem",
    "PickerOptions",
    "PickerResult",
    "PickerState",
    "filter_items",
    "items_from_listing",
]
