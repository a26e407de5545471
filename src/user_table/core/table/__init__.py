"""Table state and synchronization."""

from .state import RowKey, SortDirection, SortState, TableState
from .sync import FETCH_ERROR, SAVE_ERROR, SaveBlockedError, UserTableController

__all__ = [
    "RowKey",
    "SortDirection",
    "SortState",
    "TableState",
    "UserTableController",
    "SaveBlockedError",
    "FETCH_ERROR",
    "SAVE_ERROR",
]
