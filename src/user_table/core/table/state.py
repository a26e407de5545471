"""In-memory state of the user table.

The store keeps fetched (persisted) rows apart from draft rows that have not
been saved yet, together with the sort state, the set of edited cells per
persisted row and the per-row email validation errors. It performs no I/O;
``UserTableController`` drives it from the network side.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from user_table.entities.user import User, normalize_field


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """Active sort column and direction; ``direction=None`` means unsorted."""

    field: str = "first_name"
    direction: SortDirection | None = None

    def toggled(self, field_name: str) -> SortState:
        """Return the state after clicking the ``field_name`` header.

        The same column flips from ascending to descending; anything else
        (another column, descending, unsorted) starts over at ascending.
        """
        field_name = normalize_field(field_name)
        if self.field == field_name and self.direction is SortDirection.ASC:
            return SortState(field_name, SortDirection.DESC)
        return SortState(field_name, SortDirection.ASC)


@dataclass(frozen=True)
class RowKey:
    """Identifies a row: a draft by its position, a persisted row by its id."""

    kind: Literal["draft", "persisted"]
    value: int

    @classmethod
    def draft(cls, index: int) -> RowKey:
        return cls("draft", index)

    @classmethod
    def persisted(cls, user_id: int) -> RowKey:
        return cls("persisted", user_id)

    @classmethod
    def parse(cls, text: str) -> RowKey:
        """Parse the display label: ``new-<n>`` (1-based) or a numeric id.

        Raises:
            ValueError: If the label matches neither form.
        """
        text = text.strip()
        if text.lower().startswith("new-"):
            number = text[4:]
            if not number.isdigit() or int(number) < 1:
                raise ValueError(f"Invalid draft row '{text}'")
            return cls.draft(int(number) - 1)
        if not text.isdigit():
            raise ValueError(f"Invalid row '{text}', expected new-<n> or a user id")
        return cls.persisted(int(text))

    @property
    def is_draft(self) -> bool:
        return self.kind == "draft"

    @property
    def label(self) -> str:
        return f"new-{self.value + 1}" if self.is_draft else str(self.value)

    def __str__(self) -> str:
        return self.label


@dataclass
class TableState:
    """Rows, drafts, sort, dirty cells and validation errors of the table."""

    users: list[User] = field(default_factory=list)
    new_users: list[User] = field(default_factory=list)
    sort: SortState = field(default_factory=SortState)
    dirty_cells: dict[int, set[str]] = field(default_factory=dict)
    email_errors: dict[RowKey, str | None] = field(default_factory=dict)
    # Email of each persisted row as last fetched, by id.
    fetched_emails: dict[int, str] = field(default_factory=dict)
    error_message: str | None = None

    def replace_rows(self, users: Iterable[User]) -> None:
        """Install a freshly fetched collection and drop all local edits."""
        self.users = list(users)
        self.fetched_emails = {
            user.id: user.email for user in self.users if user.id is not None
        }
        self.apply_sort()
        self.new_users = []
        self.dirty_cells = {}
        self.email_errors = {}

    def apply_sort(self) -> None:
        """Order persisted rows by the sort state.

        Comparison is plain string ordering on the chosen field. ``sorted`` is
        stable in both directions, so equal values keep their fetched order.
        """
        if self.sort.direction is None:
            return
        self.users = sorted(
            self.users,
            key=lambda user: getattr(user, self.sort.field),
            reverse=self.sort.direction is SortDirection.DESC,
        )

    def toggle_sort(self, field_name: str) -> SortState:
        self.sort = self.sort.toggled(field_name)
        self.apply_sort()
        return self.sort

    def add_draft(self) -> RowKey:
        self.new_users.append(User())
        return RowKey.draft(len(self.new_users) - 1)

    def get_row(self, key: RowKey) -> User:
        """Return the row addressed by ``key``.

        Raises:
            KeyError: If no such draft or persisted row exists.
        """
        if key.is_draft:
            if 0 <= key.value < len(self.new_users):
                return self.new_users[key.value]
        else:
            for user in self.users:
                if user.id == key.value:
                    return user
        raise KeyError(f"No row {key.label}")

    def set_cell(self, key: RowKey, field_name: str, value: str) -> None:
        """Write one cell; persisted rows remember the field as dirty."""
        field_name = normalize_field(field_name)
        row = self.get_row(key)
        setattr(row, field_name, value)
        if not key.is_draft:
            self.dirty_cells.setdefault(key.value, set()).add(field_name)

    def is_dirty(self, user_id: int | None, field_name: str) -> bool:
        if user_id is None:
            return False
        return normalize_field(field_name) in self.dirty_cells.get(user_id, set())

    def set_email_error(self, key: RowKey, message: str | None) -> None:
        self.email_errors[key] = message

    def email_error(self, key: RowKey) -> str | None:
        return self.email_errors.get(key)

    @property
    def has_errors(self) -> bool:
        return any(error is not None for error in self.email_errors.values())

    def rows(self) -> Iterator[tuple[RowKey, User]]:
        """Yield drafts first, then persisted rows, each with its key."""
        for index, user in enumerate(self.new_users):
            yield RowKey.draft(index), user
        for user in self.users:
            # Persisted rows always carry an id
            yield RowKey.persisted(user.id), user  # type: ignore[arg-type]

    def partition_for_save(self) -> tuple[list[User], list[User]]:
        """Split drafts and persisted rows into ``(to_create, to_update)``.

        Rows without an identifier are created. Rows with one are updated
        only when at least one of their cells was edited.
        """
        to_create: list[User] = []
        to_update: list[User] = []
        for user in [*self.new_users, *self.users]:
            if user.id is None:
                to_create.append(user)
            elif self.dirty_cells.get(user.id):
                to_update.append(user)
        return to_create, to_update

