"""Entity: User."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Editable columns in display order.
USER_FIELDS: tuple[str, ...] = ("first_name", "last_name", "position", "phone", "email")

FIELD_LABELS: dict[str, str] = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "position": "Position",
    "phone": "Phone",
    "email": "Email",
}

_CAMEL_TO_FIELD = {to_camel(name): name for name in USER_FIELDS}


def normalize_field(name: str) -> str:
    """Resolve a snake_case or camelCase column name to the attribute name.

    Raises:
        ValueError: If the name is not an editable user field.
    """
    if name in USER_FIELDS:
        return name
    if name in _CAMEL_TO_FIELD:
        return _CAMEL_TO_FIELD[name]
    raise ValueError(
        f"Unknown user field '{name}', expected one of: {', '.join(USER_FIELDS)}"
    )


class User(BaseModel):
    """A user row as exchanged with the users API.

    ``id`` is only present once the backend has persisted the record; a
    ``User`` without one is a draft.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    id: int | None = Field(default=None, description="Server-assigned identifier")
    first_name: str = Field(default="", description="User's first name")
    last_name: str = Field(default="", description="User's last name")
    position: str = Field(default="", description="User's position")
    phone: str = Field(default="", description="User's phone number")
    email: str = Field(default="", description="User's email address")

    @field_validator(*USER_FIELDS, mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_draft(self) -> bool:
        """Whether the row has not been saved yet."""
        return self.id is None

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) names, omitting a missing id."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.position == other.position
            and self.phone == other.phone
            and self.email == other.email
        )
