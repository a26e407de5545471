"""Entity package: User."""

from .entity import FIELD_LABELS, USER_FIELDS, User, normalize_field

__all__ = ["FIELD_LABELS", "USER_FIELDS", "User", "normalize_field"]
