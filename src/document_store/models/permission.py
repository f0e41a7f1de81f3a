"""Ordered permission levels for datasets and teams."""

from enum import Enum
from typing import Any, Optional

from exceptions import InvalidInputError


class Permission(str, Enum):
    """Access level granted on a dataset, totally ordered view < edit < admin."""

    VIEW = "view"
    EDIT = "edit"
    ADMIN = "admin"

    @property
    def level(self) -> int:
        return _LEVELS[self]

    def allows(self, required: "Permission") -> bool:
        """Whether this level satisfies an operation that requires ``required``."""
        return self.level >= required.level

    @classmethod
    def highest(cls, *permissions: Optional["Permission"]) -> Optional["Permission"]:
        """Return the highest of the given levels, ignoring ``None``."""
        present = [p for p in permissions if p is not None]
        if not present:
            return None
        return max(present, key=lambda p: p.level)

    @classmethod
    def parse(cls, value: Any, field: str = "permission") -> "Permission":
        """Convert a raw value into a Permission or raise InvalidInputError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise InvalidInputError(f"Invalid permission: {value}. Must be one of: {valid}", field=field)


_LEVELS = {Permission.VIEW: 1, Permission.EDIT: 2, Permission.ADMIN: 3}
