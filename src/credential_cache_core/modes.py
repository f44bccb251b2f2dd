"""Access modes a credential source can be asked to serve."""

from enum import Enum

from .exceptions import InvalidModeError

_ALIASES = {
    "read": "reading",
    "reading": "reading",
    "write": "writing",
    "writing": "writing",
}


class Mode(str, Enum):
    """Access intent selecting which role or permission set a source hands out."""

    READING = "reading"
    WRITING = "writing"

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        """Parse a mode from its name or a short alias such as ``read``."""
        if isinstance(value, Mode):
            return value
        canonical = _ALIASES.get(value.strip().lower())
        if canonical is None:
            raise InvalidModeError(value)
        return cls(canonical)

    def __str__(self) -> str:
        return self.value
