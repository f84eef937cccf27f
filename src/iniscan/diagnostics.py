"""Last-error slot consulted after a failing read_file call.

Only read_file writes here. parse_file, parse_string and parse_lines hand their
diagnostic back in the ParseResult instead, so they are safe to use from
several threads at once.
"""

from dataclasses import dataclass
from .exceptions_warnings import IniError


@dataclass(frozen=True, slots=True)
class ErrorHint:
    """A helping hand if/when you get errors.

    Args:
        text (str): The text of the error message.
        code (int): The code that caused the message (errno for open failures).
        line_number (int | None): Line the diagnostic refers to, if any.
    """

    text: str
    code: int
    line_number: int | None = None

    @classmethod
    def from_error(cls, error: IniError) -> "ErrorHint":
        return cls(text=error.message, code=error.code, line_number=error.line_number)


_error_hint: ErrorHint | None = None


def set_error(text: str | ErrorHint, code: int = -1) -> None:
    """Overwrite the slot (last write wins)."""
    global _error_hint
    _error_hint = text if isinstance(text, ErrorHint) else ErrorHint(text, code)


def get_error() -> ErrorHint | None:
    """Grab the latest error hint (None if the last call succeeded cleanly)."""
    return _error_hint


def clear_error() -> None:
    global _error_hint
    _error_hint = None
