"""iniscan-specific exceptions and warnings"""

from .globals import (
    ITEM_ALLOCATION_CODE,
    READ_ALLOCATION_CODE,
    SECTION_ALLOCATION_CODE,
    DECODE_FAILURE_CODE,
    MALFORMED_SECTION_CODE,
    DUPLICATE_SECTION_CODE,
    MALFORMED_KEY_VALUE_CODE,
    DUPLICATE_KEY_CODE,
    UNTERMINATED_BLOCK_COMMENT_CODE,
    MALLOC_FAIL_MESSAGE,
    FOPEN_FAIL_MESSAGE,
)

# ---------- #
# Exceptions
# ---------- #


class IniError(Exception):
    """Base for every error raised while reading an ini.

    Args:
        message (str): Human-readable description.
        line_number (int | None, optional): 1-based line the error refers to.
            Defaults to None.
        code (int | None, optional): Diagnostic code. Defaults to the class code.
    """

    code: int = -1

    def __init__(
        self,
        message: str,
        line_number: int | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        if code is not None:
            self.code = code


class AllocationFailure(IniError, MemoryError):
    """Raised when memory for an item, section or the read buffer ran out."""

    code = READ_ALLOCATION_CODE

    def __init__(self, code: int = READ_ALLOCATION_CODE, line_number=None) -> None:
        super().__init__(MALLOC_FAIL_MESSAGE, line_number=line_number, code=code)

    @classmethod
    def for_item(cls, line_number: int | None = None) -> "AllocationFailure":
        return cls(ITEM_ALLOCATION_CODE, line_number)

    @classmethod
    def for_section(cls, line_number: int | None = None) -> "AllocationFailure":
        return cls(SECTION_ALLOCATION_CODE, line_number)


class FileOpenFailure(IniError):
    """Raised when the ini file can't be opened. code is the OS errno."""

    def __init__(self, filename: str, errno: int | None) -> None:
        super().__init__(
            f"{FOPEN_FAIL_MESSAGE} ({filename})",
            code=errno if errno is not None else -1,
        )
        self.filename = filename
        self.errno = errno


class FileDecodeFailure(IniError):
    """Raised when the file content can't be decoded to text."""

    code = DECODE_FAILURE_CODE


class MalformedSection(IniError):
    """Raised when a section header has unbalanced brackets or an empty name."""

    code = MALFORMED_SECTION_CODE


class DuplicateSection(IniError):
    """Raised when a section name is declared twice."""

    code = DUPLICATE_SECTION_CODE


class MalformedKeyValue(IniError):
    """Raised when a content line has no delimiter or an empty key."""

    code = MALFORMED_KEY_VALUE_CODE


class DuplicateKey(IniError):
    """Raised when a key appears twice in the same scope."""

    code = DUPLICATE_KEY_CODE


class EntityNotFound(KeyError):
    """Raised when a section or key was to be accessed but doesn't exist."""


# ---------- #
# Warnings
# ---------- #


class IniStructureWarning(Warning):
    """Raised when the ini violates the expected structure but reading goes on."""


class SkippedLineWarning(IniStructureWarning):
    """Raised when a faulty line is skipped because parsing is lenient."""


class UnterminatedBlockCommentWarning(IniStructureWarning):
    """Raised when the input ends inside a block comment."""

    code = UNTERMINATED_BLOCK_COMMENT_CODE
