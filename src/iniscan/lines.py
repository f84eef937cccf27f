"""Classification of single ini lines.

Every function takes one raw line, with or without its trailing newline, and
only inspects characters in front of that newline. Lines too short for a
two-character marker are never matched.
"""

from .globals import (
    BLOCK_COMMENT_BEGIN,
    BLOCK_COMMENT_END,
    COMMENT_PREFIXES,
    SECTION_BEGIN,
    SECTION_END,
)
from .exceptions_warnings import MalformedSection


def strip_newline(line: str) -> str:
    """Remove one trailing newline sequence ("\\n", "\\r\\n" or "\\r")."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def is_blank(line: str, ignore_whitespace: bool = True) -> bool:
    """Check whether the line holds nothing (or only whitespace).

    Args:
        line (str): The line to check.
        ignore_whitespace (bool, optional): Whether whitespace-only lines count as
            blank. Defaults to True.
    """
    content = strip_newline(line)
    return not (content.strip() if ignore_whitespace else content)


def is_line_commented(line: str, ignore_whitespace: bool = True) -> bool:
    """Check whether the line is a comment.

    Blank lines count as comments for simplicity's sake. So does the opening
    line of a block comment.

    Args:
        line (str): The line to check.
        ignore_whitespace (bool, optional): Whether whitespace-only lines count as
            blank. Defaults to True.

    Returns:
        bool
    """
    if is_blank(line, ignore_whitespace):
        return True
    content = strip_newline(line)
    return content.startswith(COMMENT_PREFIXES) or is_begin_block_comment(content)


def is_begin_block_comment(line: str) -> bool:
    return strip_newline(line)[:2] == BLOCK_COMMENT_BEGIN


def is_end_block_comment(line: str) -> bool:
    content = strip_newline(line)
    return len(content) >= 2 and content[-2:] == BLOCK_COMMENT_END


def is_section_declaration(line: str) -> bool:
    """Check whether the line is "[" + anything + "]" with nothing around it."""
    content = strip_newline(line)
    return (
        len(content) >= 2
        and content[0] == SECTION_BEGIN
        and content[-1] == SECTION_END
    )


def get_section_name(line: str) -> str:
    """Extract the name between the brackets of a section declaration.

    Args:
        line (str): The section declaration.

    Raises:
        MalformedSection: If line is no section declaration or the name is empty.

    Returns:
        str: The section name (case preserved, not stripped).
    """
    if not is_section_declaration(line):
        raise MalformedSection(f"'{strip_newline(line)}' is not a section declaration.")
    if not (name := strip_newline(line)[1:-1]):
        raise MalformedSection("Section name must not be empty.")
    return name
