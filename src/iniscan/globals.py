from typing import Literal

COMMENT_PREFIXES = ("#", ";", "//")
"""Prefixes that turn a whole line into a comment."""
BLOCK_COMMENT_BEGIN = "/*"
BLOCK_COMMENT_END = "*/"
SECTION_BEGIN = "["
SECTION_END = "]"
DEFAULT_DELIMITER = "="
BOM = "\ufeff"

HASH_SIZE = 8675309
"""Modulus of the key hash."""
HASH_MULTIPLIER = 179
HASH_SEED = 1

RESERVED_MARKERS = ("#", ";", "/", "*", "[", "]")
"""Characters that can't be used as key/value delimiter."""

type DUPLICATE_POLICIES = Literal["first", "last"]
"""Which value wins for a repeated key when parsing leniently."""

# diagnostic codes
ITEM_ALLOCATION_CODE = 5
SECTION_ALLOCATION_CODE = 6
READ_ALLOCATION_CODE = 7
DECODE_FAILURE_CODE = 8
MALFORMED_SECTION_CODE = 20
DUPLICATE_SECTION_CODE = 21
MALFORMED_KEY_VALUE_CODE = 22
DUPLICATE_KEY_CODE = 23
UNTERMINATED_BLOCK_COMMENT_CODE = 30

FOPEN_FAIL_MESSAGE = "Can't open file for reading. Please check errno"
MALLOC_FAIL_MESSAGE = "Couldn't allocate memory! This is bad."
