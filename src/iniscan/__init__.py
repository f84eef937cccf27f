from .interface import (
    IniFile,
    ParseResult,
    read_file,
    parse_file,
    parse_string,
    parse_lines,
    free,
    get_error_hint,
)
from .args import Parameters
from .entities import Item, ItemList, Section, SectionName, split_key_value
from .diagnostics import ErrorHint
from .hashing import ini_hash, HashIndex
from .lines import (
    is_line_commented,
    is_begin_block_comment,
    is_end_block_comment,
    is_section_declaration,
    get_section_name,
)
