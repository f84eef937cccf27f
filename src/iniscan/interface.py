"""Interface classes and functions for reading ini files into an IniFile."""

from typing import Iterable, Iterator, Literal
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
import contextlib
import copy
import io
import logging
import warnings
from charset_normalizer import from_bytes as read_from_bytes
from .args import Parameters
from .diagnostics import ErrorHint, clear_error, get_error, set_error
from .entities import Item, ItemList, Section, SectionName
from .exceptions_warnings import (
    AllocationFailure,
    DuplicateKey,
    DuplicateSection,
    EntityNotFound,
    FileDecodeFailure,
    FileOpenFailure,
    IniError,
    IniStructureWarning,
    MalformedKeyValue,
    MalformedSection,
    SkippedLineWarning,
    UnterminatedBlockCommentWarning,
)
from .globals import BOM, SECTION_BEGIN, UNTERMINATED_BLOCK_COMMENT_CODE
from .lines import (
    is_begin_block_comment,
    is_end_block_comment,
    is_line_commented,
    is_section_declaration,
)
from .utils import OrderedDict, copy_doc

logger = logging.getLogger(__name__)

STRUCTURE_ERRORS = (MalformedSection, DuplicateSection, MalformedKeyValue, DuplicateKey)
"""Errors that lenient reading skips instead of aborting."""


class IniFile:
    """The root model: global items plus all sections in declaration order."""

    def __init__(self) -> None:
        self.global_items = ItemList()
        self.sections: OrderedDict[SectionName, Section] = OrderedDict()

    def add_section(self, name: str) -> Section:
        """Create a new, empty section.

        Args:
            name (str): Name of the section (case-sensitive).

        Raises:
            DuplicateSection: If a section with that name exists already.

        Returns:
            Section: The new section.
        """
        if name in self.sections:
            raise DuplicateSection(f"Section '{name}' already exists.")
        section = Section(name)
        self.sections[section.name] = section
        return section

    def get_section(self, name: str) -> Section:
        try:
            return self.sections[name]
        except KeyError as e:
            raise EntityNotFound(f"'{name}' is no known section.") from e

    def section_at(self, index: int) -> Section:
        """Get a section by its position (negative indices count from the end)."""
        return self.sections.iloc[index][1]

    def get(
        self, key: str, section: str | None = None, default: str | None = None
    ) -> str | None:
        """Get a value by key.

        Args:
            key (str): The key to look up.
            section (str | None, optional): Section to search. None searches the
                global items. Defaults to None.
            default (str | None, optional): Returned if the section or key doesn't
                exist. Defaults to None.

        Returns:
            str | None: The value or default.
        """
        if section is None:
            return self.global_items.get(key, default)
        if (found := self.sections.get(section)) is None:
            return default
        return found.get(key, default)

    def __getitem__(self, name: str) -> Section:
        return self.get_section(name)

    def __contains__(self, name: object) -> bool:
        return name in self.sections

    def __iter__(self) -> Iterator[Section]:
        return iter(self.sections.values())

    def __len__(self) -> int:
        return len(self.sections)

    def to_dict(self) -> dict[str | None, dict[str, str]]:
        """Convert to plain dicts. Global items are stored under None."""
        out: dict[str | None, dict[str, str]] = {None: self.global_items.to_dict()}
        out.update(
            (str(name), section.items.to_dict())
            for name, section in self.sections.items()
        )
        return out

    def free(self) -> None:
        """Release every section and item. Calling it again is a no-op."""
        for section in self.sections.values():
            section.free()
        self.sections.clear()
        self.global_items.clear()

    def __repr__(self) -> str:
        return (
            f"IniFile(global_items={list(self.global_items)!r},"
            f" sections={list(self.sections)!r})"
        )


@dataclass(slots=True)
class ParseResult:
    """Outcome of one read.

    Args:
        file (IniFile | None): The model or None if reading failed.
        error (ErrorHint | None): The failure if file is None, otherwise the last
            warning-level diagnostic (skipped line, unterminated block comment).
    """

    file: IniFile | None = None
    error: ErrorHint | None = None

    @property
    def ok(self) -> bool:
        return self.file is not None


class ReadState(Enum):
    SCANNING = auto()
    IN_BLOCK_COMMENT = auto()
    DONE = auto()


class _ReadIni:

    def __init__(self, lines: Iterable[str], parameters: Parameters) -> None:
        """Read lines into a new IniFile (self.target).

        Raises the first structural IniError if parameters.strict, and any
        allocation failure. The partially built model is freed before raising.
        """
        self.parameters = parameters
        self.target = IniFile()

        # ----
        # define variables for read process
        # ----
        self.state = ReadState.SCANNING
        self.current_section: Section | None | Literal[False] = None
        """If None then no section opened yet (global items). If False, then the
        current section is being ignored."""
        self.current_line_number: int = 0
        self.current_line: str = ""
        self.diagnostic: ErrorHint | None = None
        # ----

        try:
            for self.current_line_number, self.current_line in enumerate(
                lines, start=1
            ):
                self._read_line()
        except Exception:
            self.target.free()
            self.state = ReadState.DONE
            raise

        if self.state is ReadState.IN_BLOCK_COMMENT:
            self._report(
                "Reached end of input inside a block comment.",
                UnterminatedBlockCommentWarning,
                UNTERMINATED_BLOCK_COMMENT_CODE,
            )
        self.state = ReadState.DONE

    def _read_line(self) -> None:
        """Run the state machine for self.current_line."""
        line = self.current_line

        if self.state is ReadState.IN_BLOCK_COMMENT:
            if is_end_block_comment(line):
                logger.debug("Block comment closed in line %d", self.current_line_number)
                self.state = ReadState.SCANNING
            return

        if is_begin_block_comment(line) and not is_end_block_comment(line):
            logger.debug("Block comment opened in line %d", self.current_line_number)
            self.state = ReadState.IN_BLOCK_COMMENT
            return

        if is_line_commented(line, self.parameters.ignore_whitespace_lines):
            return

        try:
            if is_section_declaration(line) or line.startswith(SECTION_BEGIN):
                self.current_section = self._handle_section()
            elif self.current_section is False:
                warnings.warn(
                    f"Line {self.current_line_number} is being ignored because it's"
                    " inside an ignored section.",
                    SkippedLineWarning,
                )
            else:
                self._handle_item()
        except STRUCTURE_ERRORS as error:
            if error.line_number is None:
                error.line_number = self.current_line_number
            if self.parameters.strict:
                raise
            if isinstance(error, (MalformedSection, DuplicateSection)):
                # ignore the whole section body up to the next header
                self.current_section = False
            self._report(
                f"Line {self.current_line_number} is being ignored: {error.message}",
                SkippedLineWarning,
                error.code,
            )

    def _handle_section(self) -> Section:
        """Open the section declared in self.current_line."""
        name = SectionName(name_with_brackets=self.current_line)
        try:
            section = self.target.add_section(name)
        except MemoryError as e:
            raise AllocationFailure.for_section(self.current_line_number) from e
        logger.debug("Section '%s' opened in line %d", name, self.current_line_number)
        return section

    def _handle_item(self) -> Item:
        """Add the item of self.current_line to the current scope."""
        assert self.current_section is not False
        try:
            item = Item.from_string(self.current_line, self.parameters.delimiter)
        except MemoryError as e:
            raise AllocationFailure.for_item(self.current_line_number) from e

        items = (
            self.target.global_items
            if self.current_section is None
            else self.current_section.items
        )
        if (
            item.key in items
            and not self.parameters.strict
            and self.parameters.duplicate_keys == "last"
        ):
            error = DuplicateKey(
                f"Line {self.current_line_number} overwrites key '{item.key}'.",
                self.current_line_number,
            )
            self._report(error.message, IniStructureWarning, error.code)
            return items.add(item, replace=True)
        return items.add(item)

    def _report(self, message: str, category: type[Warning], code: int) -> None:
        """Warn and record the diagnostic (last one wins)."""
        warnings.warn(message, category)
        self.diagnostic = ErrorHint(message, code, self.current_line_number)


def _resolve_parameters(parameters: Parameters | None, kwargs: dict) -> Parameters:
    if parameters is None:
        parameters = Parameters()
    elif kwargs:
        parameters = copy.copy(parameters)
    if kwargs:
        parameters.update(**kwargs)
    return parameters


def _read_text(path: str | Path, encoding: str | None) -> str:
    """Read and decode a whole file.

    Without an explicit encoding, strict UTF-8 is tried first and
    charset_normalizer guesses otherwise. Guesses on short non-UTF-8 files can
    be wrong, so pass the encoding for those. A leading BOM is dropped.

    Raises:
        FileOpenFailure: If the file can't be read (code is the OS errno).
        FileDecodeFailure: If the content can't be decoded.
        AllocationFailure: If memory ran out while reading.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise FileOpenFailure(str(path), e.errno) from e
    except MemoryError as e:
        raise AllocationFailure() from e

    if encoding is not None:
        try:
            return raw.decode(encoding).removeprefix(BOM)
        except (UnicodeDecodeError, LookupError) as e:
            raise FileDecodeFailure(f"Can't decode '{path}' as {encoding}: {e}") from e
    with contextlib.suppress(UnicodeDecodeError):
        return raw.decode("utf-8").removeprefix(BOM)
    if (match := read_from_bytes(raw).best()) is None:
        raise FileDecodeFailure(f"Can't detect the encoding of '{path}'.")
    return str(match).removeprefix(BOM)


def _parse_lines(
    lines: Iterable[str],
    parameters: Parameters | None = None,
    **kwargs,
) -> ParseResult:
    """Parse ini lines (e.g. an open text stream) into an IniFile.

    Args:
        lines (Iterable[str]): The lines, with or without trailing newlines.
        parameters (Parameters | None, optional): Parameters for reading. Can also
            be passed as kwargs, which update a copy of parameters (or the
            defaults if parameters is None). Defaults to None.
        **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

    Returns:
        ParseResult: The model and this call's diagnostic.
    """
    parameters = _resolve_parameters(parameters, kwargs)
    try:
        reader = _ReadIni(lines, parameters)
    except IniError as error:
        return ParseResult(error=ErrorHint.from_error(error))
    except MemoryError:
        return ParseResult(error=ErrorHint.from_error(AllocationFailure()))
    except OSError as e:
        failure = FileOpenFailure(getattr(lines, "name", "<stream>"), e.errno)
        return ParseResult(error=ErrorHint.from_error(failure))
    return ParseResult(file=reader.target, error=reader.diagnostic)


@copy_doc(_parse_lines, annotations=True)
def parse_lines(*args, **kwargs) -> ...:
    return _parse_lines(*args, **kwargs)


def parse_string(
    text: str, parameters: Parameters | None = None, **kwargs
) -> ParseResult:
    """Parse ini text. See parse_lines."""
    return _parse_lines(io.StringIO(text, newline=None), parameters, **kwargs)


def parse_file(
    path: str | Path, parameters: Parameters | None = None, **kwargs
) -> ParseResult:
    """Read an ini file without touching the global error hint.

    Args:
        path (str | Path): Path to the ini file.
        parameters (Parameters | None, optional): Parameters for reading. Can also
            be passed as kwargs. Defaults to None.
        **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

    Returns:
        ParseResult: The model and this call's diagnostic.
    """
    parameters = _resolve_parameters(parameters, kwargs)
    try:
        text = _read_text(path, parameters.encoding)
    except IniError as error:
        logger.debug("Reading '%s' failed: %s", path, error.message)
        return ParseResult(error=ErrorHint.from_error(error))
    result = _parse_lines(io.StringIO(text, newline=None), parameters)
    if result.ok:
        logger.info(
            "Read '%s': %d global items, %d sections",
            path,
            len(result.file.global_items),
            len(result.file.sections),
        )
    return result


def read_file(
    path: str | Path, parameters: Parameters | None = None, **kwargs
) -> IniFile | None:
    """Read an ini file.

    Clears the error hint first. On failure returns None and the error hint holds
    the reason (the OS errno as code if the file can't be opened). Warning-level
    diagnostics (skipped lines, unterminated block comment) are stored as well
    while the model is still returned. Read the hint before the next call.

    Args:
        path (str | Path): Path to the ini file.
        parameters (Parameters | None, optional): Parameters for reading. Can also
            be passed as kwargs. Defaults to None.
        **kwargs (optional): Parameters as kwargs. See doc of Parameters for details.

    Returns:
        IniFile | None: The model or None.
    """
    clear_error()
    result = parse_file(path, parameters, **kwargs)
    if result.error is not None:
        set_error(result.error)
    return result.file


def free(file: IniFile | None) -> None:
    """Release a model. None is accepted and ignored."""
    if file is None:
        return
    file.free()


@copy_doc(get_error)
def get_error_hint() -> ErrorHint | None:
    return get_error()
