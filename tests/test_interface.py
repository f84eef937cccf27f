from .base import Base
from iniscan import (
    IniFile,
    Parameters,
    read_file,
    parse_file,
    parse_string,
    parse_lines,
    free,
    get_error_hint,
)
from iniscan import diagnostics
from iniscan.entities import Item
from iniscan.globals import (
    ITEM_ALLOCATION_CODE,
    SECTION_ALLOCATION_CODE,
    DECODE_FAILURE_CODE,
    DUPLICATE_KEY_CODE,
    MALFORMED_KEY_VALUE_CODE,
    UNTERMINATED_BLOCK_COMMENT_CODE,
)
from iniscan.exceptions_warnings import (
    DuplicateSection,
    EntityNotFound,
    UnterminatedBlockCommentWarning,
)
import errno
import io
import pytest


class TestReadFile:

    def test_single_section(self, tmp_path):
        path = tmp_path / "simple.ini"
        path.write_text("[s]\nk=v\n")
        file = read_file(path)
        assert file is not None
        assert get_error_hint() is None
        assert list(file.sections) == ["s"]
        assert len(file.global_items) == 0
        assert [(item.key, item.value) for item in file["s"]] == [("k", "v")]

    def test_generated_content(self, tmp_path):
        base = Base()
        base.add_item()
        base.add_comment("#")
        base.add_section()
        base.add_item()
        base.add_block_comment()
        base.add_item()
        base.add_section()
        base.add_comment("//")
        base.add_item(value="")
        file = read_file(base.export(tmp_path))
        assert base.matches(file)

    def test_nonexistent_path(self):
        assert read_file("/nonexistent/path") is None
        hint = get_error_hint()
        assert hint is not None
        assert hint.code == errno.ENOENT

    def test_directory(self, tmp_path):
        assert read_file(tmp_path) is None
        assert get_error_hint().code in {errno.EISDIR, errno.EACCES}

    def test_error_is_cleared_by_next_call(self, tmp_path):
        read_file("/nonexistent/path")
        assert get_error_hint() is not None
        path = tmp_path / "ok.ini"
        path.write_text("k = v\n")
        assert read_file(path) is not None
        assert get_error_hint() is None

    def test_error_overwritten_by_next_failure(self, tmp_path):
        read_file("/nonexistent/path")
        path = tmp_path / "bad.ini"
        path.write_text("no delimiter\n")
        assert read_file(path) is None
        assert get_error_hint().code == MALFORMED_KEY_VALUE_CODE
        assert get_error_hint().line_number == 1

    def test_explicit_encoding(self, tmp_path):
        base = Base()
        base.add_section("Größe")
        base.add_item("schlüssel", "wört")
        path = base.export(tmp_path, encoding="latin-1")
        assert base.matches(read_file(path, encoding="latin-1"))

    def test_wrong_encoding(self, tmp_path):
        path = tmp_path / "utf16.ini"
        path.write_bytes(b"\xff\xfe\x00\xd8")
        assert read_file(path, encoding="utf-8") is None
        assert get_error_hint().code == DECODE_FAILURE_CODE

    def test_detected_encoding(self, tmp_path):
        path = tmp_path / "detected.ini"
        path.write_bytes("[s]\nkey = value\n".encode("utf-8"))
        file = read_file(path)
        assert file is not None
        assert file.get("key", section="s") == "value"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.ini"
        path.write_bytes(b"")
        file = read_file(path)
        assert file is not None
        assert file.to_dict() == {None: {}}

    def test_crlf(self, tmp_path):
        path = tmp_path / "crlf.ini"
        path.write_bytes(b"[s]\r\nk = v\r\n/* a\r\n b */\r\n")
        file = read_file(path, encoding="ascii")
        assert file.to_dict() == {None: {}, "s": {"k": "v"}}

    def test_unterminated_block_comment(self, tmp_path):
        path = tmp_path / "block.ini"
        path.write_text("k = v\n/* never\nclosed = 1\n")
        with pytest.warns(UnterminatedBlockCommentWarning):
            file = read_file(path)
        assert file is not None
        assert file.to_dict() == {None: {"k": "v"}}
        assert get_error_hint().code == UNTERMINATED_BLOCK_COMMENT_CODE


class TestParse:

    def test_parse_file_leaves_error_hint_alone(self, tmp_path):
        diagnostics.set_error("previous", -1)
        result = parse_file(tmp_path / "missing.ini")
        assert not result.ok
        assert result.error.code == errno.ENOENT
        assert get_error_hint().text == "previous"
        diagnostics.clear_error()

    def test_global_items_before_sections(self):
        result = parse_string("a = 1\nb = 2\n[s]\nc = 3\n")
        assert result.ok
        assert result.error is None
        assert result.file.to_dict() == {None: {"a": "1", "b": "2"}, "s": {"c": "3"}}

    def test_block_comments(self):
        text = (
            "/* single */\n"
            "a = 1\n"
            "/* opens\n"
            "[hidden]\n"
            "b = 2\n"
            "still hidden */\n"
            "c = 3\n"
        )
        result = parse_string(text)
        assert result.file.to_dict() == {None: {"a": "1", "c": "3"}}

    def test_block_comment_ends_at_first_closing_line(self):
        result = parse_string("/*\n*/\nx = 1\n*/\n")
        # the second "*/" is content again and has no delimiter
        assert not result.ok
        assert result.error.code == MALFORMED_KEY_VALUE_CODE
        assert result.error.line_number == 4

    def test_parse_lines_from_stream(self):
        stream = io.StringIO("[a]\nx=1\n[b]\nx=2\n")
        result = parse_lines(stream)
        assert result.file.get("x", section="a") == "1"
        assert result.file.get("x", section="b") == "2"

    def test_parse_lines_without_newlines(self):
        result = parse_lines(["[a]", "x=1", "", "; comment"])
        assert result.file.to_dict() == {None: {}, "a": {"x": "1"}}

    def test_parameters_are_not_mutated(self):
        parameters = Parameters()
        parse_string("a = 1\n", parameters, strict=False)
        assert parameters.strict is True


class TestIniFile:

    def test_access(self):
        file = parse_string("g = 0\n[s1]\na = 1\n[s2]\nb = 2\n").file
        assert "s1" in file
        assert "s3" not in file
        assert len(file) == 2
        assert [section.name for section in file] == ["s1", "s2"]
        assert file.section_at(-1).name == "s2"
        assert file.get("g") == "0"
        assert file.get("a", section="s1") == "1"
        assert file.get("a", section="s3", default="d") == "d"
        with pytest.raises(EntityNotFound):
            file["s3"]

    def test_add_section(self):
        file = IniFile()
        file.add_section("s")
        with pytest.raises(DuplicateSection):
            file.add_section("s")
        file.add_section("S")
        assert list(file.sections) == ["s", "S"]

    def test_free_twice(self):
        file = parse_string("g = 0\n[s]\nk = v\n").file
        file.free()
        file.free()
        free(file)
        free(None)
        assert file.to_dict() == {None: {}}

    def test_duplicate_key_code(self):
        result = parse_string("[s]\nk = 1\nk = 2\n")
        assert result.file is None
        assert result.error.code == DUPLICATE_KEY_CODE


class TestDecoding:

    @pytest.mark.parametrize("encoding", ["utf-8", "utf-8-sig", None])
    def test_bom_is_dropped(self, encoding, tmp_path):
        path = tmp_path / "bom.ini"
        path.write_bytes(b"\xef\xbb\xbf[s]\nk=v\n")
        file = read_file(path, encoding=encoding)
        assert get_error_hint() is None
        assert file.to_dict() == {None: {}, "s": {"k": "v"}}

    def test_utf8_preferred_over_guessing(self, tmp_path):
        path = tmp_path / "short.ini"
        path.write_bytes("name = café\n".encode("utf-8"))
        assert read_file(path).get("name") == "café"

    @pytest.mark.parametrize("text", ["[s]\rk=v\r", "[s]\r\nk=v\r\n", "[s]\nk=v"])
    def test_line_endings(self, text):
        result = parse_string(text)
        assert result.file.to_dict() == {None: {}, "s": {"k": "v"}}

    def test_line_endings_in_file(self, tmp_path):
        path = tmp_path / "cr.ini"
        path.write_bytes(b"[s]\rk=v\r/* a\r b */\r")
        assert read_file(path).to_dict() == {None: {}, "s": {"k": "v"}}


class TestFatalFailures:

    @pytest.fixture
    def freed(self, monkeypatch):
        """Record every IniFile.free call."""
        calls = []
        original_free = IniFile.free

        def recording_free(file):
            calls.append(file)
            original_free(file)

        monkeypatch.setattr(IniFile, "free", recording_free)
        return calls

    def test_item_allocation(self, tmp_path, monkeypatch, freed):
        def out_of_memory(cls, *args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(Item, "from_string", classmethod(out_of_memory))
        path = tmp_path / "item.ini"
        path.write_text("[s]\nk = v\n")
        assert read_file(path) is None
        hint = get_error_hint()
        assert hint.code == ITEM_ALLOCATION_CODE
        assert hint.line_number == 2
        assert len(freed) == 1

    def test_section_allocation(self, tmp_path, monkeypatch, freed):
        def out_of_memory(self, name):
            raise MemoryError

        monkeypatch.setattr(IniFile, "add_section", out_of_memory)
        path = tmp_path / "section.ini"
        path.write_text("g = 1\n[s]\nk = v\n")
        assert read_file(path) is None
        hint = get_error_hint()
        assert hint.code == SECTION_ALLOCATION_CODE
        assert hint.line_number == 2
        assert len(freed) == 1

    def test_allocation_not_skipped_when_lenient(self, monkeypatch):
        def out_of_memory(cls, *args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(Item, "from_string", classmethod(out_of_memory))
        result = parse_string("k = v\n", strict=False)
        assert result.file is None
        assert result.error.code == ITEM_ALLOCATION_CODE

    def test_read_error_midway(self, freed):
        def lines():
            yield "[s]\n"
            yield "k = v\n"
            raise OSError(errno.EIO, "Input/output error")

        result = parse_lines(lines())
        assert result.file is None
        assert result.error.code == errno.EIO
        assert len(freed) == 1
