"""Tests for the phone list importer."""
from components.call_manager.phone_list import parse_phone_list, read_uploaded_file
from services.models import CallTarget


class FakeUpload:
    def __init__(self, data: bytes):
        self._data = data

    def getvalue(self) -> bytes:
        return self._data


class TestParsePhoneList:
    def test_header_row_is_skipped(self) -> None:
        targets = parse_phone_list("id,number,name,notes\n1,555-0100,Alice,Likes mornings")

        assert targets == [CallTarget(id="1", number="555-0100", name="Alice", notes="Likes mornings")]

    def test_without_header_first_line_is_data(self) -> None:
        targets = parse_phone_list("1,555-0100,Alice\n2,555-0200,Bob")

        assert [t.number for t in targets] == ["555-0100", "555-0200"]

    def test_empty_fields_become_none(self) -> None:
        targets = parse_phone_list("id,number,name,notes\n1,555-0100,Alice,\n2,555-0200,,")

        assert targets[0].notes is None
        assert targets[1].name is None
        assert targets[1].notes is None

    def test_lines_without_number_are_skipped(self) -> None:
        targets = parse_phone_list("id,number,name,notes\n1,,Nobody,\n2,555-0200,Bob,")

        assert [t.id for t in targets] == ["2"]

    def test_missing_id_uses_line_index(self) -> None:
        targets = parse_phone_list("id,number,name,notes\n,555-0100,Alice,\n,555-0200,,")

        assert [t.id for t in targets] == ["id-1", "id-2"]

    def test_blank_lines_and_whitespace(self) -> None:
        content = "id,number,name,notes\n\n  1, 555-0100 ,Alice,  \n\r\n2,555-0200,Bob,\n"

        targets = parse_phone_list(content)

        assert [(t.id, t.number) for t in targets] == [("1", "555-0100"), ("2", "555-0200")]

    def test_extra_fields_are_ignored(self) -> None:
        targets = parse_phone_list("1,555-0100,Alice,note,extra,more")

        assert targets == [CallTarget(id="1", number="555-0100", name="Alice", notes="note")]

    def test_order_is_preserved(self) -> None:
        content = "\n".join(f"{i},555-{i:04d}" for i in range(10, 0, -1))

        targets = parse_phone_list(content)

        assert [t.id for t in targets] == [str(i) for i in range(10, 0, -1)]

    def test_header_only_gives_empty_list(self) -> None:
        assert parse_phone_list("id,number,name,notes") == []

    def test_empty_content_gives_empty_list(self) -> None:
        assert parse_phone_list("") == []


class TestReadUploadedFile:
    def test_strips_byte_order_mark(self) -> None:
        upload = FakeUpload("\ufeffid,number\n1,555-0100".encode("utf-8"))

        assert read_uploaded_file(upload) == "id,number\n1,555-0100"
