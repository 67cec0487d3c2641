"""Tests for notionlog/properties.py: one Notion property type at a time."""

from __future__ import annotations

from notionlog.models import Author, DateRange
from notionlog.properties import (
    SUPPORTED_TYPES,
    get_page_properties,
    plain_text,
    read_property,
)


class TestPlainText:
    def test_concatenates_segments(self, notion):
        segments = notion.rich("Hello, ") + notion.rich("world")
        assert plain_text(segments) == "Hello, world"

    def test_falls_back_to_text_content(self):
        assert plain_text([{"type": "text", "text": {"content": "raw"}}]) == "raw"

    def test_equation_segment(self):
        seg = {"type": "equation", "equation": {"expression": "E=mc^2"}}
        assert plain_text([seg]) == "E=mc^2"

    def test_none_is_empty(self):
        assert plain_text(None) == ""


class TestReadProperty:
    def test_title(self, notion):
        assert read_property(notion.title("My post")) == "My post"

    def test_rich_text(self, notion):
        assert read_property(notion.text("hello")) == "hello"

    def test_select_is_one_element_list(self, notion):
        assert read_property(notion.select("Public")) == ["Public"]

    def test_empty_select_is_empty_list(self, notion):
        assert read_property(notion.select(None)) == []

    def test_status(self):
        value = {"type": "status", "status": {"id": "1", "name": "Draft", "color": "gray"}}
        assert read_property(value) == ["Draft"]

    def test_multi_select(self, notion):
        assert read_property(notion.multi_select("python", "notion")) == ["python", "notion"]

    def test_date(self, notion):
        result = read_property(notion.date("2024-03-01", "2024-03-02"))
        assert result == DateRange(start_date="2024-03-01", end_date="2024-03-02")

    def test_empty_date(self, notion):
        assert read_property(notion.date(None)) is None

    def test_people(self, notion):
        value = notion.people(
            {"object": "user", "id": "u1", "name": "Ada", "avatar_url": "https://a/ada.png"},
            {"object": "user", "id": "u2"},
        )
        assert read_property(value) == [
            Author(id="u1", name="Ada", profile_photo="https://a/ada.png"),
            Author(id="u2"),
        ]

    def test_files_external(self, notion):
        assert read_property(notion.files("https://img/cover.png")) == "https://img/cover.png"

    def test_files_notion_hosted(self):
        value = {
            "type": "files",
            "files": [{"type": "file", "file": {"url": "https://s3/x.png", "expiry_time": "..."}}],
        }
        assert read_property(value) == "https://s3/x.png"

    def test_files_empty(self):
        assert read_property({"type": "files", "files": []}) is None

    def test_checkbox(self, notion):
        assert read_property(notion.checkbox(True)) is True

    def test_scalars(self):
        assert read_property({"type": "number", "number": 3}) == 3
        assert read_property({"type": "url", "url": "https://x"}) == "https://x"
        assert read_property({"type": "email", "email": "a@b.c"}) == "a@b.c"

    def test_formula_string(self):
        value = {"type": "formula", "formula": {"type": "string", "string": "computed"}}
        assert read_property(value) == "computed"

    def test_formula_date(self):
        value = {"type": "formula", "formula": {"type": "date", "date": {"start": "2024-05-05"}}}
        assert read_property(value) == DateRange(start_date="2024-05-05")

    def test_relation_ids_normalised(self):
        value = {"type": "relation", "relation": [{"id": "0123abcd456789ef0123456789abcdef"}]}
        assert read_property(value) == ["0123abcd-4567-89ef-0123-456789abcdef"]

    def test_rollup_array(self, notion):
        value = {
            "type": "rollup",
            "rollup": {"type": "array", "array": [notion.title("a"), notion.title("b")]},
        }
        assert read_property(value) == ["a", "b"]

    def test_rollup_number(self):
        value = {"type": "rollup", "rollup": {"type": "number", "number": 7}}
        assert read_property(value) == 7

    def test_unique_id_with_prefix(self):
        value = {"type": "unique_id", "unique_id": {"prefix": "POST", "number": 12}}
        assert read_property(value) == "POST-12"

    def test_unique_id_without_prefix(self):
        value = {"type": "unique_id", "unique_id": {"prefix": None, "number": 12}}
        assert read_property(value) == "12"

    def test_created_by(self):
        value = {"type": "created_by", "created_by": {"object": "user", "id": "u9"}}
        assert read_property(value) == Author(id="u9")

    def test_unknown_type_is_none(self):
        assert read_property({"type": "button", "button": {}}) is None

    def test_schema_type_used_when_value_has_no_type(self):
        assert read_property({"select": {"name": "Post"}}, schema_type="select") == ["Post"]

    def test_supported_types_cover_select_family(self):
        assert {"select", "multi_select", "status"} <= SUPPORTED_TYPES


class TestGetPageProperties:
    def test_missing_page_returns_none(self):
        assert get_page_properties("nope", {}, {}) is None

    def test_keys_follow_schema_names(self, notion):
        row = notion.post_row("p1", "Hello", date="2024-02-02")
        pages = {"p1": row}
        result = get_page_properties("p1", pages, notion.database()["properties"])
        assert result["id"] == "p1"
        assert result["title"] == "Hello"
        assert result["slug"] == "hello"
        assert result["status"] == ["Public"]
        assert result["date"] == DateRange(start_date="2024-02-02")

    def test_columns_outside_schema_still_read(self, notion):
        row = notion.post_row("p1", "Hello", extra_column=notion.text("kept"))
        result = get_page_properties("p1", {"p1": row}, {})
        assert result["extra_column"] == "kept"
