"""
Unit Tests for Note Export.
"""

import json

import pytest

from notekeeper.organizer.export import ExportFormat, render_export


class TestRenderExport:
    """Tests for render_export."""

    @pytest.mark.parametrize(
        ("fmt", "media_type"),
        [
            ("txt", "text/plain;charset=utf-8"),
            ("md", "text/markdown;charset=utf-8"),
            ("html", "text/html;charset=utf-8"),
            ("csv", "text/csv;charset=utf-8"),
            ("json", "application/json;charset=utf-8"),
        ],
    )
    def test_filename_and_media_type(self, fmt, media_type):
        """Should name the file after the format."""
        exported = render_export("x", fmt)

        assert exported.filename == f"note.{fmt}"
        assert exported.media_type == media_type

    def test_unknown_format_falls_back_to_text(self):
        """Should export plain text for unknown formats."""
        exported = render_export("body", "pdf")

        assert exported.filename == "note.txt"
        assert exported.body == "body"

    def test_format_is_case_insensitive(self):
        """Should accept upper-case format names."""
        assert ExportFormat.parse("MD") is ExportFormat.MD
        assert ExportFormat.parse(None) is ExportFormat.TXT

    def test_html_is_escaped(self):
        """Should escape markup inside the page."""
        body = render_export("<b>hi</b> & bye", "html").body

        assert "<pre>&lt;b&gt;hi&lt;/b&gt; &amp; bye</pre>" in body
        assert body.startswith("<!DOCTYPE html>")

    def test_csv_one_row_per_line(self):
        """Should quote cells that need it."""
        body = render_export('a,b\nsay "hi"', "csv").body

        assert body == '"a,b"\n"say ""hi"""\n'

    def test_json_content_kept(self):
        """Should pass valid JSON through."""
        assert render_export('{"a": 1}', "json").body == '{"a": 1}'

    def test_json_wraps_plain_text(self):
        """Should wrap other content in an object."""
        body = render_export("plain", "json").body

        assert json.loads(body) == {"content": "plain"}
