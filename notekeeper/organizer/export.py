"""
Note Export.

Renders note content as a downloadable file in one of a few formats.
Unknown formats fall back to plain text.
"""

import csv
import html
import io
import json
from dataclasses import dataclass
from enum import Enum


class ExportFormat(str, Enum):
    TXT = "txt"
    MD = "md"
    HTML = "html"
    CSV = "csv"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | None) -> "ExportFormat":
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.TXT


MEDIA_TYPES = {
    ExportFormat.TXT: "text/plain;charset=utf-8",
    ExportFormat.MD: "text/markdown;charset=utf-8",
    ExportFormat.HTML: "text/html;charset=utf-8",
    ExportFormat.CSV: "text/csv;charset=utf-8",
    ExportFormat.JSON: "application/json;charset=utf-8",
}

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Exported Note</title>
</head>
<body>
  <pre>{body}</pre>
</body>
</html>"""


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    media_type: str
    body: str


def _to_csv(content: str) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for line in content.split("\n"):
        writer.writerow([line])
    return buffer.getvalue()


def _to_json(content: str) -> str:
    try:
        json.loads(content)
    except ValueError:
        return json.dumps({"content": content})
    return content


def render_export(content: str, fmt: str | ExportFormat | None = None) -> ExportedFile:
    """
    Render `content` for download.

    Args:
        content: Note content
        fmt: One of txt, md, html, csv, json

    Returns:
        ExportedFile named note.<ext> with the matching media type
    """
    export_format = fmt if isinstance(fmt, ExportFormat) else ExportFormat.parse(fmt)
    content = content or ""

    if export_format is ExportFormat.HTML:
        body = HTML_TEMPLATE.format(body=html.escape(content))
    elif export_format is ExportFormat.CSV:
        body = _to_csv(content)
    elif export_format is ExportFormat.JSON:
        body = _to_json(content)
    else:
        body = content

    return ExportedFile(
        filename=f"note.{export_format.value}",
        media_type=MEDIA_TYPES[export_format],
        body=body,
    )
