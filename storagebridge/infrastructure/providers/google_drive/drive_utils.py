"""Google Drive query, thumbnail and export helpers.

Pure functions with Drive-specific knowledge; no I/O.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from storagebridge.domain.protocols.storage_provider_protocol import SearchOptions

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
WORKSPACE_MIME_PREFIX = "application/vnd.google-apps."

_THUMBNAIL_SIZE_PATTERN = re.compile(r"=s\d+")


@dataclass(frozen=True, kw_only=True)
class ExportFormat:
    """Target format for exporting a Workspace document."""

    mime_type: str
    extension: str


EXPORT_FORMATS: dict[str, tuple[ExportFormat, ...]] = {
    "application/vnd.google-apps.document": (
        ExportFormat(mime_type="application/pdf", extension="pdf"),
        ExportFormat(
            mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            extension="docx",
        ),
        ExportFormat(mime_type="text/plain", extension="txt"),
        ExportFormat(mime_type="text/html", extension="html"),
    ),
    "application/vnd.google-apps.spreadsheet": (
        ExportFormat(mime_type="application/pdf", extension="pdf"),
        ExportFormat(
            mime_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            extension="xlsx",
        ),
        ExportFormat(mime_type="text/csv", extension="csv"),
    ),
    "application/vnd.google-apps.presentation": (
        ExportFormat(mime_type="application/pdf", extension="pdf"),
        ExportFormat(
            mime_type="application/vnd.openxmlformats-officedocument.presentationml.presentation",
            extension="pptx",
        ),
    ),
    "application/vnd.google-apps.drawing": (
        ExportFormat(mime_type="application/pdf", extension="pdf"),
        ExportFormat(mime_type="image/png", extension="png"),
        ExportFormat(mime_type="image/jpeg", extension="jpg"),
    ),
}


def is_workspace_file(mime_type: str) -> bool:
    """Whether the file is a Google-native document (Docs, Sheets, ...)."""
    return mime_type.startswith(WORKSPACE_MIME_PREFIX) and mime_type != FOLDER_MIME_TYPE


def select_export_format(
    mime_type: str, requested: str | None = None
) -> ExportFormat | None:
    """Pick the export format for a Workspace file.

    Args:
        mime_type: Source Workspace MIME type.
        requested: Extension ("docx") or MIME type; None selects the
            first listed format.

    Returns:
        The matching format, or None when the file type cannot be exported
        or the requested format is not offered for it.
    """
    formats = EXPORT_FORMATS.get(mime_type, ())
    if not formats:
        return None
    if requested is None:
        return formats[0]

    wanted = requested.strip().lower().lstrip(".")
    return next(
        (f for f in formats if wanted in (f.extension, f.mime_type)),
        None,
    )


def export_filename(name: str, export_format: ExportFormat) -> str:
    """Base name of ``name`` with the export extension appended."""
    stem = PurePosixPath(name).stem or "export"
    return f"{stem}.{export_format.extension}"


def folder_query(folder_id: str | None) -> str:
    return f"'{folder_id or 'root'}' in parents and trashed = false"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_search_query(options: SearchOptions) -> str:
    """Build a Drive ``q`` expression from search options.

    Quotes in user input are escaped; the search is scoped to one folder
    (root by default) and excludes trashed files.
    """
    conditions: list[str] = []
    if options.query:
        conditions.append(f"name contains '{_escape(options.query)}'")
    if options.mime_type:
        conditions.append(f"mimeType = '{_escape(options.mime_type)}'")
    conditions.append(f"'{_escape(options.folder_id or 'root')}' in parents")
    conditions.append("trashed = false")
    return " and ".join(conditions)


def resize_thumbnail(url: str, size: int) -> str:
    """Rewrite the ``=s<N>`` size suffix of a Drive thumbnail link."""
    return _THUMBNAIL_SIZE_PATTERN.sub(f"=s{size}", url, count=1)
