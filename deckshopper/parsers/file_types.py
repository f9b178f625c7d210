"""
Upload validation and file type detection.

Decks arrive as YDK or plain text, collections as CSV.
"""

from pathlib import PurePath
from typing import Literal

from deckshopper.config import settings
from deckshopper.models.failure import FileTooLargeError, UnsupportedFileTypeError

FileType = Literal["ydk", "csv", "txt", "unknown"]

YDK_SECTION_MARKERS = ("#main", "#extra", "#side")


def detect_file_type(file_name: str, content: str | None = None) -> FileType:
    """
    Detect a file's type from its extension, falling back to its content.

    Content sniffing:
        - YDK section markers (#main, #extra, #side) -> "ydk"
        - commas and more than one line -> "csv"
    """
    extension = PurePath(file_name.lower()).suffix.lstrip(".")

    if extension in ("ydk", "csv", "txt"):
        return extension  # type: ignore[return-value]

    if content:
        if any(marker in content for marker in YDK_SECTION_MARKERS):
            return "ydk"
        if "," in content and len(content.split("\n")) > 1:
            return "csv"

    return "unknown"


def validate_upload(file_name: str, size: int, max_bytes: int | None = None) -> FileType:
    """
    Check an upload before reading it.

    Args:
        file_name: Name of the uploaded file
        size: Size in bytes
        max_bytes: Size limit. Defaults to the configured limit.

    Returns:
        The file type detected from the extension

    Raises:
        FileTooLargeError: If the file exceeds the size limit
        UnsupportedFileTypeError: If the extension is not ydk, csv or txt
    """
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    if size > limit:
        raise FileTooLargeError(size, limit)

    file_type = detect_file_type(file_name)
    if file_type == "unknown":
        raise UnsupportedFileTypeError(file_name)

    return file_type
