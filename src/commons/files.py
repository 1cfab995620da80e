"""Input files: accepted types, upload descriptor, loaded content."""

import math
import os
from dataclasses import dataclass, field
from typing import Optional

from commons.errors import FileValidationError

VALID_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
VALID_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
VALID_PDF_TYPES = ("application/pdf",)
VALID_PDF_EXTENSIONS = (".pdf",)

ACCEPTED_TYPES = VALID_IMAGE_TYPES + VALID_PDF_TYPES
ACCEPTED_EXTENSIONS = VALID_IMAGE_EXTENSIONS + VALID_PDF_EXTENSIONS

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def file_extension(file_name: str) -> str:
    """Lower-cased extension with its dot, '' when there is none."""
    return os.path.splitext(file_name or "")[1].lower()


def is_valid_file_type(file_name: str, mime_type: Optional[str] = None) -> bool:
    """Accept when either the declared MIME type or the extension is a known image/PDF type."""
    if (mime_type or "").lower() in ACCEPTED_TYPES:
        return True
    return file_extension(file_name) in ACCEPTED_EXTENSIONS


def is_pdf(file_name: str, mime_type: Optional[str] = None) -> bool:
    if (mime_type or "").lower() in VALID_PDF_TYPES:
        return True
    return file_extension(file_name) in VALID_PDF_EXTENSIONS


def format_file_size(num_bytes: int) -> str:
    """Human-readable size as shown in the upload queue: 0 Bytes, 512 Bytes, 1.5 KB, 2.25 MB."""
    if num_bytes <= 0:
        return "0 Bytes"
    i = min(int(math.floor(math.log(num_bytes, 1024))), len(_SIZE_UNITS) - 1)
    value = round(num_bytes / (1024 ** i), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[i]}"


@dataclass
class InputFile:
    """An upload: where it lives, the name shown to the user, and its declared MIME type (may be missing)."""
    path: str
    name: str = ""
    mime_type: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            self.name = os.path.basename(self.path)

    @property
    def size(self) -> int:
        try:
            return os.path.getsize(self.path)
        except OSError:
            return 0


def validate_input_file(input_file: InputFile) -> InputFile:
    """Raise FileValidationError unless the file is an accepted image or PDF."""
    if not is_valid_file_type(input_file.name, input_file.mime_type):
        raise FileValidationError(input_file.name, input_file.mime_type)
    return input_file


@dataclass(frozen=True)
class LoadedFile:
    """File content in memory, ready for the OCR engine."""
    name: str
    content: bytes = field(repr=False)
    mime_type: Optional[str] = None

    @property
    def is_pdf(self) -> bool:
        return is_pdf(self.name, self.mime_type) or self.content[:5] == b"%PDF-"
