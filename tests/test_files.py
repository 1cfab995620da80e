"""Tests for commons.files."""

import pytest

from commons.errors import FileValidationError
from commons.files import (
    InputFile,
    LoadedFile,
    file_extension,
    format_file_size,
    is_valid_file_type,
    validate_input_file,
)


@pytest.mark.parametrize("name,mime", [
    ("scan.jpg", None),
    ("scan.JPEG", ""),
    ("scan.png", "application/octet-stream"),
    ("scan.gif", None),
    ("scan.webp", None),
    ("report.PDF", None),
    ("noext", "image/webp"),
    ("blob.bin", "APPLICATION/PDF"),
])
def test_accepted(name, mime):
    assert is_valid_file_type(name, mime)


@pytest.mark.parametrize("name,mime", [
    ("notes.txt", "text/plain"),
    ("archive.zip", None),
    ("noext", None),
    ("image.tiff", "image/tiff"),
])
def test_rejected(name, mime):
    assert not is_valid_file_type(name, mime)


def test_validate_input_file_raises(tmp_path):
    with pytest.raises(FileValidationError, match="Unsupported file type") as exc:
        validate_input_file(InputFile(path=str(tmp_path / "a.docx")))
    assert exc.value.file_name == "a.docx"
    assert isinstance(exc.value, ValueError)


def test_input_file_defaults(tmp_path):
    f = tmp_path / "a.png"
    f.write_bytes(b"12345")
    upload = InputFile(path=str(f))
    assert upload.name == "a.png"
    assert upload.size == 5
    assert InputFile(path=str(tmp_path / "missing.png")).size == 0


def test_file_extension():
    assert file_extension("a.b.JPG") == ".jpg"
    assert file_extension("noext") == ""


@pytest.mark.parametrize("size,expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1024 * 1024 * 2.25, "2.25 MB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_loaded_file_detects_pdf_by_content():
    assert LoadedFile(name="upload", content=b"%PDF-1.7 ...").is_pdf
    assert LoadedFile(name="x.pdf", content=b"").is_pdf
    assert not LoadedFile(name="x.jpg", content=b"\xff\xd8").is_pdf
