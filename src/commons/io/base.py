"""Protocols for file I/O. Implement these to add SharePoint, S3, etc."""

from typing import Any, Protocol


class FileReader(Protocol):
    """Read bytes or JSON from a source (local path, URL, etc.)."""

    def read_bytes(self, path: str) -> bytes:
        ...

    def read_json(self, path: str) -> Any:
        ...


class FileWriter(Protocol):
    """Write text or JSON to a destination."""

    def write_text(self, text: str, path: str, encoding: str = "utf-8") -> None:
        ...

    def write_json(self, data: Any, path: str) -> None:
        ...

    def ensure_dir(self, path: str) -> None:
        ...
