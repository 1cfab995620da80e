"""Local filesystem implementation of FileReader and FileWriter."""

import json
import os
from typing import Any

from commons.errors import FileReadError


class LocalFileReader:
    """Read from local filesystem."""

    def read_bytes(self, path: str) -> bytes:
        if not path:
            raise FileReadError("No file provided")
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise FileReadError(f"File not found: {path}") from e
        except OSError as e:
            raise FileReadError(f"Cannot read {path}: {e}") from e

    def read_json(self, path: str) -> Any:
        if not os.path.exists(path):
            raise FileNotFoundError(f"JSON file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)


class LocalFileWriter:
    """Write to local filesystem."""

    def write_text(self, text: str, path: str, encoding: str = "utf-8") -> None:
        self.ensure_dir(path)
        # newline="" keeps CSV line endings exactly as rendered
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(text)

    def write_json(self, data: Any, path: str) -> None:
        if isinstance(data, str):
            data = json.loads(data)
        self.ensure_dir(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def ensure_dir(self, path: str) -> None:
        dirpath = os.path.dirname(path)
        if dirpath:
            os.makedirs(dirpath, exist_ok=True)
